"""Application state: the current loan, its scenarios and validation errors.

The store owns one ``Loan`` value and replaces it on every change. Schedule and
summary are computed on demand from the current loan; the last schedule is
memoized against the loan value it was generated from.
"""

import logging
import uuid
from dataclasses import replace
from datetime import date
from decimal import Decimal

from amortizer.config import settings
from amortizer.engine.payment import InvalidTermError
from amortizer.engine.schedule import generate_amortization_schedule
from amortizer.engine.summary import calculate_loan_summary, calculate_savings
from amortizer.engine.validation import validate_loan
from amortizer.models.loan import ExtraPayment, Loan, PaymentFrequency, RateChange, make_rate_change
from amortizer.models.results import LoanSummary, PaymentSchedule, Savings, Scenario
from amortizer.store.schemas import LoanModel, ScenarioModel, StateSnapshot

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


def default_loan(start_date: date | None = None) -> Loan:
    """A fresh loan built from the configured defaults."""
    return Loan(
        id=_new_id(),
        principal=settings.default_principal,
        annual_rate=settings.default_annual_rate,
        term_years=settings.default_term_years,
        term_months=settings.default_term_months,
        start_date=start_date or date.today(),
        payment_frequency=PaymentFrequency(settings.default_payment_frequency),
    )


class LoanStore:
    def __init__(
        self,
        loan: Loan | None = None,
        scenarios: list[Scenario] | None = None,
        active_scenario_id: str | None = None,
        selected_currency: str | None = None,
    ):
        self.current_loan = loan or default_loan()
        self.scenarios: list[Scenario] = list(scenarios or [])
        self.active_scenario_id = active_scenario_id
        self.selected_currency = selected_currency or settings.default_currency
        self.errors: list[str] = validate_loan(self.current_loan)
        self._memo: tuple[Loan, tuple[PaymentSchedule, ...]] | None = None

    # ---- Derived values ----

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def schedule(self) -> tuple[PaymentSchedule, ...]:
        """Schedule of the current loan; empty when the term is not positive."""
        loan = self.current_loan
        if self._memo is not None and self._memo[0] == loan:
            return self._memo[1]

        try:
            schedule = generate_amortization_schedule(loan)
        except InvalidTermError as e:
            logger.warning("Cannot generate schedule for loan %s: %s", loan.id, e)
            schedule = ()

        self._memo = (loan, schedule)
        return schedule

    def summary(self, today: date | None = None) -> LoanSummary:
        return calculate_loan_summary(self.schedule(), self.current_loan, today=today)

    def baseline_savings(self) -> Savings:
        """Savings of the current interventions against the same loan without them."""
        try:
            baseline = generate_amortization_schedule(self.current_loan.without_interventions())
        except InvalidTermError as e:
            logger.warning("Cannot generate baseline for loan %s: %s", self.current_loan.id, e)
            return Savings()
        return calculate_savings(baseline, self.schedule())

    # ---- Loan updates ----

    def _set_loan(self, loan: Loan) -> None:
        self.current_loan = loan
        self.errors = validate_loan(loan)

    def update_loan(self, **changes) -> Loan:
        """Replace the current loan with a copy carrying ``changes``."""
        self._set_loan(replace(self.current_loan, **changes))
        return self.current_loan

    def add_extra_payment(self, month: int, amount: Decimal, description: str | None = None) -> ExtraPayment:
        payment = ExtraPayment(id=_new_id(), month=month, amount=amount, description=description)
        loan = self.current_loan
        self._set_loan(replace(loan, extra_payments=loan.extra_payments + (payment,)))
        return payment

    def remove_extra_payment(self, payment_id: str) -> None:
        loan = self.current_loan
        remaining = tuple(ep for ep in loan.extra_payments if ep.id != payment_id)
        self._set_loan(replace(loan, extra_payments=remaining))

    def add_rate_change(
        self,
        month: int,
        new_rate: Decimal,
        description: str | None = None,
        new_emi: Decimal | None = None,
        emi_increase_by: Decimal | None = None,
    ) -> RateChange:
        """Append a rate and/or EMI change at payment ``month``.

        With ``emi_increase_by`` and no ``new_emi``, the forced EMI is this
        month's payment in the current schedule plus the increase.

        Raises:
            ValueError: if an EMI increase targets a month with no payment.
        """
        if new_emi is None and emi_increase_by is not None and emi_increase_by > 0:
            current = self._payment_at(month)
            if current is None:
                raise ValueError(f"No payment {month} in the current schedule to increase")
            new_emi = current + emi_increase_by

        change = make_rate_change(
            id=_new_id(),
            month=month,
            new_rate=new_rate,
            new_emi=new_emi,
            emi_increase_by=emi_increase_by,
            description=description,
        )
        loan = self.current_loan
        self._set_loan(replace(loan, rate_changes=loan.rate_changes + (change,)))
        return change

    def remove_rate_change(self, change_id: str) -> None:
        loan = self.current_loan
        remaining = tuple(rc for rc in loan.rate_changes if rc.id != change_id)
        self._set_loan(replace(loan, rate_changes=remaining))

    def _payment_at(self, month: int) -> Decimal | None:
        for row in self.schedule():
            if row.payment_number == month:
                return row.payment_amount
        return None

    def reset_loan(self) -> None:
        self.current_loan = default_loan()
        self.active_scenario_id = None
        self.errors = []

    def clear_errors(self) -> None:
        self.errors = []

    def update_currency(self, currency: str) -> None:
        self.selected_currency = currency

    # ---- Scenarios ----

    def create_scenario(self, name: str) -> Scenario:
        """Freeze the current loan, schedule and summary under ``name`` and activate it."""
        loan = self.current_loan
        scenario = Scenario(
            id=_new_id(),
            name=name,
            loan=loan,
            schedule=self.schedule(),
            summary=self.summary(),
            is_modified=bool(loan.extra_payments or loan.rate_changes),
        )
        self.scenarios = [*self.scenarios, scenario]
        self.active_scenario_id = scenario.id
        return scenario

    def switch_scenario(self, scenario_id: str) -> Scenario | None:
        """Make a scenario's loan current. Unknown ids leave the state untouched."""
        scenario = next((s for s in self.scenarios if s.id == scenario_id), None)
        if scenario is None:
            logger.warning("Unknown scenario %s", scenario_id)
            return None
        self._set_loan(scenario.loan)
        self.active_scenario_id = scenario.id
        return scenario

    def delete_scenario(self, scenario_id: str) -> None:
        self.scenarios = [s for s in self.scenarios if s.id != scenario_id]
        if self.active_scenario_id == scenario_id:
            self.active_scenario_id = self.scenarios[0].id if self.scenarios else None

    # ---- Storage ----

    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(
            current_loan=LoanModel.from_domain(self.current_loan),
            scenarios=[ScenarioModel.from_domain(s) for s in self.scenarios],
            active_scenario_id=self.active_scenario_id,
            selected_currency=self.selected_currency,
        )

    @classmethod
    def from_snapshot(cls, snapshot: StateSnapshot) -> "LoanStore":
        return cls(
            loan=snapshot.current_loan.to_domain(),
            scenarios=[s.to_domain() for s in snapshot.scenarios],
            active_scenario_id=snapshot.active_scenario_id,
            selected_currency=snapshot.selected_currency,
        )

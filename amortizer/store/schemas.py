"""Pydantic schemas for the persisted application state.

Decimals serialise as strings and dates as ISO 8601, so a dumped snapshot
loads back into equal domain values.
"""

from datetime import date
from decimal import Decimal
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from amortizer.models.loan import (
    EMIOverride,
    ExtraPayment,
    Loan,
    PaymentFrequency,
    RateAndEMI,
    RateChange,
    RateOnly,
)
from amortizer.models.results import LoanSummary, PaymentSchedule, Scenario


# ---- Loan inputs ----

class ExtraPaymentModel(BaseModel):
    id: str
    month: int = Field(..., description="1-based payment index")
    amount: Decimal
    description: str | None = None

    @classmethod
    def from_domain(cls, ep: ExtraPayment) -> "ExtraPaymentModel":
        return cls(id=ep.id, month=ep.month, amount=ep.amount, description=ep.description)

    def to_domain(self) -> ExtraPayment:
        return ExtraPayment(id=self.id, month=self.month, amount=self.amount, description=self.description)


class RateOnlyModel(BaseModel):
    kind: Literal["rate_only"] = "rate_only"
    id: str
    month: int
    new_rate: Decimal
    description: str | None = None

    def to_domain(self) -> RateOnly:
        return RateOnly(id=self.id, month=self.month, new_rate=self.new_rate, description=self.description)


class EMIOverrideModel(BaseModel):
    kind: Literal["emi_override"] = "emi_override"
    id: str
    month: int
    new_emi: Decimal
    emi_increase_by: Decimal | None = None
    description: str | None = None

    def to_domain(self) -> EMIOverride:
        return EMIOverride(
            id=self.id,
            month=self.month,
            new_emi=self.new_emi,
            emi_increase_by=self.emi_increase_by,
            description=self.description,
        )


class RateAndEMIModel(BaseModel):
    kind: Literal["rate_and_emi"] = "rate_and_emi"
    id: str
    month: int
    new_rate: Decimal
    new_emi: Decimal
    emi_increase_by: Decimal | None = None
    description: str | None = None

    def to_domain(self) -> RateAndEMI:
        return RateAndEMI(
            id=self.id,
            month=self.month,
            new_rate=self.new_rate,
            new_emi=self.new_emi,
            emi_increase_by=self.emi_increase_by,
            description=self.description,
        )


RateChangeModel = Annotated[
    Union[RateOnlyModel, EMIOverrideModel, RateAndEMIModel],
    Field(discriminator="kind"),
]


def rate_change_to_model(rc: RateChange) -> RateOnlyModel | EMIOverrideModel | RateAndEMIModel:
    if isinstance(rc, RateOnly):
        return RateOnlyModel(id=rc.id, month=rc.month, new_rate=rc.new_rate, description=rc.description)
    if isinstance(rc, EMIOverride):
        return EMIOverrideModel(
            id=rc.id,
            month=rc.month,
            new_emi=rc.new_emi,
            emi_increase_by=rc.emi_increase_by,
            description=rc.description,
        )
    if isinstance(rc, RateAndEMI):
        return RateAndEMIModel(
            id=rc.id,
            month=rc.month,
            new_rate=rc.new_rate,
            new_emi=rc.new_emi,
            emi_increase_by=rc.emi_increase_by,
            description=rc.description,
        )
    raise TypeError(f"Unknown rate change type: {type(rc).__name__}")


class LoanModel(BaseModel):
    id: str
    principal: Decimal
    annual_rate: Decimal = Field(..., description="Nominal annual rate in percent")
    term_years: int
    term_months: int
    start_date: date
    payment_frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    extra_payments: list[ExtraPaymentModel] = Field(default_factory=list)
    rate_changes: list[RateChangeModel] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, loan: Loan) -> "LoanModel":
        return cls(
            id=loan.id,
            principal=loan.principal,
            annual_rate=loan.annual_rate,
            term_years=loan.term_years,
            term_months=loan.term_months,
            start_date=loan.start_date,
            payment_frequency=loan.payment_frequency,
            extra_payments=[ExtraPaymentModel.from_domain(ep) for ep in loan.extra_payments],
            rate_changes=[rate_change_to_model(rc) for rc in loan.rate_changes],
        )

    def to_domain(self) -> Loan:
        return Loan(
            id=self.id,
            principal=self.principal,
            annual_rate=self.annual_rate,
            term_years=self.term_years,
            term_months=self.term_months,
            start_date=self.start_date,
            payment_frequency=self.payment_frequency,
            extra_payments=tuple(ep.to_domain() for ep in self.extra_payments),
            rate_changes=tuple(rc.to_domain() for rc in self.rate_changes),
        )


# ---- Derived results ----

class PaymentScheduleModel(BaseModel):
    payment_number: int
    date: date
    payment_amount: Decimal
    principal_amount: Decimal
    interest_amount: Decimal
    remaining_balance: Decimal
    cumulative_interest: Decimal
    cumulative_principal: Decimal

    @classmethod
    def from_domain(cls, row: PaymentSchedule) -> "PaymentScheduleModel":
        return cls(
            payment_number=row.payment_number,
            date=row.date,
            payment_amount=row.payment_amount,
            principal_amount=row.principal_amount,
            interest_amount=row.interest_amount,
            remaining_balance=row.remaining_balance,
            cumulative_interest=row.cumulative_interest,
            cumulative_principal=row.cumulative_principal,
        )

    def to_domain(self) -> PaymentSchedule:
        return PaymentSchedule(**self.model_dump())


class LoanSummaryModel(BaseModel):
    total_payments: int
    total_interest: Decimal
    total_principal: Decimal
    monthly_payment: Decimal
    payoff_date: date
    total_cost: Decimal

    @classmethod
    def from_domain(cls, summary: LoanSummary) -> "LoanSummaryModel":
        return cls(
            total_payments=summary.total_payments,
            total_interest=summary.total_interest,
            total_principal=summary.total_principal,
            monthly_payment=summary.monthly_payment,
            payoff_date=summary.payoff_date,
            total_cost=summary.total_cost,
        )

    def to_domain(self) -> LoanSummary:
        return LoanSummary(**self.model_dump())


class ScenarioModel(BaseModel):
    id: str
    name: str
    loan: LoanModel
    schedule: list[PaymentScheduleModel] = Field(default_factory=list)
    summary: LoanSummaryModel
    is_modified: bool = False

    @classmethod
    def from_domain(cls, scenario: Scenario) -> "ScenarioModel":
        return cls(
            id=scenario.id,
            name=scenario.name,
            loan=LoanModel.from_domain(scenario.loan),
            schedule=[PaymentScheduleModel.from_domain(row) for row in scenario.schedule],
            summary=LoanSummaryModel.from_domain(scenario.summary),
            is_modified=scenario.is_modified,
        )

    def to_domain(self) -> Scenario:
        return Scenario(
            id=self.id,
            name=self.name,
            loan=self.loan.to_domain(),
            schedule=tuple(row.to_domain() for row in self.schedule),
            summary=self.summary.to_domain(),
            is_modified=self.is_modified,
        )


# ---- Stored blob ----

class StateSnapshot(BaseModel):
    current_loan: LoanModel
    scenarios: list[ScenarioModel] = Field(default_factory=list)
    active_scenario_id: str | None = None
    selected_currency: str | None = Field(None, description="Display label only")

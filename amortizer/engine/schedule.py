"""Amortization schedule generation with extra payments and rate/EMI changes.

Pure functions: Loan in, tuple of PaymentSchedule rows out. No I/O.

The generator folds over payment indices 1..total_months, carrying an
immutable accumulator. Each step first applies the rate changes registered
for that index, then books one period's interest and principal.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Iterable

from dateutil.relativedelta import relativedelta

from amortizer.engine.payment import calculate_monthly_payment, frequency_multiplier, to_cents
from amortizer.models.loan import ExtraPayment, Loan, PaymentFrequency, RateChange
from amortizer.models.results import PaymentSchedule

logger = logging.getLogger(__name__)

_PERIOD_STEP = {
    PaymentFrequency.MONTHLY: relativedelta(months=1),  # Clamps to month end
    PaymentFrequency.BI_WEEKLY: relativedelta(weeks=2),
    PaymentFrequency.WEEKLY: relativedelta(weeks=1),
}


@dataclass(frozen=True)
class _Accumulator:
    remaining_balance: Decimal
    cumulative_interest: Decimal
    cumulative_principal: Decimal
    current_date: date
    current_rate: Decimal
    current_emi: Decimal


def _first_extra_payment_by_month(extra_payments: Iterable[ExtraPayment]) -> dict[int, ExtraPayment]:
    """Map each month to its first extra payment in month order.

    Later records for an already-seen month are ignored.
    """
    by_month: dict[int, ExtraPayment] = {}
    for ep in sorted(extra_payments, key=lambda e: e.month):
        by_month.setdefault(ep.month, ep)
    return by_month


def _rate_changes_by_month(rate_changes: Iterable[RateChange]) -> dict[int, list[RateChange]]:
    by_month: dict[int, list[RateChange]] = {}
    for rc in sorted(rate_changes, key=lambda c: c.month):
        by_month.setdefault(rc.month, []).append(rc)
    return by_month


def _apply_rate_changes(
    acc: _Accumulator,
    changes: Iterable[RateChange],
    month: int,
    total_months: int,
    multiplier: Decimal,
) -> _Accumulator:
    for change in changes:
        rate = change.rate_update if change.rate_update is not None else acc.current_rate
        if change.emi_update is not None:
            emi = change.emi_update
        else:
            months_left = total_months - month + 1
            emi = calculate_monthly_payment(acc.remaining_balance, rate, months_left) * multiplier
        logger.debug("Month %d: rate %s -> %s, installment %s -> %s",
                     month, acc.current_rate, rate, acc.current_emi, emi)
        acc = replace(acc, current_rate=rate, current_emi=emi)
    return acc


def _book_period(
    acc: _Accumulator,
    month: int,
    extra: ExtraPayment | None,
    step: relativedelta,
) -> tuple[_Accumulator, PaymentSchedule]:
    interest = acc.remaining_balance * (acc.current_rate / 12 / 100)
    principal = acc.current_emi - interest

    # EMI below interest: pay the interest, the balance stays put
    if principal < 0:
        logger.debug("Month %d: installment %s below interest %s", month, acc.current_emi, interest)
        principal = Decimal("0")

    if extra is not None:
        logger.debug("Month %d: extra payment %s (%s)", month, extra.amount, extra.id)
        principal += extra.amount

    # No overpayment
    if principal > acc.remaining_balance:
        principal = acc.remaining_balance

    payment = principal + interest
    balance = max(acc.remaining_balance - principal, Decimal("0"))
    cumulative_interest = acc.cumulative_interest + interest
    cumulative_principal = acc.cumulative_principal + principal

    row = PaymentSchedule(
        payment_number=month,
        date=acc.current_date,
        payment_amount=to_cents(payment),
        principal_amount=to_cents(principal),
        interest_amount=to_cents(interest),
        remaining_balance=to_cents(balance),
        cumulative_interest=to_cents(cumulative_interest),
        cumulative_principal=to_cents(cumulative_principal),
    )
    acc = replace(
        acc,
        remaining_balance=balance,
        cumulative_interest=cumulative_interest,
        cumulative_principal=cumulative_principal,
        current_date=acc.current_date + step,
    )
    return acc, row


def generate_amortization_schedule(loan: Loan) -> tuple[PaymentSchedule, ...]:
    """Generate the payment ledger from the first payment to payoff or term end.

    The installment is the monthly payment over the full term scaled by the
    payment frequency multiplier. A schedule that pays off early is shorter
    than ``loan.total_months``.

    Raises:
        InvalidTermError: if the loan's combined term is not positive.
    """
    total_months = loan.total_months
    multiplier = frequency_multiplier(loan.payment_frequency)
    installment = calculate_monthly_payment(loan.principal, loan.annual_rate, total_months) * multiplier
    step = _PERIOD_STEP[loan.payment_frequency]

    extra_by_month = _first_extra_payment_by_month(loan.extra_payments)
    changes_by_month = _rate_changes_by_month(loan.rate_changes)

    acc = _Accumulator(
        remaining_balance=loan.principal,
        cumulative_interest=Decimal("0"),
        cumulative_principal=Decimal("0"),
        current_date=loan.start_date,
        current_rate=loan.annual_rate,
        current_emi=installment,
    )

    rows: list[PaymentSchedule] = []
    for month in range(1, total_months + 1):
        acc = _apply_rate_changes(acc, changes_by_month.get(month, ()), month, total_months, multiplier)
        acc, row = _book_period(acc, month, extra_by_month.get(month), step)
        rows.append(row)

        if acc.remaining_balance <= 0:
            if month < total_months:
                logger.debug("Loan %s paid off at payment %d of %d", loan.id, month, total_months)
            break

    return tuple(rows)

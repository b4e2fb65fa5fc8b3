"""Schedule reductions: loan summary and baseline-vs-modified savings.

Pure functions. Empty schedules degrade to zeroed results.
"""

from datetime import date
from decimal import Decimal
from typing import Sequence

from amortizer.engine.payment import to_cents
from amortizer.models.loan import Loan
from amortizer.models.results import LoanSummary, PaymentSchedule, Savings

ZERO = Decimal("0")


def calculate_loan_summary(
    schedule: Sequence[PaymentSchedule],
    loan: Loan,
    today: date | None = None,
) -> LoanSummary:
    """Top-line totals for a generated schedule.

    ``total_principal`` is the loan's nominal principal, not the sum of
    principal paid. ``monthly_payment`` is the first period's installment
    regardless of payment frequency. ``today`` stands in for the payoff date
    of an empty schedule.
    """
    total_interest = schedule[-1].cumulative_interest if schedule else ZERO
    total_principal = loan.principal

    return LoanSummary(
        total_payments=len(schedule),
        total_interest=total_interest,
        total_principal=total_principal,
        monthly_payment=schedule[0].payment_amount if schedule else ZERO,
        payoff_date=schedule[-1].date if schedule else (today or date.today()),
        total_cost=total_principal + total_interest,
    )


def calculate_savings(
    original_schedule: Sequence[PaymentSchedule],
    modified_schedule: Sequence[PaymentSchedule],
) -> Savings:
    """Interest, periods and first-payment difference of original minus modified.

    ``interest_saved`` is negative when the modification costs more interest.
    """
    original_interest = original_schedule[-1].cumulative_interest if original_schedule else ZERO
    modified_interest = modified_schedule[-1].cumulative_interest if modified_schedule else ZERO
    original_payment = original_schedule[0].payment_amount if original_schedule else ZERO
    modified_payment = modified_schedule[0].payment_amount if modified_schedule else ZERO

    return Savings(
        interest_saved=to_cents(original_interest - modified_interest),
        time_saved=len(original_schedule) - len(modified_schedule),
        payment_reduced=to_cents(original_payment - modified_payment),
    )


def calculate_remaining_balance(schedule: Sequence[PaymentSchedule], month: int) -> Decimal:
    """Balance left after payment ``month``; zero when the schedule has no such row."""
    for row in schedule:
        if row.payment_number == month:
            return row.remaining_balance
    return ZERO

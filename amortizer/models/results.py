from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from amortizer.models.loan import Loan


@dataclass(frozen=True)
class PaymentSchedule:
    """One ledger row. All money fields are rounded to the cent."""
    payment_number: int
    date: date
    payment_amount: Decimal
    principal_amount: Decimal
    interest_amount: Decimal
    remaining_balance: Decimal
    cumulative_interest: Decimal
    cumulative_principal: Decimal


@dataclass(frozen=True)
class LoanSummary:
    total_payments: int
    total_interest: Decimal
    total_principal: Decimal
    monthly_payment: Decimal  # First period's installment, whatever the frequency
    payoff_date: date
    total_cost: Decimal


@dataclass(frozen=True)
class Savings:
    """Baseline minus modified. Positive values favour the modified schedule."""
    interest_saved: Decimal = Decimal("0")
    time_saved: int = 0  # Periods
    payment_reduced: Decimal = Decimal("0")


@dataclass(frozen=True)
class Scenario:
    """Named snapshot of a loan with its schedule and summary at creation time."""
    id: str
    name: str
    loan: Loan
    schedule: tuple[PaymentSchedule, ...]
    summary: LoanSummary
    is_modified: bool = False

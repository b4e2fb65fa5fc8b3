"""Periodic payment calculation.

Pure functions. No I/O.
"""

from decimal import Decimal, ROUND_HALF_UP

from amortizer.models.loan import PaymentFrequency

TWO_PLACES = Decimal("0.01")

_FREQUENCY_MULTIPLIERS = {
    PaymentFrequency.MONTHLY: Decimal("1"),
    PaymentFrequency.BI_WEEKLY: Decimal("26") / Decimal("12"),  # 26 payments/yr over 12 months
    PaymentFrequency.WEEKLY: Decimal("52") / Decimal("12"),
}


class InvalidTermError(ValueError):
    """Raised when a payment is requested over zero or negative months."""


def to_cents(amount: Decimal) -> Decimal:
    """Round half away from zero at the cent."""
    return amount.quantize(TWO_PLACES, ROUND_HALF_UP)


def calculate_monthly_payment(principal: Decimal, annual_rate: Decimal, term_months: int) -> Decimal:
    """Fixed monthly payment for ``principal`` at ``annual_rate`` percent.

    M = P * [r(1+r)^n] / [(1+r)^n - 1], with r = annual_rate / 12 / 100,
    rounded to the cent. A zero rate gives the straight-line P / n, left
    unrounded so it divides evenly over the term.
    """
    if term_months <= 0:
        raise InvalidTermError(f"Term must be at least one month, got {term_months}")
    if annual_rate == 0:
        return principal / term_months

    r = annual_rate / 12 / 100
    factor = (1 + r) ** term_months
    payment = principal * (r * factor) / (factor - 1)
    return to_cents(payment)


def frequency_multiplier(frequency: PaymentFrequency) -> Decimal:
    """Scale from the monthly-equivalent payment to the periodic installment."""
    return _FREQUENCY_MULTIPLIERS[frequency]

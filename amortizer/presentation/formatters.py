"""Display formatting for amounts, rates, dates and terms.

Currency is a label only: amounts are never converted.
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation

from amortizer.engine.payment import to_cents
from amortizer.models.loan import PaymentFrequency

CURRENCY_SYMBOLS = {
    "USD": "$",
    "INR": "₹",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}

_FREQUENCY_LABELS = {
    PaymentFrequency.MONTHLY: "Monthly",
    PaymentFrequency.BI_WEEKLY: "Bi-weekly",
    PaymentFrequency.WEEKLY: "Weekly",
}


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'}"


def format_currency(amount: Decimal | float, currency: str = "USD") -> str:
    """``-1234.5`` -> ``-$1,234.50``; unknown codes are prefixed verbatim."""
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    cents = to_cents(Decimal(amount))
    sign = "-" if cents < 0 else ""
    return f"{sign}{symbol}{abs(cents):,.2f}"


def format_percentage(value: Decimal | float, decimals: int = 2) -> str:
    return f"{float(value):.{decimals}f}%"


def format_date(d: date) -> str:
    return d.strftime("%b %d, %Y")


def format_large_number(num: Decimal | float) -> str:
    """Abbreviate with K/M/B above a thousand."""
    value = float(num)
    for threshold, suffix in ((1e9, "B"), (1e6, "M"), (1e3, "K")):
        if value >= threshold:
            return f"{value / threshold:.1f}{suffix}"
    return f"{num}"


def format_payment_frequency(frequency: PaymentFrequency) -> str:
    return _FREQUENCY_LABELS[frequency]


def format_loan_term(years: int, months: int) -> str:
    parts = []
    if years > 0:
        parts.append(_plural(years, "year"))
    if months > 0:
        parts.append(_plural(months, "month"))
    return " and ".join(parts) or "0 months"


def format_duration(months: int) -> str:
    """Periods as years and months, e.g. 23 -> '1 year and 11 months'."""
    years, rest = divmod(months, 12)
    if years == 0:
        return _plural(rest, "month")
    if rest == 0:
        return _plural(years, "year")
    return f"{_plural(years, 'year')} and {_plural(rest, 'month')}"


def _parse_decimal(cleaned: str) -> Decimal:
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return Decimal("0")


def parse_currency(value: str) -> Decimal:
    """Strip currency symbols and thousands separators; unparseable input is 0."""
    return _parse_decimal(re.sub(r"[^\d.\-]", "", value))


def parse_percentage(value: str) -> Decimal:
    return _parse_decimal(value.replace("%", "").strip())

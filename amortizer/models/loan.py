"""Loan input types: the loan definition and its interventions."""

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class PaymentFrequency(Enum):
    MONTHLY = "monthly"
    BI_WEEKLY = "bi-weekly"
    WEEKLY = "weekly"


@dataclass(frozen=True)
class ExtraPayment:
    """One-time principal contribution at a payment sequence number."""
    id: str
    month: int  # 1-based payment index, not a calendar month
    amount: Decimal
    description: Optional[str] = None


@dataclass(frozen=True)
class RateOnly:
    """New rate from ``month`` on; the installment is recalculated."""
    id: str
    month: int
    new_rate: Decimal  # Percent; <= 0 keeps the rate in effect
    description: Optional[str] = None

    @property
    def rate_update(self) -> Decimal | None:
        return self.new_rate if self.new_rate > 0 else None

    @property
    def emi_update(self) -> Decimal | None:
        return None


@dataclass(frozen=True)
class EMIOverride:
    """Forced installment from ``month`` on; the rate is left alone."""
    id: str
    month: int
    new_emi: Decimal
    emi_increase_by: Optional[Decimal] = None
    description: Optional[str] = None

    @property
    def rate_update(self) -> Decimal | None:
        return None

    @property
    def emi_update(self) -> Decimal | None:
        return self.new_emi if self.new_emi > 0 else None


@dataclass(frozen=True)
class RateAndEMI:
    """New rate and forced installment, both from ``month`` on."""
    id: str
    month: int
    new_rate: Decimal
    new_emi: Decimal
    emi_increase_by: Optional[Decimal] = None
    description: Optional[str] = None

    @property
    def rate_update(self) -> Decimal | None:
        return self.new_rate if self.new_rate > 0 else None

    @property
    def emi_update(self) -> Decimal | None:
        return self.new_emi if self.new_emi > 0 else None


RateChange = Union[RateOnly, EMIOverride, RateAndEMI]


def make_rate_change(
    id: str,
    month: int,
    new_rate: Decimal,
    new_emi: Decimal | None = None,
    emi_increase_by: Decimal | None = None,
    description: str | None = None,
) -> RateChange:
    """Pick the RateChange variant matching the fields that carry a value.

    An EMI that is absent or not positive means "no EMI override". A rate that
    is not positive alongside an EMI means the rate is left unchanged.
    """
    if new_emi is None or new_emi <= 0:
        return RateOnly(id=id, month=month, new_rate=new_rate, description=description)
    if new_rate <= 0:
        return EMIOverride(
            id=id,
            month=month,
            new_emi=new_emi,
            emi_increase_by=emi_increase_by,
            description=description,
        )
    return RateAndEMI(
        id=id,
        month=month,
        new_rate=new_rate,
        new_emi=new_emi,
        emi_increase_by=emi_increase_by,
        description=description,
    )


@dataclass(frozen=True)
class Loan:
    id: str
    principal: Decimal
    annual_rate: Decimal  # Percent, e.g. Decimal("4.5")
    term_years: int
    term_months: int
    start_date: date  # Date of the first payment
    payment_frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    extra_payments: tuple[ExtraPayment, ...] = ()
    rate_changes: tuple[RateChange, ...] = ()

    @property
    def total_months(self) -> int:
        return self.term_years * 12 + self.term_months

    def without_interventions(self) -> "Loan":
        """Baseline copy of this loan with no extra payments or rate changes."""
        return replace(self, extra_payments=(), rate_changes=())


@dataclass(frozen=True)
class LoanDraft:
    """A partially filled loan, as entered in a form. ``None`` means absent."""
    principal: Optional[Decimal] = None
    annual_rate: Optional[Decimal] = None
    term_years: Optional[int] = None
    term_months: Optional[int] = None
    start_date: Optional[date] = None
    payment_frequency: Optional[PaymentFrequency] = None
    extra_payments: tuple[ExtraPayment, ...] = ()
    rate_changes: tuple[RateChange, ...] = ()

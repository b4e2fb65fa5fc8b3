"""Canonical test fixtures used across all tests.

Fixture: 300K loan, 4.5% annual rate, 30yr, monthly payments from 2024-01-01.
"""

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal

from amortizer.models.loan import ExtraPayment, Loan, PaymentFrequency
from amortizer.store.loan_store import LoanStore


@pytest.fixture
def sample_loan() -> Loan:
    """300K at 4.5% over 360 months, no interventions."""
    return Loan(
        id="test-1",
        principal=Decimal("300000"),
        annual_rate=Decimal("4.5"),
        term_years=30,
        term_months=0,
        start_date=date(2024, 1, 1),
        payment_frequency=PaymentFrequency.MONTHLY,
    )


@pytest.fixture
def loan_with_bonus(sample_loan) -> Loan:
    """Sample loan with a 10K lump sum at payment 12."""
    return replace(
        sample_loan,
        extra_payments=(ExtraPayment(id="extra-1", month=12, amount=Decimal("10000"), description="Bonus"),),
    )


@pytest.fixture
def store(sample_loan) -> LoanStore:
    return LoanStore(loan=sample_loan, selected_currency="USD")

"""Loan parameter sanity checks.

Returns human-readable messages instead of raising, so a form can show every
problem with an in-progress edit at once.
"""

from amortizer.models.loan import Loan, LoanDraft

PRINCIPAL_REQUIRED = "Principal amount must be greater than 0"
RATE_NON_NEGATIVE = "Annual rate must be 0 or greater"
TERM_REQUIRED = "Loan term must be specified"
YEARS_NON_NEGATIVE = "Years must be 0 or greater"
MONTHS_NON_NEGATIVE = "Months must be 0 or greater"
TERM_POSITIVE = "Loan term must be greater than 0"


def validate_loan(loan: Loan | LoanDraft) -> list[str]:
    """Return the validation errors for a complete or partial loan, in check order."""
    errors: list[str] = []

    if loan.principal is None or loan.principal <= 0:
        errors.append(PRINCIPAL_REQUIRED)

    # Zero is a valid rate
    if loan.annual_rate is None or loan.annual_rate < 0:
        errors.append(RATE_NON_NEGATIVE)

    years, months = loan.term_years, loan.term_months
    if years is None and months is None:
        errors.append(TERM_REQUIRED)
    if years is not None and years < 0:
        errors.append(YEARS_NON_NEGATIVE)
    if months is not None and months < 0:
        errors.append(MONTHS_NON_NEGATIVE)
    if not years and not months:
        errors.append(TERM_POSITIVE)

    return errors

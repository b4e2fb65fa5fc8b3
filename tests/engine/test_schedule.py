from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from amortizer.engine.payment import InvalidTermError
from amortizer.engine.schedule import generate_amortization_schedule
from amortizer.models.loan import (
    EMIOverride,
    ExtraPayment,
    Loan,
    PaymentFrequency,
    RateOnly,
)


def _assert_ledger_invariants(schedule, loan: Loan) -> None:
    previous = None
    for row in schedule:
        assert row.remaining_balance >= 0
        if previous is not None:
            assert row.remaining_balance <= previous.remaining_balance
            assert row.cumulative_interest >= previous.cumulative_interest
            assert row.cumulative_principal >= previous.cumulative_principal
        previous = row
    extras = sum((ep.amount for ep in loan.extra_payments), Decimal("0"))
    assert schedule[-1].cumulative_principal <= loan.principal + extras


class TestBaseSchedule:
    def test_payment_count(self, sample_loan):
        schedule = generate_amortization_schedule(sample_loan)
        assert len(schedule) == 360

    def test_first_payment_breakdown(self, sample_loan):
        first = generate_amortization_schedule(sample_loan)[0]
        # 300000 * 4.5% / 12 = 1125.00
        assert first.payment_number == 1
        assert first.date == date(2024, 1, 1)
        assert first.payment_amount == Decimal("1520.06")
        assert first.interest_amount == Decimal("1125.00")
        assert first.principal_amount == Decimal("395.06")
        assert first.remaining_balance == Decimal("299604.94")

    def test_final_balance_zero(self, sample_loan):
        last = generate_amortization_schedule(sample_loan)[-1]
        assert last.remaining_balance == Decimal("0.00")
        assert last.cumulative_principal == Decimal("300000.00")
        assert last.date == date(2053, 12, 1)

    def test_last_payment_absorbs_rounding(self, sample_loan):
        """The rounded-up installment overpays slightly, so the last payment is smaller."""
        last = generate_amortization_schedule(sample_loan)[-1]
        assert last.payment_amount == Decimal("1516.97")
        assert last.cumulative_interest == Decimal("247218.51")

    def test_recomputed_fresh_each_call(self, sample_loan):
        assert generate_amortization_schedule(sample_loan) == generate_amortization_schedule(sample_loan)

    def test_ledger_invariants(self, sample_loan):
        _assert_ledger_invariants(generate_amortization_schedule(sample_loan), sample_loan)

    def test_term_end_without_payoff(self):
        """Short loans can end the term with a few cents of rounding left."""
        loan = Loan(
            id="short",
            principal=Decimal("10000"),
            annual_rate=Decimal("6"),
            term_years=1,
            term_months=0,
            start_date=date(2024, 1, 1),
        )
        schedule = generate_amortization_schedule(loan)
        assert len(schedule) == 12
        assert schedule[0].payment_amount == Decimal("860.66")
        assert schedule[-1].remaining_balance == Decimal("0.05")

    def test_zero_term_raises(self, sample_loan):
        with pytest.raises(InvalidTermError):
            generate_amortization_schedule(replace(sample_loan, term_years=0, term_months=0))


class TestExtraPayments:
    def test_extra_payment_adds_principal(self, loan_with_bonus):
        schedule = generate_amortization_schedule(loan_with_bonus)
        row = schedule[11]
        assert row.payment_number == 12
        assert row.principal_amount > Decimal("395.06")
        assert row.principal_amount == Decimal("10411.67")
        assert row.payment_amount == Decimal("11520.06")

    def test_early_payoff_truncates(self, loan_with_bonus):
        schedule = generate_amortization_schedule(loan_with_bonus)
        assert len(schedule) == 337
        assert schedule[-1].remaining_balance == Decimal("0.00")
        assert schedule[-1].cumulative_interest == Decimal("221940.95")
        _assert_ledger_invariants(schedule, loan_with_bonus)

    def test_only_first_extra_payment_per_month_applies(self, loan_with_bonus):
        doubled = replace(
            loan_with_bonus,
            extra_payments=loan_with_bonus.extra_payments
            + (ExtraPayment(id="extra-2", month=12, amount=Decimal("5000")),),
        )
        single = generate_amortization_schedule(loan_with_bonus)
        assert generate_amortization_schedule(doubled) == single

    def test_unsorted_extra_payments(self, sample_loan):
        loan = replace(
            sample_loan,
            extra_payments=(
                ExtraPayment(id="b", month=24, amount=Decimal("1000")),
                ExtraPayment(id="a", month=12, amount=Decimal("10000")),
            ),
        )
        schedule = generate_amortization_schedule(loan)
        assert schedule[11].principal_amount == Decimal("10411.67")
        assert schedule[23].principal_amount > Decimal("1000")

    def test_overpayment_clamped_to_balance(self):
        loan = Loan(
            id="payoff",
            principal=Decimal("100000"),
            annual_rate=Decimal("6"),
            term_years=1,
            term_months=0,
            start_date=date(2024, 1, 1),
            extra_payments=(ExtraPayment(id="big", month=6, amount=Decimal("200000")),),
        )
        schedule = generate_amortization_schedule(loan)
        assert len(schedule) == 6
        assert schedule[-1].remaining_balance == Decimal("0.00")
        assert schedule[-1].principal_amount == Decimal("59059.44")
        assert schedule[-1].payment_amount == Decimal("59354.73")
        assert schedule[-1].cumulative_principal == Decimal("100000.00")


class TestRateChanges:
    def test_new_rate_recalculates_installment(self, sample_loan):
        loan = replace(sample_loan, rate_changes=(RateOnly(id="rc", month=13, new_rate=Decimal("6")),))
        schedule = generate_amortization_schedule(loan)
        assert schedule[11].payment_amount == Decimal("1520.06")
        row = schedule[12]
        assert row.payment_amount == Decimal("1791.64")
        assert row.interest_amount == Decimal("1475.80")
        assert row.principal_amount == Decimal("315.84")
        assert len(schedule) == 360

    def test_emi_override_keeps_rate(self, sample_loan):
        loan = replace(sample_loan, rate_changes=(EMIOverride(id="emi", month=13, new_emi=Decimal("2000")),))
        schedule = generate_amortization_schedule(loan)
        row = schedule[12]
        assert row.payment_amount == Decimal("2000.00")
        assert row.interest_amount == Decimal("1106.85")
        assert row.principal_amount == Decimal("893.15")
        assert len(schedule) == 228
        _assert_ledger_invariants(schedule, loan)

    def test_zero_rate_change_recalculates_at_current_rate(self, sample_loan):
        loan = replace(sample_loan, rate_changes=(RateOnly(id="rc", month=13, new_rate=Decimal("0")),))
        row = generate_amortization_schedule(loan)[12]
        assert row.payment_amount == Decimal("1520.06")
        assert row.interest_amount == Decimal("1106.85")
        assert row.principal_amount == Decimal("413.21")

    def test_same_month_changes_apply_in_order(self, sample_loan):
        loan = replace(
            sample_loan,
            rate_changes=(
                RateOnly(id="first", month=13, new_rate=Decimal("6")),
                EMIOverride(id="second", month=13, new_emi=Decimal("2500")),
            ),
        )
        row = generate_amortization_schedule(loan)[12]
        # Rate from the first record, installment from the second
        assert row.interest_amount == Decimal("1475.80")
        assert row.payment_amount == Decimal("2500.00")

    def test_emi_below_interest_keeps_balance(self, sample_loan):
        loan = replace(sample_loan, rate_changes=(EMIOverride(id="low", month=13, new_emi=Decimal("500")),))
        schedule = generate_amortization_schedule(loan)
        assert schedule[11].remaining_balance == Decimal("295160.27")
        row = schedule[12]
        # Interest is paid in full, nothing goes to principal
        assert row.payment_amount == Decimal("1106.85")
        assert row.interest_amount == Decimal("1106.85")
        assert row.principal_amount == Decimal("0.00")
        assert row.remaining_balance == Decimal("295160.27")
        assert len(schedule) == 360
        assert schedule[-1].remaining_balance == Decimal("295160.27")
        _assert_ledger_invariants(schedule, loan)

    def test_zero_rate_loan_stays_straight_line(self):
        loan = Loan(
            id="zero",
            principal=Decimal("12000"),
            annual_rate=Decimal("0"),
            term_years=1,
            term_months=0,
            start_date=date(2024, 1, 1),
            extra_payments=(ExtraPayment(id="ep", month=3, amount=Decimal("3000")),),
            rate_changes=(RateOnly(id="rc", month=4, new_rate=Decimal("0")),),
        )
        schedule = generate_amortization_schedule(loan)
        assert schedule[0].payment_amount == Decimal("1000.00")
        assert schedule[2].payment_amount == Decimal("4000.00")
        # 6000 left over 9 months
        assert schedule[3].payment_amount == Decimal("666.67")
        assert all(row.interest_amount == Decimal("0.00") for row in schedule)
        assert len(schedule) == 12
        assert schedule[-1].remaining_balance == Decimal("0.00")


class TestPaymentFrequency:
    def test_bi_weekly(self, sample_loan):
        loan = replace(sample_loan, payment_frequency=PaymentFrequency.BI_WEEKLY)
        schedule = generate_amortization_schedule(loan)
        # 1520.06 * 26 / 12
        assert schedule[0].payment_amount == Decimal("3293.46")
        assert schedule[1].date == date(2024, 1, 15)
        assert len(schedule) == 112
        _assert_ledger_invariants(schedule, loan)

    def test_bi_weekly_rate_change_keeps_multiplier(self, sample_loan):
        loan = replace(
            sample_loan,
            payment_frequency=PaymentFrequency.BI_WEEKLY,
            rate_changes=(RateOnly(id="rc", month=13, new_rate=Decimal("6")),),
        )
        schedule = generate_amortization_schedule(loan)
        assert schedule[11].remaining_balance == Decimal("273434.98")
        row = schedule[12]
        # 1659.76 over the remaining 348 periods, times 26 / 12
        assert row.payment_amount == Decimal("3596.15")
        assert row.interest_amount == Decimal("1367.17")
        assert row.principal_amount == Decimal("2228.97")
        assert len(schedule) == 108
        _assert_ledger_invariants(schedule, loan)

    def test_weekly(self, sample_loan):
        loan = replace(sample_loan, payment_frequency=PaymentFrequency.WEEKLY)
        schedule = generate_amortization_schedule(loan)
        assert schedule[0].payment_amount == Decimal("6586.93")
        assert schedule[1].date == date(2024, 1, 8)
        assert len(schedule) == 51

    def test_monthly_dates_clamp_to_month_end(self, sample_loan):
        loan = replace(sample_loan, start_date=date(2024, 1, 31))
        schedule = generate_amortization_schedule(loan)
        assert schedule[1].date == date(2024, 2, 29)
        # Each step starts from the previous date
        assert schedule[2].date == date(2024, 3, 29)

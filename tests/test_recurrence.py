"""Recurrence projector tests: step table, next occurrence and month contribution."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest

from moneyflow.domain.records import (
    Anchored,
    Frequency,
    MissingAnchorError,
    PaymentFrequency,
    RecurringItem,
    Renewing,
    SemiMonthly,
)
from moneyflow.services.recurrence import (
    add_months,
    advance,
    debt_monthly_contribution,
    month_bounds,
    monthly_contribution,
    next_debt_payment,
    next_occurrence,
    occurrences_between,
)

TODAY = date(2025, 6, 15)
JUNE = month_bounds(2025, 6)


class TestStepAdvance:
    def test_day_based_steps(self):
        start = date(2025, 6, 1)
        assert advance(start, Frequency.DAILY) == date(2025, 6, 2)
        assert advance(start, Frequency.WEEKLY) == date(2025, 6, 8)
        assert advance(start, Frequency.BI_WEEKLY) == date(2025, 6, 15)
        assert advance(start, Frequency.BI_WEEKLY, 3) == date(2025, 7, 13)

    def test_month_steps_clamp_without_drift(self):
        start = date(2025, 1, 31)
        assert advance(start, Frequency.MONTHLY, 1) == date(2025, 2, 28)
        # Computed from the anchor, so March keeps the 31st.
        assert advance(start, Frequency.MONTHLY, 2) == date(2025, 3, 31)
        assert advance(start, Frequency.QUARTERLY) == date(2025, 4, 30)

    def test_yearly_from_leap_day(self):
        assert advance(date(2024, 2, 29), Frequency.YEARLY) == date(2025, 2, 28)
        assert advance(date(2024, 2, 29), Frequency.YEARLY, 4) == date(2028, 2, 29)

    def test_unknown_frequency_uses_hundred_year_sentinel(self):
        assert advance(date(2025, 1, 1), "fortnightly") == date(2125, 1, 1)

    def test_add_months_crosses_year_boundary(self):
        assert add_months(date(2024, 11, 30), 3) == date(2025, 2, 28)
        assert add_months(date(2025, 3, 15), -3) == date(2024, 12, 15)

    def test_month_bounds(self):
        assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))


class TestRecordConstruction:
    def test_subscription_uses_renewal_anchor(self, recurring_factory):
        item = recurring_factory(
            kind="subscription", last_renewal_date=date(2025, 5, 5), start_date=date(2020, 1, 1)
        )
        assert item.anchor == Renewing(date(2025, 5, 5))

    def test_semi_monthly_income_uses_pair(self, recurring_factory):
        item = recurring_factory(
            frequency="semi-monthly",
            semi_monthly_first=date(2025, 6, 1),
            semi_monthly_second=date(2025, 6, 15),
        )
        assert item.anchor == SemiMonthly(date(2025, 6, 1), date(2025, 6, 15))

    def test_other_items_use_start_date(self, recurring_factory):
        item = recurring_factory(kind="fixed-expense", start_date=date(2024, 1, 1))
        assert item.anchor == Anchored(date(2024, 1, 1))
        assert item.frequency is Frequency.MONTHLY

    @pytest.mark.parametrize(
        "kind,frequency,dates",
        [
            ("subscription", "monthly", {"start_date": date(2025, 1, 1)}),
            ("income", "semi-monthly", {"semi_monthly_first": date(2025, 1, 1)}),
            ("fixed-expense", "weekly", {}),
        ],
    )
    def test_missing_anchor_is_rejected(self, recurring_factory, kind, frequency, dates):
        with pytest.raises(MissingAnchorError):
            recurring_factory(kind=kind, frequency=frequency, **dates)


class TestNextOccurrence:
    def test_anchored_monthly_due_today(self, recurring_factory):
        item = recurring_factory(start_date=date(2024, 1, 15))
        assert next_occurrence(item, TODAY) == TODAY
        assert next_occurrence(item, date(2025, 6, 16)) == date(2025, 7, 15)

    def test_future_start_is_returned_as_is(self, recurring_factory):
        item = recurring_factory(start_date=date(2025, 8, 1))
        assert next_occurrence(item, TODAY) == date(2025, 8, 1)

    def test_subscription_renewal_today_points_to_next_cycle(self, recurring_factory):
        item = recurring_factory(kind="subscription", last_renewal_date=TODAY)
        assert next_occurrence(item, TODAY) == date(2025, 7, 15)

    def test_subscription_rolls_forward_from_last_renewal(self, recurring_factory):
        item = recurring_factory(kind="subscription", last_renewal_date=date(2025, 5, 20))
        assert next_occurrence(item, TODAY) == date(2025, 6, 20)

    def test_past_end_date_is_returned(self, recurring_factory):
        item = recurring_factory(
            kind="subscription",
            last_renewal_date=date(2024, 6, 10),
            end_date=date(2025, 5, 1),
        )
        assert next_occurrence(item, TODAY) == date(2025, 5, 1)

    def test_clamped_to_end_date(self, recurring_factory):
        item = recurring_factory(
            frequency="weekly", start_date=date(2025, 6, 1), end_date=date(2025, 6, 17)
        )
        assert next_occurrence(item, date(2025, 6, 16)) == date(2025, 6, 17)

    def test_semi_monthly_picks_earliest_upcoming(self, recurring_factory):
        item = recurring_factory(
            frequency="semi-monthly",
            semi_monthly_first=date(2025, 5, 1),
            semi_monthly_second=date(2025, 5, 15),
        )
        assert next_occurrence(item, date(2025, 4, 20)) == date(2025, 5, 1)
        assert next_occurrence(item, date(2025, 6, 10)) == date(2025, 6, 15)

    def test_semi_monthly_advances_when_both_dates_passed(self, recurring_factory):
        item = recurring_factory(
            frequency="semi-monthly",
            semi_monthly_first=date(2025, 5, 1),
            semi_monthly_second=date(2025, 5, 15),
        )
        assert next_occurrence(item, date(2025, 6, 20)) == date(2025, 7, 1)

    def test_semi_monthly_pair_spanning_months(self, recurring_factory):
        item = recurring_factory(
            frequency="semi-monthly",
            semi_monthly_first=date(2024, 7, 15),
            semi_monthly_second=date(2024, 8, 1),
        )
        # The 1st only starts paying in August.
        assert next_occurrence(item, date(2024, 7, 20)) == date(2024, 8, 1)

    def test_monthly_next_occurrence_within_31_days(self, recurring_factory):
        items = [
            recurring_factory(start_date=date(2024, 1, 31)),
            recurring_factory(start_date=date(2023, 3, 1)),
            recurring_factory(kind="subscription", last_renewal_date=date(2024, 12, 29)),
        ]
        for offset in range(400):
            today = date(2025, 1, 1) + timedelta(days=offset)
            for item in items:
                upcoming = next_occurrence(item, today)
                assert today <= upcoming <= today + timedelta(days=31)

    def test_unknown_frequency_terminates(self):
        item = RecurringItem(
            id=1,
            name="Odd",
            kind="income",
            amount=Decimal("10"),
            frequency="fortnightly",
            anchor=Anchored(date(2025, 1, 1)),
        )
        assert next_occurrence(item, TODAY) == date(2125, 1, 1)


class TestMonthlyContribution:
    def test_weekly_item_counts_every_week(self, recurring_factory):
        item = recurring_factory(amount="500", frequency="weekly", start_date=date(2025, 6, 2))
        assert monthly_contribution(item, *JUNE) == Decimal("2500")

    def test_subscription_skips_the_renewal_itself(self, recurring_factory):
        item = recurring_factory(
            kind="subscription", amount="15.99", last_renewal_date=date(2025, 6, 5)
        )
        assert monthly_contribution(item, *JUNE) == Decimal("0")
        assert monthly_contribution(item, *month_bounds(2025, 7)) == Decimal("15.99")

    def test_semi_monthly_in_one_month_counts_twice(self, recurring_factory):
        item = recurring_factory(
            amount="2200",
            frequency="semi-monthly",
            semi_monthly_first=date(2025, 6, 1),
            semi_monthly_second=date(2025, 6, 15),
        )
        assert monthly_contribution(item, *JUNE) == Decimal("4400")
        assert monthly_contribution(item, *month_bounds(2025, 7)) == Decimal("4400")
        assert monthly_contribution(item, *month_bounds(2025, 5)) == Decimal("0")

    def test_semi_monthly_pay_days_on_same_day_count_once(self, recurring_factory):
        item = recurring_factory(
            amount="900",
            frequency="semi-monthly",
            semi_monthly_first=date(2025, 6, 15),
            semi_monthly_second=date(2025, 7, 15),
        )
        july = month_bounds(2025, 7)
        assert occurrences_between(item, *july) == [date(2025, 7, 15)]
        assert monthly_contribution(item, *july) == Decimal("900")
        assert monthly_contribution(item, *JUNE) == Decimal("900")

    def test_semi_monthly_pay_days_clamped_to_month_end_count_once(self, recurring_factory):
        item = recurring_factory(
            amount="50",
            frequency="semi-monthly",
            semi_monthly_first=date(2025, 1, 30),
            semi_monthly_second=date(2025, 1, 31),
        )
        february = month_bounds(2025, 2)
        assert occurrences_between(item, *february) == [date(2025, 2, 28)]
        assert monthly_contribution(item, *month_bounds(2025, 3)) == Decimal("100")

    def test_semi_monthly_respects_end_date(self, recurring_factory):
        item = recurring_factory(
            amount="100",
            frequency="semi-monthly",
            semi_monthly_first=date(2025, 1, 1),
            semi_monthly_second=date(2025, 1, 15),
            end_date=date(2025, 6, 10),
        )
        assert monthly_contribution(item, *JUNE) == Decimal("100")

    def test_item_starting_after_window_contributes_nothing(self, recurring_factory):
        item = recurring_factory(start_date=date(2025, 9, 1))
        assert monthly_contribution(item, *JUNE) == Decimal("0")

    def test_subscription_ending_before_next_renewal(self, recurring_factory):
        item = recurring_factory(
            kind="subscription",
            amount="40",
            last_renewal_date=date(2025, 3, 10),
            end_date=date(2025, 3, 31),
        )
        for month in range(3, 13):
            assert monthly_contribution(item, *month_bounds(2025, month)) == Decimal("0")

    @pytest.mark.parametrize(
        "frequency,dates",
        [
            ("monthly", {"start_date": date(2023, 1, 31)}),
            ("quarterly", {"start_date": date(2023, 2, 10)}),
            ("yearly", {"start_date": date(2020, 9, 9)}),
            (
                "semi-monthly",
                {"semi_monthly_first": date(2023, 1, 1), "semi_monthly_second": date(2023, 1, 31)},
            ),
        ],
    )
    def test_twelve_month_total_independent_of_start_month(self, recurring_factory, frequency, dates):
        item = recurring_factory(amount="100", frequency=frequency, **dates)
        totals = set()
        for first_month in range(1, 13):
            total = Decimal("0")
            for offset in range(12):
                shifted = add_months(date(2025, first_month, 1), offset)
                total += monthly_contribution(item, *month_bounds(shifted.year, shifted.month))
            totals.add(total)
        assert len(totals) == 1

    def test_month_windows_add_up_to_the_year(self, recurring_factory):
        item = recurring_factory(amount="75", frequency="bi-weekly", start_date=date(2024, 12, 27))
        by_month = sum(
            (monthly_contribution(item, *month_bounds(2025, month)) for month in range(1, 13)),
            Decimal("0"),
        )
        assert by_month == monthly_contribution(item, date(2025, 1, 1), date(2025, 12, 31))

    def test_occurrences_between_daily(self, recurring_factory):
        item = recurring_factory(frequency="daily", start_date=date(2020, 1, 1))
        assert len(occurrences_between(item, *JUNE)) == 30


class TestDebtPayments:
    def test_monthly_payment_this_month_or_next(self, debt_factory):
        debt = debt_factory(payment_day=15)
        assert next_debt_payment(debt, TODAY) == TODAY
        assert next_debt_payment(debt, date(2025, 6, 16)) == date(2025, 7, 15)

    def test_payment_day_clamped_to_short_month(self, debt_factory):
        debt = debt_factory(payment_day=31)
        assert next_debt_payment(debt, TODAY) == date(2025, 6, 30)

    def test_never_before_creation(self, debt_factory):
        debt = debt_factory(payment_day=15, created_at=date(2025, 7, 20))
        assert next_debt_payment(debt, date(2025, 6, 1)) == date(2025, 8, 15)

    def test_weekly_steps_from_first_payment_after_creation(self, debt_factory):
        debt = debt_factory(
            payment_day=3, payment_frequency=PaymentFrequency.WEEKLY, created_at=date(2025, 6, 1)
        )
        assert next_debt_payment(debt, date(2025, 6, 16)) == date(2025, 6, 17)

    def test_annual_payment(self, debt_factory):
        debt = debt_factory(
            payment_day=10, payment_frequency=PaymentFrequency.ANNUALLY, created_at=date(2023, 3, 1)
        )
        assert next_debt_payment(debt, TODAY) == date(2026, 3, 10)

    def test_bi_weekly_debt_can_pay_three_times_in_a_month(self, debt_factory):
        debt = debt_factory(
            minimum_payment="350",
            payment_day=2,
            payment_frequency=PaymentFrequency.BI_WEEKLY,
            created_at=date(2025, 6, 1),
        )
        assert debt_monthly_contribution(debt, *JUNE) == Decimal("1050")

    def test_no_contribution_before_creation(self, debt_factory):
        debt = debt_factory(payment_day=15, created_at=date(2025, 6, 20))
        assert debt_monthly_contribution(debt, *JUNE) == Decimal("0")
        assert debt_monthly_contribution(debt, *month_bounds(2025, 7)) == Decimal("50")

"""Recurrence projection for recurring items and debt payments.

Every function takes the reference date explicitly; nothing here reads the
wall clock. Occurrence ``n`` of a schedule is always computed from the
original anchor (``anchor + n * step``) so month-end anchors do not drift
(Jan 31 -> Feb 28 -> Mar 31, not Mar 28).
"""

from __future__ import annotations

import logging
from calendar import monthrange
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterator, Optional, Union

from ..domain.records import (
    Anchored,
    DebtAccount,
    Frequency,
    PaymentFrequency,
    RecurringItem,
    Renewing,
    SemiMonthly,
)

logger = logging.getLogger(__name__)

# Unknown frequencies jump 100 years per step so loops always terminate.
SENTINEL_MONTHS = 1200

_DAY_STEPS = {
    Frequency.DAILY: 1,
    Frequency.WEEKLY: 7,
    Frequency.BI_WEEKLY: 14,
}
_MONTH_STEPS = {
    Frequency.MONTHLY: 1,
    Frequency.QUARTERLY: 3,
    Frequency.YEARLY: 12,
}
_DEBT_DAY_STEPS = {
    PaymentFrequency.WEEKLY: 7,
    PaymentFrequency.BI_WEEKLY: 14,
}
_DEBT_MONTH_STEPS = {
    PaymentFrequency.MONTHLY: 1,
    PaymentFrequency.OTHER: 1,
    PaymentFrequency.ANNUALLY: 12,
}


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------


def on_day(year: int, month: int, day: int) -> date:
    """Return ``day`` of the month, clamped to the month's last day."""

    return date(year, month, min(day, monthrange(year, month)[1]))


def add_months(value: date, months: int) -> date:
    """Shift by calendar months keeping the day-of-month where it exists."""

    total = value.month - 1 + months
    return on_day(value.year + total // 12, total % 12 + 1, value.day)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a calendar month."""

    return date(year, month, 1), date(year, month, monthrange(year, month)[1])


def calendar_month_delta(later: date, earlier: date) -> int:
    """Number of calendar-month boundaries between two dates (may be negative)."""

    return (later.year - earlier.year) * 12 + later.month - earlier.month


def _iter_months(start: date, end: date) -> Iterator[tuple[int, int]]:
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        yield year, month
        month += 1
        if month > 12:
            year, month = year + 1, 1


# ---------------------------------------------------------------------------
# Recurring items
# ---------------------------------------------------------------------------


def advance(anchor: date, frequency: Union[Frequency, str], steps: int = 1) -> date:
    """Apply the frequency's step ``steps`` times starting from ``anchor``."""

    if frequency in _DAY_STEPS:
        return anchor + timedelta(days=_DAY_STEPS[frequency] * steps)
    if frequency in _MONTH_STEPS:
        return add_months(anchor, _MONTH_STEPS[frequency] * steps)
    if steps:
        logger.debug("No step for frequency %r; using the 100-year sentinel", frequency)
    return add_months(anchor, SENTINEL_MONTHS * steps)


def _lower_index(base: date, frequency: Union[Frequency, str], target: date) -> int:
    """A step index whose occurrence is not after ``target``."""

    if frequency in _DAY_STEPS:
        return max(0, (target - base).days // _DAY_STEPS[frequency])
    if frequency in _MONTH_STEPS:
        return max(0, calendar_month_delta(target, base) // _MONTH_STEPS[frequency] - 1)
    return 0


def _base_and_first_step(anchor: Union[Anchored, Renewing]) -> tuple[date, int]:
    # The renewal on ``last_renewal`` already happened; occurrences start one step later.
    if isinstance(anchor, Renewing):
        return anchor.last_renewal, 1
    return anchor.start, 0


def _semi_monthly_dates(anchor: SemiMonthly, year: int, month: int) -> Iterator[date]:
    """Both pay days re-anchored into the month, skipping dates before the pay date began.

    Pay days landing on the same date (same day of month, or both clamped to a
    short month's last day) are yielded once.
    """

    seen: set[date] = set()
    for original in (anchor.first, anchor.second):
        candidate = on_day(year, month, original.day)
        if candidate >= original and candidate not in seen:
            seen.add(candidate)
            yield candidate


def _next_semi_monthly(anchor: SemiMonthly, today: date) -> date:
    earliest = min(anchor.first, anchor.second)
    cursor = max(today, earliest).replace(day=1)
    while True:
        upcoming = [d for d in _semi_monthly_dates(anchor, cursor.year, cursor.month) if d >= today]
        if upcoming:
            return min(upcoming)
        cursor = add_months(cursor, 1)


def next_occurrence(item: RecurringItem, today: date) -> date:
    """Return the next date ``item`` occurs on or after ``today``.

    An item whose end date has passed returns that end date (callers show it
    as ended). The result is never later than the end date.
    """

    if item.end_date is not None and item.end_date < today:
        return item.end_date

    anchor = item.anchor
    if isinstance(anchor, SemiMonthly):
        candidate = _next_semi_monthly(anchor, today)
    else:
        base, first_step = _base_and_first_step(anchor)
        step = max(first_step, _lower_index(base, item.frequency, today))
        candidate = advance(base, item.frequency, step)
        while candidate < today:
            step += 1
            candidate = advance(base, item.frequency, step)

    if item.end_date is not None and candidate > item.end_date:
        return item.end_date
    return candidate


def occurrences_between(item: RecurringItem, window_start: date, window_end: date) -> list[date]:
    """All dates ``item`` occurs on inside ``[window_start, window_end]``."""

    limit = window_end if item.end_date is None else min(window_end, item.end_date)
    if limit < window_start:
        return []

    anchor = item.anchor
    if isinstance(anchor, SemiMonthly):
        return sorted(
            candidate
            for year, month in _iter_months(window_start, limit)
            for candidate in _semi_monthly_dates(anchor, year, month)
            if window_start <= candidate <= limit
        )

    base, first_step = _base_and_first_step(anchor)
    step = max(first_step, _lower_index(base, item.frequency, window_start))
    found: list[date] = []
    current = advance(base, item.frequency, step)
    while current <= limit:
        if current >= window_start:
            found.append(current)
        step += 1
        current = advance(base, item.frequency, step)
    return found


def monthly_contribution(item: RecurringItem, month_start: date, month_end: date) -> Decimal:
    """Total amount ``item`` contributes within ``[month_start, month_end]``."""

    return item.amount * len(occurrences_between(item, month_start, month_end))


# ---------------------------------------------------------------------------
# Debt payments
# ---------------------------------------------------------------------------


def _first_debt_payment(debt: DebtAccount, reference: date) -> date:
    """First payment day on or after ``reference`` (the creation date when known)."""

    candidate = on_day(reference.year, reference.month, debt.payment_day)
    if candidate < reference:
        shifted = add_months(reference.replace(day=1), 1)
        candidate = on_day(shifted.year, shifted.month, debt.payment_day)
    return candidate


def _debt_payment(debt: DebtAccount, first: date, step: int) -> date:
    frequency = debt.payment_frequency
    if frequency in _DEBT_DAY_STEPS:
        return first + timedelta(days=_DEBT_DAY_STEPS[frequency] * step)
    months = _DEBT_MONTH_STEPS.get(frequency, SENTINEL_MONTHS) * step
    shifted = add_months(first.replace(day=1), months)
    return on_day(shifted.year, shifted.month, debt.payment_day)


def _debt_lower_index(debt: DebtAccount, first: date, target: date) -> int:
    frequency = debt.payment_frequency
    if frequency in _DEBT_DAY_STEPS:
        return max(0, (target - first).days // _DEBT_DAY_STEPS[frequency])
    if frequency in _DEBT_MONTH_STEPS:
        return max(0, calendar_month_delta(target, first) // _DEBT_MONTH_STEPS[frequency] - 1)
    return 0


def next_debt_payment(debt: DebtAccount, today: date) -> date:
    """Next payment date on or after ``today``, never before the debt was created."""

    first = _first_debt_payment(debt, debt.created_at or today)
    step = _debt_lower_index(debt, first, today)
    candidate = _debt_payment(debt, first, step)
    while candidate < today:
        step += 1
        candidate = _debt_payment(debt, first, step)
    return candidate


def debt_payment_dates(debt: DebtAccount, window_start: date, window_end: date) -> list[date]:
    """Payment dates of ``debt`` inside the window, excluding any before creation.

    Without a creation date the schedule is anchored at ``window_start``.
    """

    if window_end < window_start:
        return []
    first = _first_debt_payment(debt, debt.created_at or window_start)
    step = _debt_lower_index(debt, first, window_start)
    found: list[date] = []
    current = _debt_payment(debt, first, step)
    while current <= window_end:
        if current >= window_start:
            found.append(current)
        step += 1
        current = _debt_payment(debt, first, step)
    return found


def debt_monthly_contribution(debt: DebtAccount, month_start: date, month_end: date) -> Decimal:
    """Minimum payments due on ``debt`` within ``[month_start, month_end]``."""

    return debt.minimum_payment * len(debt_payment_dates(debt, month_start, month_end))


def is_ended(item: RecurringItem, today: date) -> bool:
    return item.end_date is not None and item.end_date < today


def describe_frequency(frequency: Optional[Union[Frequency, PaymentFrequency, str]]) -> str:
    """Human label such as ``Bi-weekly``."""

    if frequency is None:
        return ""
    value = frequency.value if isinstance(frequency, (Frequency, PaymentFrequency)) else str(frequency)
    return value[:1].upper() + value[1:]


__all__ = [
    "SENTINEL_MONTHS",
    "add_months",
    "advance",
    "calendar_month_delta",
    "debt_monthly_contribution",
    "debt_payment_dates",
    "describe_frequency",
    "is_ended",
    "month_bounds",
    "monthly_contribution",
    "next_debt_payment",
    "next_occurrence",
    "occurrences_between",
    "on_day",
]

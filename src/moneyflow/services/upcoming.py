"""Unified list of upcoming recurring items and debt payments."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable

from ..domain.records import DebtAccount, RecurringItem, to_decimal
from .recurrence import describe_frequency, is_ended, next_debt_payment, next_occurrence

STATUS_ENDED = "Ended"
STATUS_TODAY = "Today"
STATUS_UPCOMING = "Upcoming"


@dataclass(frozen=True, slots=True)
class UpcomingPayment:
    """One row of the upcoming list."""

    source_id: int
    name: str
    display_type: str
    amount: Decimal
    frequency: str
    next_date: date
    status: str
    source: str  # "recurring" or "debt"


def _status(next_date: date, today: date, *, ended: bool) -> str:
    if ended:
        return STATUS_ENDED
    if next_date == today:
        return STATUS_TODAY
    return STATUS_UPCOMING


def upcoming_payments(
    items: Iterable[RecurringItem], debts: Iterable[DebtAccount], today: date
) -> list[UpcomingPayment]:
    """Next occurrence of every item and debt, ended items last, others by date."""

    rows: list[UpcomingPayment] = []
    for item in items:
        next_date = next_occurrence(item, today)
        ended = is_ended(item, today) and next_date == item.end_date
        rows.append(
            UpcomingPayment(
                source_id=item.id,
                name=item.name,
                display_type=item.kind.value,
                amount=item.amount,
                frequency=describe_frequency(item.frequency),
                next_date=next_date,
                status=_status(next_date, today, ended=ended),
                source="recurring",
            )
        )
    for debt in debts:
        next_date = next_debt_payment(debt, today)
        rows.append(
            UpcomingPayment(
                source_id=debt.id,
                name=f"{debt.name} (Payment)",
                display_type="debt-payment",
                amount=to_decimal(debt.minimum_payment),
                frequency=describe_frequency(debt.payment_frequency),
                next_date=next_date,
                status=_status(next_date, today, ended=False),
                source="debt",
            )
        )

    rows.sort(key=lambda row: (row.status == STATUS_ENDED, row.next_date))
    return rows


__all__ = ["UpcomingPayment", "upcoming_payments"]

"""Plain records consumed by the projection and payoff engines.

The persistence layer hands these over as immutable snapshots. Nothing in
``moneyflow.services`` mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class RecurringKind(str, Enum):
    INCOME = "income"
    SUBSCRIPTION = "subscription"
    FIXED_EXPENSE = "fixed-expense"


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"
    SEMI_MONTHLY = "semi-monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class PaymentFrequency(str, Enum):
    MONTHLY = "monthly"
    BI_WEEKLY = "bi-weekly"
    WEEKLY = "weekly"
    ANNUALLY = "annually"
    OTHER = "other"


class DebtKind(str, Enum):
    CREDIT_CARD = "credit-card"
    STUDENT_LOAN = "student-loan"
    PERSONAL_LOAN = "personal-loan"
    MORTGAGE = "mortgage"
    AUTO_LOAN = "auto-loan"
    OTHER = "other"


class PayoffStrategy(str, Enum):
    SNOWBALL = "snowball"
    AVALANCHE = "avalanche"


class MissingAnchorError(ValueError):
    """Raised when a recurring item lacks the date its kind/frequency requires."""


def to_decimal(value: Union[Decimal, float, int, str, None]) -> Decimal:
    """Convert storage values to Decimal without float artifacts."""

    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True, slots=True)
class Anchored:
    """Income or fixed expense that first occurs on ``start``."""

    start: date


@dataclass(frozen=True, slots=True)
class Renewing:
    """Subscription whose most recent renewal already happened on ``last_renewal``."""

    last_renewal: date


@dataclass(frozen=True, slots=True)
class SemiMonthly:
    """Twice-a-month pay schedule; the day-of-month of each date repeats monthly."""

    first: date
    second: date


Anchor = Union[Anchored, Renewing, SemiMonthly]


@dataclass(frozen=True, slots=True)
class RecurringItem:
    """A regularly occurring income, subscription or fixed expense."""

    id: int
    name: str
    kind: RecurringKind
    amount: Decimal
    frequency: Union[Frequency, str]
    anchor: Anchor
    end_date: Optional[date] = None
    category_id: Optional[int] = None
    notes: Optional[str] = None

    @classmethod
    def build(
        cls,
        *,
        id: int,
        name: str,
        kind: Union[RecurringKind, str],
        amount: Union[Decimal, float, int, str],
        frequency: Union[Frequency, str],
        start_date: Optional[date] = None,
        last_renewal_date: Optional[date] = None,
        semi_monthly_first: Optional[date] = None,
        semi_monthly_second: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> "RecurringItem":
        """Select the anchor variant from ``(kind, frequency)``.

        Subscriptions renew from ``last_renewal_date``; semi-monthly income and
        fixed expenses need both pay dates; everything else starts at
        ``start_date``. Unknown frequency strings are kept as-is so the
        projector can apply its non-termination sentinel.
        """

        kind = RecurringKind(kind)
        try:
            frequency = Frequency(frequency)
        except ValueError:
            pass

        anchor: Anchor
        if kind is RecurringKind.SUBSCRIPTION:
            if last_renewal_date is None:
                raise MissingAnchorError(f"Subscription {name!r} has no last renewal date")
            anchor = Renewing(last_renewal_date)
        elif frequency is Frequency.SEMI_MONTHLY:
            if semi_monthly_first is None or semi_monthly_second is None:
                raise MissingAnchorError(f"Semi-monthly item {name!r} needs both pay dates")
            anchor = SemiMonthly(semi_monthly_first, semi_monthly_second)
        else:
            if start_date is None:
                raise MissingAnchorError(f"Recurring item {name!r} has no start date")
            anchor = Anchored(start_date)

        return cls(
            id=id,
            name=name,
            kind=kind,
            amount=to_decimal(amount),
            frequency=frequency,
            anchor=anchor,
            end_date=end_date,
            category_id=category_id,
            notes=notes,
        )


@dataclass(frozen=True, slots=True)
class DebtAccount:
    """Represents an amortizing liability snapshot for projections."""

    id: int
    name: str
    balance: Decimal
    apr: Decimal
    minimum_payment: Decimal
    payment_day: int = 1
    payment_frequency: Union[PaymentFrequency, str] = PaymentFrequency.MONTHLY
    created_at: Optional[date] = None
    kind: DebtKind = DebtKind.OTHER


@dataclass(frozen=True, slots=True)
class FinancialGoal:
    id: int
    name: str
    target_amount: Decimal
    current_amount: Decimal
    target_date: date
    icon: Optional[str] = None

    @property
    def amount_needed(self) -> Decimal:
        return self.target_amount - self.current_amount


@dataclass(frozen=True, slots=True)
class VariableBudget:
    """A variable-spending envelope (groceries, fuel) with a monthly amount."""

    id: int
    name: str
    budgeted_amount: Decimal


__all__ = [
    "Anchor",
    "Anchored",
    "DebtAccount",
    "DebtKind",
    "FinancialGoal",
    "Frequency",
    "MissingAnchorError",
    "PaymentFrequency",
    "PayoffStrategy",
    "RecurringItem",
    "RecurringKind",
    "Renewing",
    "SemiMonthly",
    "VariableBudget",
    "to_decimal",
]

"""Debt payoff simulation (snowball and avalanche)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Union

from ..domain.records import DebtAccount, PayoffStrategy, to_decimal
from .recurrence import add_months

logger = logging.getLogger(__name__)

DEFAULT_MONTH_CAP = 360
ZERO = Decimal("0")


class InvalidStrategyError(ValueError):
    """Raised for payoff strategies other than snowball/avalanche."""


@dataclass(slots=True)
class ScheduleRow:
    """One simulated month for one debt."""

    month: int
    payment: Decimal
    interest: Decimal
    principal: Decimal
    remaining_balance: Decimal


@dataclass(slots=True)
class DebtPayoff:
    """Working state and final outcome for a single debt."""

    debt: DebtAccount
    balance: Decimal
    paid_off: bool = False
    payoff_date: Optional[date] = None
    months_to_payoff: int = 0
    interest_paid: Decimal = ZERO
    schedule: list[ScheduleRow] = field(default_factory=list)

    def _mark_paid(self, *, month: int, today: date) -> None:
        self.paid_off = True
        self.months_to_payoff = month
        self.payoff_date = add_months(today, month)


@dataclass(slots=True)
class PayoffResult:
    """Outcome of a payoff simulation.

    ``capped`` is True when the month cap stopped the simulation before every
    debt reached zero; those debts report ``paid_off=False`` and
    ``months_to_payoff == month_cap``.
    """

    strategy: PayoffStrategy
    debts: list[DebtPayoff]
    total_months: int
    total_interest: Decimal
    estimated_payoff_date: date
    capped: bool
    month_cap: int

    def for_debt(self, debt_id: int) -> DebtPayoff:
        for payoff in self.debts:
            if payoff.debt.id == debt_id:
                return payoff
        raise KeyError(debt_id)

    @property
    def payoff_order(self) -> list[int]:
        """Debt ids in the order they reach zero (ties keep strategy order)."""

        paid = [p for p in self.debts if p.paid_off]
        return [p.debt.id for p in sorted(paid, key=lambda p: p.months_to_payoff)]


def parse_strategy(value: Union[PayoffStrategy, str]) -> PayoffStrategy:
    """Normalize user input into a ``PayoffStrategy``."""

    if isinstance(value, PayoffStrategy):
        return value
    try:
        return PayoffStrategy(str(value).strip().lower())
    except ValueError as exc:
        raise InvalidStrategyError(f"Invalid debt payoff strategy: {value!r}") from exc


def order_debts(debts: Iterable[DebtAccount], strategy: Union[PayoffStrategy, str]) -> list[DebtAccount]:
    """Snowball: ascending balance. Avalanche: descending APR. Sorting is stable."""

    strategy = parse_strategy(strategy)
    if strategy is PayoffStrategy.SNOWBALL:
        return sorted(debts, key=lambda d: to_decimal(d.balance))
    return sorted(debts, key=lambda d: to_decimal(d.apr), reverse=True)


def _apply_pool(ordered: list[DebtPayoff], pool: Decimal, *, month: int, today: date) -> None:
    """Put the whole extra-payment pool on the first unpaid debt in strategy order.

    That debt's current-month schedule row is amended in place. Whatever the
    debt's balance cannot absorb is not carried anywhere.
    """

    target = next((p for p in ordered if not p.paid_off), None)
    if target is None:
        return
    extra = min(pool, target.balance)
    target.balance -= extra
    row = target.schedule[-1]
    row.payment += extra
    row.principal += extra
    row.remaining_balance = target.balance
    if target.balance <= ZERO:
        target.balance = ZERO
        target._mark_paid(month=month, today=today)


def simulate_payoff(
    debts: Iterable[DebtAccount],
    strategy: Union[PayoffStrategy, str],
    today: date,
    *,
    surplus: Union[Decimal, float, int] = ZERO,
    month_cap: int = DEFAULT_MONTH_CAP,
) -> PayoffResult:
    """Simulate month-by-month amortization until every debt reaches zero.

    Each month every unpaid debt accrues ``balance * APR / 1200`` and pays its
    minimum (never more than balance plus interest). The month's extra-payment
    pool starts at ``surplus`` and gains the full minimum payment of every debt
    that reached zero during those payments. The pool is then applied entirely
    to the first unpaid debt in strategy order; it starts over the next month.
    No rounding happens here.
    """

    strategy = parse_strategy(strategy)
    surplus = to_decimal(surplus)
    ordered = [
        DebtPayoff(debt=debt, balance=max(to_decimal(debt.balance), ZERO))
        for debt in order_debts(debts, strategy)
    ]
    for payoff in ordered:
        if payoff.balance == ZERO:
            payoff.paid_off = True
            payoff.payoff_date = today

    logger.debug(
        "Simulating %s payoff",
        strategy.value,
        extra={"debts": len(ordered), "surplus": str(surplus), "month_cap": month_cap},
    )

    month = 0
    while month < month_cap and not all(p.paid_off for p in ordered):
        month += 1
        pool = surplus

        for payoff in ordered:
            if payoff.paid_off:
                continue
            debt = payoff.debt
            minimum = to_decimal(debt.minimum_payment)
            interest = payoff.balance * to_decimal(debt.apr) / Decimal(1200)
            amount_due = payoff.balance + interest
            if minimum >= amount_due:
                payment = amount_due
                principal = payoff.balance
            else:
                payment = minimum
                principal = payment - interest
            payoff.balance = max(ZERO, payoff.balance - principal)
            payoff.interest_paid += interest
            payoff.schedule.append(
                ScheduleRow(
                    month=month,
                    payment=payment,
                    interest=interest,
                    principal=principal,
                    remaining_balance=payoff.balance,
                )
            )
            if payoff.balance == ZERO:
                payoff._mark_paid(month=month, today=today)
                pool += minimum

        if pool > ZERO:
            _apply_pool(ordered, pool, month=month, today=today)

    capped = not all(p.paid_off for p in ordered)
    if capped:
        for payoff in ordered:
            if not payoff.paid_off:
                payoff.months_to_payoff = month_cap
        logger.warning(
            "Payoff simulation hit the month cap",
            extra={
                "month_cap": month_cap,
                "unpaid": [p.debt.id for p in ordered if not p.paid_off],
            },
        )

    total_months = max((p.months_to_payoff for p in ordered), default=0)
    total_interest = sum((p.interest_paid for p in ordered), ZERO)
    logger.debug(
        "Payoff simulation finished",
        extra={"months": total_months, "total_interest": str(total_interest), "capped": capped},
    )
    return PayoffResult(
        strategy=strategy,
        debts=ordered,
        total_months=total_months,
        total_interest=total_interest,
        estimated_payoff_date=add_months(today, total_months),
        capped=capped,
        month_cap=month_cap,
    )


def snowball_schedule(debts: Iterable[DebtAccount], today: date, **options) -> PayoffResult:
    """Payoff plan prioritizing the smallest balances first."""
    return simulate_payoff(debts, PayoffStrategy.SNOWBALL, today, **options)


def avalanche_schedule(debts: Iterable[DebtAccount], today: date, **options) -> PayoffResult:
    """Payoff plan prioritizing the highest APR first."""
    return simulate_payoff(debts, PayoffStrategy.AVALANCHE, today, **options)


def minimum_payment_total(debts: Iterable[DebtAccount]) -> Decimal:
    """Sum of minimum payments for debts that still carry a balance."""

    return sum(
        (to_decimal(d.minimum_payment) for d in debts if to_decimal(d.balance) > ZERO),
        ZERO,
    )


__all__ = [
    "DEFAULT_MONTH_CAP",
    "DebtPayoff",
    "InvalidStrategyError",
    "PayoffResult",
    "ScheduleRow",
    "avalanche_schedule",
    "minimum_payment_total",
    "order_debts",
    "parse_strategy",
    "simulate_payoff",
    "snowball_schedule",
]

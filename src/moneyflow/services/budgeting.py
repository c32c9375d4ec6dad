"""Zero-based budgeting: monthly summaries, goal contributions and the yearly forecast."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from ..domain.records import (
    DebtAccount,
    FinancialGoal,
    RecurringItem,
    RecurringKind,
    VariableBudget,
    to_decimal,
)
from .recurrence import (
    calendar_month_delta,
    debt_monthly_contribution,
    month_bounds,
    monthly_contribution,
)

ZERO = Decimal("0")
CENT = Decimal("0.01")
BALANCE_TOLERANCE = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class BudgetBalance:
    """Income against every planned outflow for one month."""

    total_income: Decimal = ZERO
    fixed_expenses: Decimal = ZERO
    subscriptions: Decimal = ZERO
    debt_minimums: Decimal = ZERO
    additional_debt_payments: Decimal = ZERO
    variable_budgeted: Decimal = ZERO
    goal_contributions: Decimal = ZERO

    @property
    def total_allocated(self) -> Decimal:
        return (
            self.fixed_expenses
            + self.subscriptions
            + self.debt_minimums
            + self.additional_debt_payments
            + self.variable_budgeted
            + self.goal_contributions
        )

    @property
    def left_to_allocate(self) -> Decimal:
        return self.total_income - self.total_allocated

    @property
    def is_balanced(self) -> bool:
        return abs(self.left_to_allocate) < BALANCE_TOLERANCE

    @property
    def status(self) -> str:
        if self.is_balanced:
            return "balanced"
        return "over-budget" if self.left_to_allocate < ZERO else "needs-allocation"


@dataclass(frozen=True, slots=True)
class MonthlySummary:
    income: Decimal = ZERO
    fixed_expenses: Decimal = ZERO
    subscriptions: Decimal = ZERO
    debt_payments: Decimal = ZERO


@dataclass(frozen=True, slots=True)
class GoalContribution:
    goal: FinancialGoal
    months_remaining: int
    monthly_contribution: Decimal


@dataclass(frozen=True, slots=True)
class ForecastLine:
    """An item's total within a forecast month."""

    id: int
    name: str
    amount: Decimal
    category_id: int | None = None


@dataclass(frozen=True, slots=True)
class DebtForecastLine:
    id: int
    name: str
    amount: Decimal
    additional_payment: Decimal = ZERO


@dataclass(frozen=True, slots=True)
class MonthlyForecast:
    month: date
    income: tuple[ForecastLine, ...] = ()
    fixed_expenses: tuple[ForecastLine, ...] = ()
    subscriptions: tuple[ForecastLine, ...] = ()
    debt_payments: tuple[DebtForecastLine, ...] = ()
    variable_expenses: tuple[ForecastLine, ...] = ()
    goal_contributions: tuple[ForecastLine, ...] = ()
    balance: BudgetBalance = field(default_factory=BudgetBalance)

    @property
    def label(self) -> str:
        return self.month.strftime("%B %Y")

    def with_variable_amount(self, budget_id: int, amount: Decimal) -> "MonthlyForecast":
        """Copy with one variable envelope overridden for this month only."""
        lines = _override(self.variable_expenses, budget_id, amount=to_decimal(amount))
        return _rebalanced(replace(self, variable_expenses=lines))

    def with_goal_contribution(self, goal_id: int, amount: Decimal) -> "MonthlyForecast":
        lines = _override(self.goal_contributions, goal_id, amount=to_decimal(amount))
        return _rebalanced(replace(self, goal_contributions=lines))

    def with_additional_debt_payment(self, debt_id: int, amount: Decimal) -> "MonthlyForecast":
        lines = _override(self.debt_payments, debt_id, additional_payment=to_decimal(amount))
        return _rebalanced(replace(self, debt_payments=lines))


def _override(lines: tuple, line_id: int, **changes) -> tuple:
    if not any(line.id == line_id for line in lines):
        raise KeyError(line_id)
    return tuple(replace(line, **changes) if line.id == line_id else line for line in lines)


def _total(lines: Iterable) -> Decimal:
    return sum((line.amount for line in lines), ZERO)


def _rebalanced(forecast: MonthlyForecast) -> MonthlyForecast:
    balance = BudgetBalance(
        total_income=_total(forecast.income),
        fixed_expenses=_total(forecast.fixed_expenses),
        subscriptions=_total(forecast.subscriptions),
        debt_minimums=_total(forecast.debt_payments),
        additional_debt_payments=sum(
            (line.additional_payment for line in forecast.debt_payments), ZERO
        ),
        variable_budgeted=_total(forecast.variable_expenses),
        goal_contributions=_total(forecast.goal_contributions),
    )
    return replace(forecast, balance=balance)


def goal_contribution(goal: FinancialGoal, today: date) -> GoalContribution:
    """Monthly saving needed to reach ``goal`` by its target date.

    The current month counts as a contribution month, so a goal due in three
    calendar months is split four ways. Overdue goals ask for the whole
    remaining amount now.
    """

    needed = goal.amount_needed
    months = calendar_month_delta(goal.target_date, today)
    if needed <= ZERO:
        return GoalContribution(goal, 0, ZERO)
    if goal.target_date < today or months < 0:
        return GoalContribution(goal, 0, needed)
    if months == 0:
        return GoalContribution(goal, 1, needed)
    return GoalContribution(goal, months, needed / (months + 1))


def goal_contribution_for_month(goal: FinancialGoal, month_start: date) -> Decimal:
    """Forecast share of ``goal`` for the month starting at ``month_start``, in cents."""

    needed = goal.amount_needed
    if needed <= ZERO or month_start > goal.target_date:
        return ZERO
    months = calendar_month_delta(goal.target_date, month_start)
    if months < 0:
        return ZERO
    share = needed / max(1, months + 1)
    return share.quantize(CENT, rounding=ROUND_HALF_UP)


def current_goal_contributions(goals: Iterable[FinancialGoal], today: date) -> Decimal:
    """This month's total for goals still in progress."""

    total = ZERO
    for contribution in (goal_contribution(goal, today) for goal in goals):
        if contribution.goal.current_amount < contribution.goal.target_amount and contribution.months_remaining > 0:
            total += contribution.monthly_contribution
    return total


def monthly_summary(
    items: Iterable[RecurringItem],
    debts: Iterable[DebtAccount],
    month_start: date,
    month_end: date,
) -> MonthlySummary:
    """Per-kind totals of recurring items and debt payments within a month."""

    totals = {kind: ZERO for kind in RecurringKind}
    for item in items:
        totals[item.kind] += monthly_contribution(item, month_start, month_end)
    debt_total = sum(
        (debt_monthly_contribution(debt, month_start, month_end) for debt in debts), ZERO
    )
    return MonthlySummary(
        income=totals[RecurringKind.INCOME],
        fixed_expenses=totals[RecurringKind.FIXED_EXPENSE],
        subscriptions=totals[RecurringKind.SUBSCRIPTION],
        debt_payments=debt_total,
    )


def build_month(
    month_start: date,
    items: Iterable[RecurringItem],
    debts: Iterable[DebtAccount],
    variable_budgets: Iterable[VariableBudget],
    goals: Iterable[FinancialGoal],
) -> MonthlyForecast:
    """Zero-based plan for the calendar month containing ``month_start``."""

    start, end = month_bounds(month_start.year, month_start.month)
    lines: dict[RecurringKind, list[ForecastLine]] = {kind: [] for kind in RecurringKind}
    for item in items:
        amount = monthly_contribution(item, start, end)
        if amount > ZERO:
            lines[item.kind].append(ForecastLine(item.id, item.name, amount, item.category_id))

    debt_lines = []
    for debt in debts:
        amount = debt_monthly_contribution(debt, start, end)
        if amount > ZERO:
            debt_lines.append(DebtForecastLine(debt.id, debt.name, amount))

    goal_lines = []
    for goal in goals:
        if goal.current_amount >= goal.target_amount:
            continue
        amount = goal_contribution_for_month(goal, start)
        if amount > ZERO:
            goal_lines.append(ForecastLine(goal.id, goal.name, amount))

    forecast = MonthlyForecast(
        month=start,
        income=tuple(lines[RecurringKind.INCOME]),
        fixed_expenses=tuple(lines[RecurringKind.FIXED_EXPENSE]),
        subscriptions=tuple(lines[RecurringKind.SUBSCRIPTION]),
        debt_payments=tuple(debt_lines),
        variable_expenses=tuple(
            ForecastLine(b.id, b.name, to_decimal(b.budgeted_amount)) for b in variable_budgets
        ),
        goal_contributions=tuple(goal_lines),
    )
    return _rebalanced(forecast)


def build_forecast(
    items: Iterable[RecurringItem],
    debts: Iterable[DebtAccount],
    variable_budgets: Iterable[VariableBudget],
    goals: Iterable[FinancialGoal],
    year: int,
) -> list[MonthlyForecast]:
    """Twelve monthly plans, January through December of ``year``."""

    items, debts = list(items), list(debts)
    variable_budgets, goals = list(variable_budgets), list(goals)
    return [
        build_month(date(year, month, 1), items, debts, variable_budgets, goals)
        for month in range(1, 13)
    ]


__all__ = [
    "BudgetBalance",
    "DebtForecastLine",
    "ForecastLine",
    "GoalContribution",
    "MonthlyForecast",
    "MonthlySummary",
    "build_forecast",
    "build_month",
    "current_goal_contributions",
    "goal_contribution",
    "goal_contribution_for_month",
    "monthly_summary",
]

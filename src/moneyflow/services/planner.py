"""Composes the persistence collaborators with the pure planning engines."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Union

from ..domain.records import PayoffStrategy
from ..domain.repositories import (
    BudgetRepository,
    GoalRepository,
    LiabilityRepository,
    RecurringRepository,
    SettingsRepository,
)
from ..logging_config import get_logger
from ..models.settings import PAYOFF_STRATEGY_KEY
from . import budgeting, debts, recurrence, upcoming

logger = get_logger(__name__)


@dataclass
class Planner:
    """Loads records from the repositories and runs projections over them.

    ``today`` is always passed in; the planner never reads the clock itself.
    """

    liabilities: LiabilityRepository
    recurring: RecurringRepository
    goals: GoalRepository
    budgets: BudgetRepository
    settings: SettingsRepository
    default_strategy: str = PayoffStrategy.SNOWBALL.value
    month_cap: int = debts.DEFAULT_MONTH_CAP

    def current_strategy(self) -> PayoffStrategy:
        """Stored global strategy, falling back to the configured default."""

        stored = self.settings.get_value(PAYOFF_STRATEGY_KEY)
        if stored is not None:
            try:
                return debts.parse_strategy(stored)
            except debts.InvalidStrategyError:
                logger.warning("Ignoring invalid stored payoff strategy", extra={"value": stored})
        return debts.parse_strategy(self.default_strategy)

    def select_strategy(self, strategy: Union[PayoffStrategy, str]) -> PayoffStrategy:
        selected = debts.parse_strategy(strategy)
        self.settings.set(PAYOFF_STRATEGY_KEY, selected.value, "Debt payoff ordering")
        logger.info("Payoff strategy updated", extra={"strategy": selected.value})
        return selected

    def payoff_plan(
        self,
        today: date,
        *,
        strategy: Optional[Union[PayoffStrategy, str]] = None,
        surplus: Union[Decimal, float, int] = 0,
    ) -> debts.PayoffResult:
        chosen = debts.parse_strategy(strategy) if strategy is not None else self.current_strategy()
        return debts.simulate_payoff(
            self.liabilities.list_records(),
            chosen,
            today,
            surplus=surplus,
            month_cap=self.month_cap,
        )

    def upcoming_payments(self, today: date) -> list[upcoming.UpcomingPayment]:
        return upcoming.upcoming_payments(
            self.recurring.list_records(), self.liabilities.list_records(), today
        )

    def month_summary(self, today: date) -> budgeting.MonthlySummary:
        start, end = recurrence.month_bounds(today.year, today.month)
        return budgeting.monthly_summary(
            self.recurring.list_records(), self.liabilities.list_records(), start, end
        )

    def forecast(self, year: int) -> list[budgeting.MonthlyForecast]:
        return budgeting.build_forecast(
            self.recurring.list_records(),
            self.liabilities.list_records(),
            self.budgets.list_records(),
            self.goals.list_records(),
            year,
        )

    def current_balance(self, today: date) -> budgeting.BudgetBalance:
        """Zero-based balance for the month containing ``today``."""

        summary = self.month_summary(today)
        variable = sum(
            (budget.budgeted_amount for budget in self.budgets.list_records()), Decimal("0")
        )
        return budgeting.BudgetBalance(
            total_income=summary.income,
            fixed_expenses=summary.fixed_expenses,
            subscriptions=summary.subscriptions,
            debt_minimums=summary.debt_payments,
            variable_budgeted=variable,
            goal_contributions=budgeting.current_goal_contributions(
                self.goals.list_records(), today
            ),
        )


__all__ = ["Planner"]

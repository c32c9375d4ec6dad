"""SQLModel table exports."""

from .budget import BudgetCategory
from .category import Category
from .goal import SavingsGoal
from .liability import Liability
from .recurring import RecurringRule
from .settings import PAYOFF_STRATEGY_KEY, AppSetting

__all__ = [
    "AppSetting",
    "BudgetCategory",
    "Category",
    "Liability",
    "PAYOFF_STRATEGY_KEY",
    "RecurringRule",
    "SavingsGoal",
]

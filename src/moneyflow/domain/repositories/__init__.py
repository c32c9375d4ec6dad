"""Repository protocol definitions for domain layer."""

from .budget import BudgetRepository
from .goal import GoalRepository
from .liability import LiabilityRepository
from .recurring import RecurringRepository
from .settings import SettingsRepository

__all__ = [
    "BudgetRepository",
    "GoalRepository",
    "LiabilityRepository",
    "RecurringRepository",
    "SettingsRepository",
]

"""Concrete repository implementations using SQLModel."""

from .budget import SQLModelBudgetRepository
from .goal import SQLModelGoalRepository
from .liability import SQLModelLiabilityRepository
from .recurring import SQLModelRecurringRepository
from .settings import SQLModelSettingsRepository

__all__ = [
    "SQLModelBudgetRepository",
    "SQLModelGoalRepository",
    "SQLModelLiabilityRepository",
    "SQLModelRecurringRepository",
    "SQLModelSettingsRepository",
]

"""Service module exports."""

from . import budgeting, debts, planner, recurrence, upcoming

__all__ = [
    "budgeting",
    "debts",
    "planner",
    "recurrence",
    "upcoming",
]

"""MoneyFlow: recurring cash-flow projection, debt payoff and zero-based budgeting."""

from __future__ import annotations

from .config import BaseConfig, DevConfig, TestingConfig

__version__ = "0.1.0"

__all__ = ["BaseConfig", "DevConfig", "TestingConfig", "__version__"]

"""Pytest configuration and shared fixtures for MoneyFlow tests.

Provides an isolated SQLite database per test, a session factory matching the
repository pattern, and record factories for the planning engines. Every
test passes an explicit ``today``; nothing here reads the wall clock.
"""

from __future__ import annotations

import logging
import tempfile
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from moneyflow.models import (  # noqa: F401
    AppSetting,
    BudgetCategory,
    Category,
    Liability,
    RecurringRule,
    SavingsGoal,
)
from moneyflow.domain.records import (
    DebtAccount,
    FinancialGoal,
    PaymentFrequency,
    RecurringItem,
    VariableBudget,
)

TODAY = date(2025, 6, 15)


@pytest.fixture(autouse=True)
def _isolated_data_dir(tmp_path, monkeypatch):
    """Keep config-created directories and logs inside the test's tmp dir."""
    monkeypatch.setenv("MONEYFLOW_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("MONEYFLOW_DATABASE_URL", raising=False)
    monkeypatch.delenv("MONEYFLOW_DEFAULT_STRATEGY", raising=False)
    monkeypatch.delenv("MONEYFLOW_PAYOFF_MONTH_CAP", raising=False)
    monkeypatch.delenv("MONEYFLOW_DEV_MODE", raising=False)


@pytest.fixture(autouse=True)
def _reset_moneyflow_logger():
    """Drop handlers installed by ``setup_logging`` so streams don't leak between tests."""
    yield
    logger = logging.getLogger("moneyflow")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine with every table created
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory for repositories that expect Callable[[], Session].

    Returns:
        Callable: Factory returning transactional session context managers
    """

    @contextmanager
    def factory():
        session = Session(db_engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


# =============================================================================
# Record Factories
# =============================================================================


@pytest.fixture
def recurring_factory():
    """Factory for recurring item records.

    Accepts the same nullable date fields the storage layer uses and lets
    ``RecurringItem.build`` pick the anchor variant.
    """

    counter = {"next": 1}

    def _create(
        name: str = "Salary",
        kind: str = "income",
        amount: str | int = "100",
        frequency: str = "monthly",
        **dates,
    ) -> RecurringItem:
        item_id = dates.pop("id", counter["next"])
        counter["next"] += 1
        return RecurringItem.build(
            id=item_id,
            name=name,
            kind=kind,
            amount=Decimal(str(amount)),
            frequency=frequency,
            **dates,
        )

    return _create


@pytest.fixture
def debt_factory():
    """Factory for debt snapshots with sensible defaults."""

    counter = {"next": 1}

    def _create(
        balance: str | int = "1000",
        apr: str | int = "18",
        minimum_payment: str | int = "50",
        name: str | None = None,
        payment_day: int = 15,
        payment_frequency: PaymentFrequency | str = PaymentFrequency.MONTHLY,
        created_at: date | None = date(2024, 1, 1),
        **extra,
    ) -> DebtAccount:
        debt_id = extra.pop("id", counter["next"])
        counter["next"] += 1
        return DebtAccount(
            id=debt_id,
            name=name or f"Debt {debt_id}",
            balance=Decimal(str(balance)),
            apr=Decimal(str(apr)),
            minimum_payment=Decimal(str(minimum_payment)),
            payment_day=payment_day,
            payment_frequency=payment_frequency,
            created_at=created_at,
            **extra,
        )

    return _create


@pytest.fixture
def goal_factory():
    def _create(
        target_amount: str | int = "1200",
        current_amount: str | int = "0",
        target_date: date = date(2025, 12, 31),
        name: str = "Emergency fund",
        id: int = 1,
    ) -> FinancialGoal:
        return FinancialGoal(
            id=id,
            name=name,
            target_amount=Decimal(str(target_amount)),
            current_amount=Decimal(str(current_amount)),
            target_date=target_date,
        )

    return _create


@pytest.fixture
def variable_budget_factory():
    def _create(name: str = "Groceries", amount: str | int = "400", id: int = 1) -> VariableBudget:
        return VariableBudget(id=id, name=name, budgeted_amount=Decimal(str(amount)))

    return _create


# =============================================================================
# Assertion Helpers
# =============================================================================


def assert_money_equal(actual, expected, tolerance: str = "0.01"):
    """Assert that two amounts are equal within a tolerance (default one cent).

    Raises:
        AssertionError: If values differ by more than tolerance
    """
    diff = abs(Decimal(str(actual)) - Decimal(str(expected)))
    assert diff <= Decimal(tolerance), (
        f"Expected {expected}, got {actual} (diff: {diff}, tolerance: {tolerance})"
    )

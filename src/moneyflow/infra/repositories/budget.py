"""SQLModel implementation of the variable budget repository."""

from __future__ import annotations

from typing import Callable, Optional

from sqlmodel import Session, select

from ...domain.records import VariableBudget
from ...models.budget import BudgetCategory


class SQLModelBudgetRepository:
    """SQLModel-based budget category repository."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_by_name(self, name: str) -> Optional[BudgetCategory]:
        with self.session_factory() as session:
            return session.exec(select(BudgetCategory).where(BudgetCategory.name == name)).first()

    def list_all(self) -> list[BudgetCategory]:
        with self.session_factory() as session:
            statement = select(BudgetCategory).order_by(BudgetCategory.name)  # type: ignore
            return list(session.exec(statement).all())

    def list_records(self) -> list[VariableBudget]:
        return [category.to_record() for category in self.list_all()]

    def upsert(self, name: str, budgeted_amount: float) -> BudgetCategory:
        """Create the envelope or update its monthly amount."""
        with self.session_factory() as session:
            category = session.exec(
                select(BudgetCategory).where(BudgetCategory.name == name)
            ).first()
            if category:
                category.budgeted_amount = budgeted_amount
            else:
                category = BudgetCategory(name=name, budgeted_amount=budgeted_amount)
                session.add(category)
            session.commit()
            session.refresh(category)
            return category

    def delete(self, category_id: int) -> None:
        with self.session_factory() as session:
            category = session.get(BudgetCategory, category_id)
            if category:
                session.delete(category)
                session.commit()

    def total_budgeted(self) -> float:
        return sum(category.budgeted_amount for category in self.list_all())

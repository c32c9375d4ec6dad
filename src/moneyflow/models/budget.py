"""Budgeting tables."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ..domain.records import VariableBudget, to_decimal


class BudgetCategory(SQLModel, table=True):
    """Variable-spending envelope with a default monthly amount."""

    __tablename__: ClassVar[str] = "budget_category"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, max_length=64, unique=True)
    budgeted_amount: float = Field(default=0.0, nullable=False, ge=0)

    def to_record(self) -> VariableBudget:
        return VariableBudget(
            id=self.id or 0,
            name=self.name,
            budgeted_amount=to_decimal(self.budgeted_amount),
        )

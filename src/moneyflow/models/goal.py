"""Savings goal entities."""

from __future__ import annotations

from datetime import date
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ..domain.records import FinancialGoal, to_decimal


class SavingsGoal(SQLModel, table=True):
    __tablename__: ClassVar[str] = "savings_goal"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, max_length=80)
    target_amount: float = Field(nullable=False, gt=0)
    current_amount: float = Field(default=0.0, nullable=False, ge=0)
    target_date: date = Field(nullable=False, index=True)
    icon: Optional[str] = Field(default=None, max_length=32)

    def to_record(self) -> FinancialGoal:
        return FinancialGoal(
            id=self.id or 0,
            name=self.name,
            target_amount=to_decimal(self.target_amount),
            current_amount=to_decimal(self.current_amount),
            target_date=self.target_date,
            icon=self.icon,
        )

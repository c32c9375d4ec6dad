"""Recurring income, subscription and fixed-expense rules."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from ..domain.records import RecurringItem

if TYPE_CHECKING:  # pragma: no cover
    from .category import Category


class RecurringRule(SQLModel, table=True):
    """Stored shape of a recurring item.

    Which date columns are filled depends on kind and frequency; ``to_record``
    turns the combination into the explicit anchor variant.
    """

    __tablename__: ClassVar[str] = "recurring_rule"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    kind: str = Field(nullable=False, max_length=32, index=True)
    amount: float = Field(nullable=False, gt=0)
    frequency: str = Field(nullable=False, max_length=16)
    start_date: Optional[date] = Field(default=None)
    last_renewal_date: Optional[date] = Field(default=None)
    semi_monthly_first: Optional[date] = Field(default=None)
    semi_monthly_second: Optional[date] = Field(default=None)
    end_date: Optional[date] = Field(default=None)
    notes: Optional[str] = Field(default=None, max_length=255)
    category_id: Optional[int] = Field(default=None, foreign_key="category.id")

    category: "Category | None" = Relationship(
        back_populates="recurring_rules",
        sa_relationship=relationship("Category", back_populates="recurring_rules"),
    )

    def to_record(self) -> RecurringItem:
        """Raises ``MissingAnchorError`` when the required date is absent."""

        return RecurringItem.build(
            id=self.id or 0,
            name=self.name,
            kind=self.kind,
            amount=self.amount,
            frequency=self.frequency,
            start_date=self.start_date,
            last_renewal_date=self.last_renewal_date,
            semi_monthly_first=self.semi_monthly_first,
            semi_monthly_second=self.semi_monthly_second,
            end_date=self.end_date,
            category_id=self.category_id,
            notes=self.notes,
        )

"""Ledger category definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .recurring import RecurringRule


class Category(SQLModel, table=True):
    """Spending or income category that recurring rules can reference."""

    __tablename__: ClassVar[str] = "category"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, nullable=False, max_length=64)
    slug: str = Field(index=True, nullable=False, unique=True, max_length=64)
    category_type: str = Field(default="expense", nullable=False, max_length=32)

    recurring_rules: list["RecurringRule"] = Relationship(
        back_populates="category",
        sa_relationship=relationship("RecurringRule", back_populates="category"),
    )

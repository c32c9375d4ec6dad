"""Debt and liability entities."""

from __future__ import annotations

from datetime import date
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ..domain.records import DebtAccount, DebtKind, PaymentFrequency, to_decimal


class Liability(SQLModel, table=True):
    """Installment or revolving debt tracked by the planner."""

    __tablename__: ClassVar[str] = "liability"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    kind: str = Field(default=DebtKind.OTHER.value, nullable=False, max_length=32)
    balance: float = Field(nullable=False, ge=0)
    apr: float = Field(default=0.0, nullable=False, ge=0, le=100)
    minimum_payment: float = Field(nullable=False, gt=0)
    payment_day: int = Field(default=1, ge=1, le=31)
    payment_frequency: str = Field(
        default=PaymentFrequency.MONTHLY.value, nullable=False, max_length=16
    )
    created_at: date = Field(default_factory=date.today, nullable=False)

    def to_record(self) -> DebtAccount:
        """Snapshot this row for the payoff simulator and projector."""

        try:
            frequency = PaymentFrequency(self.payment_frequency)
        except ValueError:
            frequency = self.payment_frequency
        try:
            kind = DebtKind(self.kind)
        except ValueError:
            kind = DebtKind.OTHER
        return DebtAccount(
            id=self.id or 0,
            name=self.name,
            kind=kind,
            balance=to_decimal(self.balance),
            apr=to_decimal(self.apr),
            minimum_payment=to_decimal(self.minimum_payment),
            payment_day=self.payment_day,
            payment_frequency=frequency,
            created_at=self.created_at,
        )

"""SQLModel implementation of the liability repository."""

from __future__ import annotations

from typing import Callable, Optional

from sqlmodel import Session, select

from ...domain.records import DebtAccount
from ...models.liability import Liability


class SQLModelLiabilityRepository:
    """Debts stored in the ``liability`` table."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_by_id(self, liability_id: int) -> Optional[Liability]:
        with self.session_factory() as session:
            return session.get(Liability, liability_id)

    def list_all(self) -> list[Liability]:
        with self.session_factory() as session:
            statement = select(Liability).order_by(Liability.name)  # type: ignore
            return list(session.exec(statement).all())

    def list_records(self) -> list[DebtAccount]:
        """Snapshots of every liability for the planning engines."""
        return [row.to_record() for row in self.list_all()]

    def create(self, liability: Liability) -> Liability:
        with self.session_factory() as session:
            session.add(liability)
            session.commit()
            session.refresh(liability)
            return liability

    def update(self, liability: Liability) -> Liability:
        """Persist changes made to a detached row."""
        with self.session_factory() as session:
            merged = session.merge(liability)
            session.commit()
            session.refresh(merged)
            return merged

    def delete(self, liability_id: int) -> None:
        with self.session_factory() as session:
            liability = session.get(Liability, liability_id)
            if liability is not None:
                session.delete(liability)

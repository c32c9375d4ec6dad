"""SQLModel implementation of the recurring-rule repository."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from sqlmodel import Session, select

from ...domain.records import MissingAnchorError, RecurringItem
from ...models.recurring import RecurringRule

logger = logging.getLogger(__name__)


class SQLModelRecurringRepository:
    """SQLModel-based recurring rule repository."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_by_id(self, rule_id: int) -> Optional[RecurringRule]:
        with self.session_factory() as session:
            return session.get(RecurringRule, rule_id)

    def list_all(self) -> list[RecurringRule]:
        with self.session_factory() as session:
            statement = select(RecurringRule).order_by(RecurringRule.name)  # type: ignore
            return list(session.exec(statement).all())

    def list_records(self) -> list[RecurringItem]:
        """Convert rows to records, skipping rows missing their anchor date."""
        records: list[RecurringItem] = []
        for rule in self.list_all():
            try:
                records.append(rule.to_record())
            except MissingAnchorError as exc:
                logger.warning(
                    "Skipping recurring rule without anchor date",
                    extra={"rule_id": rule.id, "reason": str(exc)},
                )
        return records

    def create(self, rule: RecurringRule) -> RecurringRule:
        with self.session_factory() as session:
            session.add(rule)
            session.commit()
            session.refresh(rule)
            return rule

    def update(self, rule: RecurringRule) -> RecurringRule:
        with self.session_factory() as session:
            merged = session.merge(rule)
            session.commit()
            session.refresh(merged)
            return merged

    def delete(self, rule_id: int) -> None:
        with self.session_factory() as session:
            rule = session.get(RecurringRule, rule_id)
            if rule:
                session.delete(rule)
                session.commit()

"""SQLModel implementation of the savings goal repository."""

from __future__ import annotations

from typing import Callable, Optional

from sqlmodel import Session, select

from ...domain.records import FinancialGoal
from ...models.goal import SavingsGoal


class SQLModelGoalRepository:
    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_by_id(self, goal_id: int) -> Optional[SavingsGoal]:
        with self.session_factory() as session:
            return session.get(SavingsGoal, goal_id)

    def list_all(self) -> list[SavingsGoal]:
        """Goals ordered by target date, soonest first."""
        with self.session_factory() as session:
            statement = select(SavingsGoal).order_by(SavingsGoal.target_date)  # type: ignore
            return list(session.exec(statement).all())

    def list_records(self) -> list[FinancialGoal]:
        return [goal.to_record() for goal in self.list_all()]

    def create(self, goal: SavingsGoal) -> SavingsGoal:
        with self.session_factory() as session:
            session.add(goal)
            session.commit()
            session.refresh(goal)
            return goal

    def update(self, goal: SavingsGoal) -> SavingsGoal:
        with self.session_factory() as session:
            merged = session.merge(goal)
            session.commit()
            session.refresh(merged)
            return merged

    def delete(self, goal_id: int) -> None:
        with self.session_factory() as session:
            goal = session.get(SavingsGoal, goal_id)
            if goal:
                session.delete(goal)
                session.commit()

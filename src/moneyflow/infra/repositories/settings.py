"""Key/value settings such as the global payoff strategy."""

from __future__ import annotations

from typing import Callable, Optional

from sqlmodel import Session

from ...models.settings import AppSetting


class SQLModelSettingsRepository:
    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[AppSetting]:
        with self.session_factory() as session:
            return session.get(AppSetting, key)

    def get_value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        setting = self.get(key)
        return setting.value if setting is not None else default

    def set(self, key: str, value: str, description: str | None = None) -> AppSetting:
        """Insert or overwrite ``key``; a ``None`` description keeps the stored one."""
        with self.session_factory() as session:
            setting = session.get(AppSetting, key) or AppSetting(key=key, value=value)
            setting.value = value
            if description is not None:
                setting.description = description
            session.add(setting)
            session.commit()
            session.refresh(setting)
            return setting

    def delete(self, key: str) -> None:
        with self.session_factory() as session:
            setting = session.get(AppSetting, key)
            if setting is not None:
                session.delete(setting)


__all__ = ["SQLModelSettingsRepository"]

"""Settings repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.settings import AppSetting


class SettingsRepository(Protocol):
    def get(self, key: str) -> Optional[AppSetting]:
        ...

    def get_value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        ...

    def set(self, key: str, value: str, description: str | None = None) -> AppSetting:
        ...

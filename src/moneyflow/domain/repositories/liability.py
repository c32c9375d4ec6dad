"""Liability repository protocol."""

from __future__ import annotations

from typing import Protocol

from ..records import DebtAccount


class LiabilityRepository(Protocol):
    """Source of debt snapshots."""

    def list_records(self) -> list[DebtAccount]:
        """Snapshot every stored debt."""
        ...

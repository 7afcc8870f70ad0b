"""
Not-found log port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from smart_redirects.domain.entities import NotFoundEntry


class NotFoundLogPort(Protocol):
    """Persistence for repeated "not found" requests."""

    def upsert_hit(self, url: str, seen_at: datetime) -> None:
        """Insert with hits=1 or add one hit, in a single atomic statement."""
        ...

    def get_by_url(self, url: str) -> NotFoundEntry | None:
        ...

    def list_all(self, limit: int = 100, offset: int = 0) -> list[NotFoundEntry]:
        """Entries with the most hits first."""
        ...

    def delete(self, entry_id: UUID) -> bool:
        ...

    def delete_many(self, entry_ids: list[UUID]) -> int:
        ...

    def clear(self) -> int:
        """Delete every entry. Returns the number removed."""
        ...


class ClockPort(Protocol):
    def now_utc(self) -> datetime:
        ...

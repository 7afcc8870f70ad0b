"""
Watcher component port definitions.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from smart_redirects.domain.entities import (
    RedirectKind,
    RedirectOrigin,
    RedirectRecord,
    RedirectStatus,
)


class RedirectSyncPort(Protocol):
    """Store operations the watcher applies."""

    def get_by_source(self, source_path: str) -> RedirectRecord | None:
        ...

    def delete(self, redirect_id: UUID) -> bool:
        ...

    def save(
        self,
        source_path: str,
        target: str,
        kind: RedirectKind,
        status: RedirectStatus,
        forced: bool = False,
        origin: RedirectOrigin = RedirectOrigin.MANUAL,
    ) -> RedirectRecord:
        """Insert, or update the record that owns source_path."""
        ...

    def retarget(
        self,
        old_target: str,
        new_target: str,
        status: RedirectStatus = RedirectStatus.ACTIVE,
        forced: bool = False,
    ) -> int:
        """Rewrite matching records aimed at old_target. Returns rows changed."""
        ...

    def delete_matching(
        self,
        sources: tuple[str, ...] = (),
        suffixes: tuple[str, ...] = (),
        status: RedirectStatus | None = None,
    ) -> int:
        """Delete by exact source or source suffix. Returns rows deleted."""
        ...


class NoticeBoardPort(Protocol):
    """Short-lived flags shown once to administrators."""

    def raise_notice(self, key: str, ttl_seconds: int) -> None:
        ...

    def pop_notice(self, key: str) -> bool:
        """Consume a notice; True if it was raised and has not expired."""
        ...

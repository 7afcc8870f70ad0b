"""
Redirects component port definitions.

RedirectStorePort is the full redirect store; the resolver, executor,
watcher and health components each depend on a narrower slice of it.
"""

from __future__ import annotations

from typing import Any, Protocol
from uuid import UUID

from smart_redirects.domain.entities import (
    RedirectKind,
    RedirectOrigin,
    RedirectRecord,
    RedirectStatus,
)


class RedirectStorePort(Protocol):
    """Repository interface for redirects. source_path is unique."""

    def get_by_id(self, redirect_id: UUID) -> RedirectRecord | None:
        """Get redirect by ID."""
        ...

    def get_by_source(self, source_path: str) -> RedirectRecord | None:
        """Get redirect by normalized source path."""
        ...

    def count_by_target(
        self,
        target: str,
        status: RedirectStatus = RedirectStatus.ACTIVE,
        forced: bool = False,
    ) -> int:
        """Count records aimed at a target."""
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
        """Insert, or update target/kind/status/forced of the existing row."""
        ...

    def update_fields(self, redirect_id: UUID, **fields: Any) -> RedirectRecord | None:
        """Update selected columns of one record."""
        ...

    def retarget(
        self,
        old_target: str,
        new_target: str,
        status: RedirectStatus = RedirectStatus.ACTIVE,
        forced: bool = False,
    ) -> int:
        """Point records aimed at old_target to new_target."""
        ...

    def increment_hits(self, source_path: str) -> None:
        """Atomically add one hit."""
        ...

    def delete(self, redirect_id: UUID) -> bool:
        """Delete redirect. Returns False if it did not exist."""
        ...

    def delete_many(self, redirect_ids: list[UUID]) -> int:
        ...

    def delete_matching(
        self,
        sources: tuple[str, ...] = (),
        suffixes: tuple[str, ...] = (),
        status: RedirectStatus | None = None,
    ) -> int:
        ...

    def list_all(self, status: RedirectStatus | None = None) -> list[RedirectRecord]:
        """List redirects, newest first."""
        ...

    def count_by_status(self, status: RedirectStatus) -> int:
        ...

    def total_hits(self) -> int:
        ...


class PublishedContentPort(Protocol):
    """Interface for checking live content."""

    def path_maps_to_published_content(self, path: str) -> bool:
        ...

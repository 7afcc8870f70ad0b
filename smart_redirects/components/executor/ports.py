"""
Executor component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from smart_redirects.domain.entities import (
    RedirectKind,
    RedirectOrigin,
    RedirectRecord,
    RedirectStatus,
)


class RedirectTelemetryPort(Protocol):
    """Store operations needed to count a fired redirect."""

    def get_by_source(self, source_path: str) -> RedirectRecord | None:
        """Get redirect by normalized source path."""
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

    def increment_hits(self, source_path: str) -> None:
        """Atomically add one hit."""
        ...

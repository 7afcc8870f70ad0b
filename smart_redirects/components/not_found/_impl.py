"""
NotFoundLogger - records requests that nothing could redirect.

Each normalized URL has one row; repeats bump its counter and last_seen
through a single atomic upsert, so concurrent misses on the same path are
all counted.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from uuid import UUID

from smart_redirects.components.not_found.ports import ClockPort, NotFoundLogPort
from smart_redirects.domain.entities import NotFoundEntry
from smart_redirects.domain.paths import normalize_path

logger = logging.getLogger(__name__)


class NotFoundLogger:
    def __init__(self, log: NotFoundLogPort, clock: ClockPort | None = None) -> None:
        self._log = log
        self._clock = clock

    def _now(self) -> datetime:
        if self._clock:
            return self._clock.now_utc()
        return datetime.now(UTC)

    def log(self, path: str) -> None:
        """Count one miss. Never raises."""
        url = normalize_path(path)
        try:
            self._log.upsert_hit(url, self._now())
        except Exception:
            logger.exception("Failed to log 404 for %s", url)

    def list_entries(self, limit: int = 100, offset: int = 0) -> list[NotFoundEntry]:
        return self._log.list_all(limit=limit, offset=offset)

    def delete(self, entry_id: UUID) -> bool:
        return self._log.delete(entry_id)

    def bulk_delete(self, entry_ids: list[UUID]) -> int:
        if not entry_ids:
            return 0
        return self._log.delete_many(entry_ids)

    def clear(self) -> int:
        return self._log.clear()

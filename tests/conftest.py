from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import pytest

from smart_redirects.domain.entities import (
    NotFoundEntry,
    RedirectKind,
    RedirectOrigin,
    RedirectRecord,
    RedirectStatus,
)
from smart_redirects.domain.paths import normalize_path
from smart_redirects.rules.models import Rules

# --- In-Memory Fakes ---


class InMemoryRedirectStore:
    """In-memory redirect store with the same semantics as the SQLite one."""

    def __init__(self) -> None:
        self._records: dict[UUID, RedirectRecord] = {}
        self._tick = 0

    def _by_source(self, source_path: str) -> RedirectRecord | None:
        for record in self._records.values():
            if record.source_path == source_path:
                return record
        return None

    def get_by_id(self, redirect_id: UUID) -> RedirectRecord | None:
        return self._records.get(redirect_id)

    def get_by_source(self, source_path: str) -> RedirectRecord | None:
        return self._by_source(source_path)

    def count_by_target(
        self,
        target: str,
        status: RedirectStatus = RedirectStatus.ACTIVE,
        forced: bool = False,
    ) -> int:
        return sum(
            1
            for r in self._records.values()
            if r.target == target and r.status == status and r.forced == forced
        )

    def save(
        self,
        source_path: str,
        target: str,
        kind: RedirectKind,
        status: RedirectStatus,
        forced: bool = False,
        origin: RedirectOrigin = RedirectOrigin.MANUAL,
    ) -> RedirectRecord:
        existing = self._by_source(source_path)
        if existing is not None:
            updated = existing.model_copy(
                update={"target": target, "kind": kind, "status": status, "forced": forced}
            )
            self._records[existing.id] = updated
            return updated

        # strictly increasing created_at keeps "newest first" deterministic
        self._tick += 1
        record = RedirectRecord(
            source_path=source_path,
            target=target,
            kind=kind,
            status=status,
            forced=forced,
            origin=origin,
            created_at=datetime(2025, 1, 1, tzinfo=UTC) + timedelta(seconds=self._tick),
        )
        self._records[record.id] = record
        return record

    def update_fields(self, redirect_id: UUID, **fields: Any) -> RedirectRecord | None:
        existing = self._records.get(redirect_id)
        if existing is None:
            return None
        updated = existing.model_copy(update=fields)
        self._records[redirect_id] = updated
        return updated

    def retarget(
        self,
        old_target: str,
        new_target: str,
        status: RedirectStatus = RedirectStatus.ACTIVE,
        forced: bool = False,
    ) -> int:
        changed = 0
        for record in list(self._records.values()):
            if (
                record.target == old_target
                and record.status == status
                and record.forced == forced
                and record.source_path != new_target
            ):
                self._records[record.id] = record.model_copy(update={"target": new_target})
                changed += 1
        return changed

    def increment_hits(self, source_path: str) -> None:
        record = self._by_source(source_path)
        if record is not None:
            self._records[record.id] = record.model_copy(update={"hits": record.hits + 1})

    def delete(self, redirect_id: UUID) -> bool:
        return self._records.pop(redirect_id, None) is not None

    def delete_many(self, redirect_ids: list[UUID]) -> int:
        return sum(1 for i in redirect_ids if self.delete(i))

    def delete_matching(
        self,
        sources: tuple[str, ...] = (),
        suffixes: tuple[str, ...] = (),
        status: RedirectStatus | None = None,
    ) -> int:
        doomed = [
            r.id
            for r in self._records.values()
            if (r.source_path in sources or any(r.source_path.endswith(s) for s in suffixes))
            and (status is None or r.status == status)
        ]
        for redirect_id in doomed:
            del self._records[redirect_id]
        return len(doomed)

    def list_all(self, status: RedirectStatus | None = None) -> list[RedirectRecord]:
        records = [r for r in self._records.values() if status is None or r.status == status]
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def count_by_status(self, status: RedirectStatus) -> int:
        return sum(1 for r in self._records.values() if r.status == status)

    def total_hits(self) -> int:
        return sum(r.hits for r in self._records.values())

    # --- Test helpers ---

    def add(
        self,
        source_path: str,
        target: str,
        kind: RedirectKind = RedirectKind.PERMANENT,
        status: RedirectStatus = RedirectStatus.ACTIVE,
        forced: bool = False,
        hits: int = 0,
    ) -> RedirectRecord:
        record = self.save(source_path, target, kind, status, forced=forced)
        if hits:
            record = self.update_fields(record.id, hits=hits) or record
        return record

    def sources(self) -> set[str]:
        return {r.source_path for r in self._records.values()}


class FailingRedirectStore(InMemoryRedirectStore):
    """Every call blows up, as a locked or missing database would."""

    def get_by_source(self, source_path: str) -> RedirectRecord | None:
        raise RuntimeError("database is locked")

    def save(self, *args: Any, **kwargs: Any) -> RedirectRecord:
        raise RuntimeError("database is locked")

    def increment_hits(self, source_path: str) -> None:
        raise RuntimeError("database is locked")


class InMemoryContentOracle:
    """Published pages and taxonomy terms by normalized path."""

    def __init__(self) -> None:
        self.published: set[str] = set()
        self.terms: set[str] = set()

    def publish(self, *paths: str) -> None:
        self.published.update(normalize_path(p) for p in paths)

    def add_term(self, *paths: str) -> None:
        self.terms.update(normalize_path(p) for p in paths)

    def path_maps_to_published_content(self, path: str) -> bool:
        return normalize_path(path) in self.published

    def content_exists(self, path: str) -> bool:
        path = normalize_path(path)
        return path in self.published or path in self.terms


class InMemoryNotFoundLog:
    def __init__(self) -> None:
        self._entries: dict[str, NotFoundEntry] = {}

    def upsert_hit(self, url: str, seen_at: datetime) -> None:
        existing = self._entries.get(url)
        if existing is None:
            self._entries[url] = NotFoundEntry(url=url, hits=1, last_seen=seen_at)
        else:
            self._entries[url] = existing.model_copy(
                update={"hits": existing.hits + 1, "last_seen": seen_at}
            )

    def get_by_url(self, url: str) -> NotFoundEntry | None:
        return self._entries.get(url)

    def list_all(self, limit: int = 100, offset: int = 0) -> list[NotFoundEntry]:
        entries = sorted(self._entries.values(), key=lambda e: e.hits, reverse=True)
        return entries[offset : offset + limit]

    def delete(self, entry_id: UUID) -> bool:
        for url, entry in list(self._entries.items()):
            if entry.id == entry_id:
                del self._entries[url]
                return True
        return False

    def delete_many(self, entry_ids: list[UUID]) -> int:
        return sum(1 for i in entry_ids if self.delete(i))

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count


class FixedClock:
    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2025, 6, 1, 12, 0, tzinfo=UTC)

    def now_utc(self) -> datetime:
        return self.now


class RecordingNoticeBoard:
    def __init__(self) -> None:
        self.raised: list[tuple[str, int]] = []

    def raise_notice(self, key: str, ttl_seconds: int) -> None:
        self.raised.append((key, ttl_seconds))

    def pop_notice(self, key: str) -> bool:
        for i, (raised_key, _) in enumerate(self.raised):
            if raised_key == key:
                del self.raised[i]
                return True
        return False


# --- Fixtures ---


@pytest.fixture
def store() -> InMemoryRedirectStore:
    return InMemoryRedirectStore()


@pytest.fixture
def oracle() -> InMemoryContentOracle:
    return InMemoryContentOracle()


@pytest.fixture
def not_found_log() -> InMemoryNotFoundLog:
    return InMemoryNotFoundLog()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def notices() -> RecordingNoticeBoard:
    return RecordingNoticeBoard()


@pytest.fixture
def rules() -> Rules:
    return Rules.model_validate({"site": {"base_url": "https://example.com"}})


@pytest.fixture
def failing_store() -> FailingRedirectStore:
    return FailingRedirectStore()

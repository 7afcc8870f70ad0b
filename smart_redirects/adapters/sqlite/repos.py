import sqlite3
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from smart_redirects.domain.entities import (
    ContentSnapshot,
    NotFoundEntry,
    RedirectKind,
    RedirectOrigin,
    RedirectRecord,
    RedirectStatus,
)
from smart_redirects.domain.paths import normalize_path


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


class SQLiteRepoBase:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        # One connection per operation; safe under a threaded server.
        conn = sqlite3.connect(self.db_path, timeout=30)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def _execute(self, query: str, params: tuple[Any, ...] = ()) -> int:
        """Run one write statement and return the affected row count."""
        conn = self._get_conn()
        try:
            cursor = conn.execute(query, params)
            conn.commit()
            return cursor.rowcount
        except sqlite3.Error:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _fetch_one(self, query: str, params: tuple[Any, ...] = ()) -> dict[str, Any] | None:
        conn = self._get_conn()
        try:
            row: dict[str, Any] | None = conn.execute(query, params).fetchone()
            return row
        finally:
            conn.close()

    def _fetch_all(self, query: str, params: tuple[Any, ...] = ()) -> list[dict[str, Any]]:
        conn = self._get_conn()
        try:
            return conn.execute(query, params).fetchall()
        finally:
            conn.close()


def _placeholders(values: list[Any] | tuple[Any, ...]) -> str:
    return ", ".join("?" for _ in values)


class SQLiteRedirectStore(SQLiteRepoBase):
    """Redirect records keyed by unique normalized source_path."""

    COLUMNS = ("source_path", "target", "kind", "status", "forced", "hits", "origin")

    def get_by_id(self, redirect_id: UUID) -> RedirectRecord | None:
        row = self._fetch_one("SELECT * FROM redirects WHERE id = ?", (str(redirect_id),))
        return self._map_row(row) if row else None

    def get_by_source(self, source_path: str) -> RedirectRecord | None:
        row = self._fetch_one("SELECT * FROM redirects WHERE source_path = ?", (source_path,))
        return self._map_row(row) if row else None

    def count_by_target(
        self,
        target: str,
        status: RedirectStatus = RedirectStatus.ACTIVE,
        forced: bool = False,
    ) -> int:
        row = self._fetch_one(
            "SELECT COUNT(*) AS n FROM redirects WHERE target = ? AND status = ? AND forced = ?",
            (target, status.value, int(forced)),
        )
        return int(row["n"]) if row else 0

    def save(
        self,
        source_path: str,
        target: str,
        kind: RedirectKind,
        status: RedirectStatus,
        forced: bool = False,
        origin: RedirectOrigin = RedirectOrigin.MANUAL,
    ) -> RedirectRecord:
        # id, hits, origin and created_at survive an update of the same source
        self._execute(
            """
            INSERT INTO redirects (
                id, source_path, target, kind, status, forced, hits, origin, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, 0, ?, ?)
            ON CONFLICT(source_path) DO UPDATE SET
                target=excluded.target,
                kind=excluded.kind,
                status=excluded.status,
                forced=excluded.forced
        """,
            (
                str(uuid4()),
                source_path,
                target,
                int(kind),
                status.value,
                int(forced),
                origin.value,
                datetime.now(UTC).isoformat(),
            ),
        )
        record = self.get_by_source(source_path)
        if record is None:
            raise RuntimeError(f"Redirect for {source_path} vanished after save")
        return record

    def update_fields(self, redirect_id: UUID, **fields: Any) -> RedirectRecord | None:
        unknown = set(fields) - set(self.COLUMNS)
        if unknown:
            raise ValueError(f"Unknown redirect columns: {sorted(unknown)}")
        if fields:
            assignments = ", ".join(f"{name} = ?" for name in fields)
            params = tuple(self._to_db(value) for value in fields.values())
            self._execute(
                f"UPDATE redirects SET {assignments} WHERE id = ?",
                params + (str(redirect_id),),
            )
        return self.get_by_id(redirect_id)

    def retarget(
        self,
        old_target: str,
        new_target: str,
        status: RedirectStatus = RedirectStatus.ACTIVE,
        forced: bool = False,
    ) -> int:
        # A record whose source is the new target would become a self-loop
        return self._execute(
            """
            UPDATE redirects SET target = ?
            WHERE target = ? AND status = ? AND forced = ? AND source_path != ?
        """,
            (new_target, old_target, status.value, int(forced), new_target),
        )

    def increment_hits(self, source_path: str) -> None:
        self._execute(
            "UPDATE redirects SET hits = hits + 1 WHERE source_path = ?",
            (source_path,),
        )

    def delete(self, redirect_id: UUID) -> bool:
        return self._execute("DELETE FROM redirects WHERE id = ?", (str(redirect_id),)) > 0

    def delete_many(self, redirect_ids: list[UUID]) -> int:
        if not redirect_ids:
            return 0
        ids = [str(i) for i in redirect_ids]
        return self._execute(
            f"DELETE FROM redirects WHERE id IN ({_placeholders(ids)})",
            tuple(ids),
        )

    def delete_matching(
        self,
        sources: tuple[str, ...] = (),
        suffixes: tuple[str, ...] = (),
        status: RedirectStatus | None = None,
    ) -> int:
        """Delete records whose source is listed or ends with one of the suffixes."""
        clauses: list[str] = []
        params: list[Any] = []

        if sources:
            clauses.append(f"source_path IN ({_placeholders(sources)})")
            params.extend(sources)
        for suffix in suffixes:
            # substr() keeps the comparison exact, unlike LIKE
            clauses.append("substr(source_path, -?) = ?")
            params.extend([len(suffix), suffix])

        if not clauses:
            return 0

        query = f"DELETE FROM redirects WHERE ({' OR '.join(clauses)})"
        if status is not None:
            query += " AND status = ?"
            params.append(status.value)
        return self._execute(query, tuple(params))

    def list_all(self, status: RedirectStatus | None = None) -> list[RedirectRecord]:
        if status is None:
            rows = self._fetch_all("SELECT * FROM redirects ORDER BY created_at DESC")
        else:
            rows = self._fetch_all(
                "SELECT * FROM redirects WHERE status = ? ORDER BY created_at DESC",
                (status.value,),
            )
        return [self._map_row(r) for r in rows]

    def count_by_status(self, status: RedirectStatus) -> int:
        row = self._fetch_one(
            "SELECT COUNT(*) AS n FROM redirects WHERE status = ?", (status.value,)
        )
        return int(row["n"]) if row else 0

    def total_hits(self) -> int:
        row = self._fetch_one("SELECT COALESCE(SUM(hits), 0) AS n FROM redirects")
        return int(row["n"]) if row else 0

    @staticmethod
    def _to_db(value: Any) -> Any:
        if isinstance(value, RedirectKind):
            return int(value)
        if isinstance(value, (RedirectStatus, RedirectOrigin)):
            return value.value
        if isinstance(value, bool):
            return int(value)
        return value

    def _map_row(self, row: dict[str, Any]) -> RedirectRecord:
        return RedirectRecord(
            id=UUID(row["id"]),
            source_path=row["source_path"],
            target=row["target"],
            kind=RedirectKind(row["kind"]),
            status=RedirectStatus(row["status"]),
            forced=bool(row["forced"]),
            hits=row["hits"],
            origin=RedirectOrigin(row["origin"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )


class SQLiteNotFoundLog(SQLiteRepoBase):
    def upsert_hit(self, url: str, seen_at: datetime) -> None:
        self._execute(
            """
            INSERT INTO not_found_logs (id, url, hits, last_seen)
            VALUES (?, ?, 1, ?)
            ON CONFLICT(url) DO UPDATE SET
                hits = hits + 1,
                last_seen = excluded.last_seen
        """,
            (str(uuid4()), url, seen_at.isoformat()),
        )

    def get_by_url(self, url: str) -> NotFoundEntry | None:
        row = self._fetch_one("SELECT * FROM not_found_logs WHERE url = ?", (url,))
        return self._map_row(row) if row else None

    def list_all(self, limit: int = 100, offset: int = 0) -> list[NotFoundEntry]:
        rows = self._fetch_all(
            "SELECT * FROM not_found_logs ORDER BY hits DESC, last_seen DESC LIMIT ? OFFSET ?",
            (limit, offset),
        )
        return [self._map_row(r) for r in rows]

    def delete(self, entry_id: UUID) -> bool:
        return self._execute("DELETE FROM not_found_logs WHERE id = ?", (str(entry_id),)) > 0

    def delete_many(self, entry_ids: list[UUID]) -> int:
        if not entry_ids:
            return 0
        ids = [str(i) for i in entry_ids]
        return self._execute(
            f"DELETE FROM not_found_logs WHERE id IN ({_placeholders(ids)})",
            tuple(ids),
        )

    def clear(self) -> int:
        return self._execute("DELETE FROM not_found_logs")

    def _map_row(self, row: dict[str, Any]) -> NotFoundEntry:
        return NotFoundEntry(
            id=UUID(row["id"]),
            url=row["url"],
            hits=row["hits"],
            last_seen=datetime.fromisoformat(row["last_seen"]),
        )


class SQLiteContentOracle(SQLiteRepoBase):
    """
    Answers "is there content at this path?" from the content_items mirror.

    The mirror is kept current by the content event webhooks through sync().
    """

    def resolve_content_id(self, path: str) -> str | None:
        row = self._fetch_one(
            "SELECT id FROM content_items WHERE path = ? AND kind = 'page' LIMIT 1",
            (normalize_path(path),),
        )
        return row["id"] if row else None

    def get_status(self, content_id: str) -> str | None:
        row = self._fetch_one("SELECT status FROM content_items WHERE id = ?", (content_id,))
        return row["status"] if row else None

    def path_maps_to_published_content(self, path: str) -> bool:
        row = self._fetch_one(
            """
            SELECT 1 FROM content_items
            WHERE path = ? AND kind = 'page' AND status = 'publish'
            LIMIT 1
        """,
            (normalize_path(path),),
        )
        return row is not None

    def content_exists(self, path: str) -> bool:
        """Published page or any taxonomy term at the path."""
        row = self._fetch_one(
            """
            SELECT 1 FROM content_items
            WHERE path = ? AND (kind = 'term' OR status = 'publish')
            LIMIT 1
        """,
            (normalize_path(path),),
        )
        return row is not None

    def sync(self, item: ContentSnapshot) -> None:
        """Mirror the latest known state of a page."""
        link = item.permalink or item.uri
        path = normalize_path(link) if link else ""
        self._execute(
            """
            INSERT INTO content_items (id, path, slug, status, kind)
            VALUES (?, ?, ?, ?, 'page')
            ON CONFLICT(id) DO UPDATE SET
                path=excluded.path,
                slug=excluded.slug,
                status=excluded.status
        """,
            (item.id, path, item.slug, item.status),
        )

    def add_term(self, term_id: str, path: str, slug: str = "") -> None:
        self._execute(
            """
            INSERT INTO content_items (id, path, slug, status, kind)
            VALUES (?, ?, ?, 'publish', 'term')
            ON CONFLICT(id) DO UPDATE SET path=excluded.path, slug=excluded.slug
        """,
            (term_id, normalize_path(path), slug),
        )

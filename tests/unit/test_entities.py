"""
Tests for domain entity defaults.
"""

from datetime import UTC

from smart_redirects.domain.entities import NotFoundEntry, RedirectRecord


class TestTimestamps:
    def test_redirect_created_at_is_aware_utc(self) -> None:
        record = RedirectRecord(source_path="/a/", target="/b/")

        assert record.created_at.tzinfo is UTC

    def test_not_found_last_seen_is_aware_utc(self) -> None:
        entry = NotFoundEntry(url="/gone/")

        assert entry.last_seen.tzinfo is UTC

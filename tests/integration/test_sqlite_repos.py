import threading
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from smart_redirects.adapters.sqlite.migrator import SQLiteMigrator
from smart_redirects.adapters.sqlite.repos import (
    SQLiteContentOracle,
    SQLiteNotFoundLog,
    SQLiteRedirectStore,
)
from smart_redirects.components.health import HealthAnalyzer
from smart_redirects.components.watcher import LifecycleWatcher
from smart_redirects.domain.entities import (
    ContentSnapshot,
    RedirectKind,
    RedirectOrigin,
    RedirectStatus,
)

ACTIVE = RedirectStatus.ACTIVE
PENDING = RedirectStatus.PENDING
PERMANENT = RedirectKind.PERMANENT
TEMPORARY = RedirectKind.TEMPORARY


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "test_redirects.db")
    SQLiteMigrator(path, "migrations").run_migrations()
    return path


@pytest.fixture
def repo(db_path):
    return SQLiteRedirectStore(db_path)


@pytest.fixture
def log(db_path):
    return SQLiteNotFoundLog(db_path)


@pytest.fixture
def content(db_path):
    return SQLiteContentOracle(db_path)


class TestRedirectStore:
    def test_save_and_get(self, repo):
        saved = repo.save("/old/", "/new/", PERMANENT, ACTIVE, origin=RedirectOrigin.MANUAL)

        fetched = repo.get_by_source("/old/")
        assert fetched == saved
        assert repo.get_by_id(saved.id) == saved
        assert fetched.kind == PERMANENT
        assert fetched.hits == 0
        assert fetched.origin == RedirectOrigin.MANUAL

    def test_save_same_source_updates_in_place(self, repo):
        first = repo.save("/old/", "/a/", TEMPORARY, PENDING, origin=RedirectOrigin.FALLBACK)
        repo.increment_hits("/old/")

        second = repo.save("/old/", "/b/", PERMANENT, ACTIVE, forced=True)

        assert second.id == first.id
        assert second.created_at == first.created_at
        assert second.hits == 1
        assert second.origin == RedirectOrigin.FALLBACK
        assert (second.target, second.kind, second.status, second.forced) == (
            "/b/",
            PERMANENT,
            ACTIVE,
            True,
        )
        assert len(repo.list_all()) == 1

    def test_update_fields(self, repo):
        record = repo.save("/old/", "/a/", TEMPORARY, PENDING)

        updated = repo.update_fields(record.id, status=ACTIVE, kind=PERMANENT, forced=True)

        assert updated.status == ACTIVE
        assert updated.kind == PERMANENT
        assert updated.forced is True

    def test_update_fields_rejects_unknown_columns(self, repo):
        record = repo.save("/old/", "/a/", TEMPORARY, PENDING)

        with pytest.raises(ValueError):
            repo.update_fields(record.id, id="evil")

    def test_retarget_only_active_non_forced(self, repo):
        repo.save("/x/", "/y/", PERMANENT, ACTIVE)
        repo.save("/p/", "/y/", TEMPORARY, PENDING)
        repo.save("/f/", "/y/", PERMANENT, ACTIVE, forced=True)

        changed = repo.retarget("/y/", "/z/")

        assert changed == 1
        assert repo.get_by_source("/x/").target == "/z/"
        assert repo.get_by_source("/p/").target == "/y/"
        assert repo.get_by_source("/f/").target == "/y/"

    def test_retarget_skips_would_be_self_loop(self, repo):
        repo.save("/z/", "/y/", PERMANENT, ACTIVE)

        assert repo.retarget("/y/", "/z/") == 0
        assert repo.get_by_source("/z/").target == "/y/"

    def test_count_by_target(self, repo):
        repo.save("/a/", "/t/", PERMANENT, ACTIVE)
        repo.save("/b/", "/t/", PERMANENT, PENDING)

        assert repo.count_by_target("/t/") == 1
        assert repo.count_by_target("/t/", status=PENDING) == 1

    def test_delete_matching_by_suffix_is_exact(self, repo):
        repo.save("/blog/post/", "/blog/", TEMPORARY, PENDING)
        repo.save("/blog/my-post/", "/blog/", TEMPORARY, PENDING)
        repo.save("/blog/POST/", "/blog/", TEMPORARY, PENDING)
        repo.save("/old/post/", "/old/", PERMANENT, ACTIVE)

        deleted = repo.delete_matching(suffixes=("/post/",), status=PENDING)

        assert deleted == 1
        assert {r.source_path for r in repo.list_all()} == {
            "/blog/my-post/",
            "/blog/POST/",
            "/old/post/",
        }

    def test_delete_matching_any_status(self, repo):
        repo.save("/blog/post/", "/blog/", TEMPORARY, PENDING)
        repo.save("/blog/post", "/blog/", TEMPORARY, ACTIVE)
        repo.save("/other/", "/blog/", TEMPORARY, ACTIVE)

        deleted = repo.delete_matching(sources=("/blog/post/", "/blog/post"))

        assert deleted == 2
        assert [r.source_path for r in repo.list_all()] == ["/other/"]

    def test_delete_matching_without_criteria(self, repo):
        repo.save("/a/", "/b/", PERMANENT, ACTIVE)

        assert repo.delete_matching() == 0

    def test_delete_and_delete_many(self, repo):
        ids = [repo.save(f"/{n}/", "/x/", PERMANENT, ACTIVE).id for n in ("a", "b", "c")]

        assert repo.delete(ids[0]) is True
        assert repo.delete(ids[0]) is False
        assert repo.delete_many(ids[1:] + [uuid4()]) == 2
        assert repo.delete_many([]) == 0

    def test_list_and_stats(self, repo):
        repo.save("/a/", "/x/", PERMANENT, ACTIVE)
        repo.save("/b/", "/x/", TEMPORARY, PENDING)
        repo.increment_hits("/a/")
        repo.increment_hits("/a/")

        assert len(repo.list_all()) == 2
        assert [r.source_path for r in repo.list_all(status=PENDING)] == ["/b/"]
        assert repo.count_by_status(ACTIVE) == 1
        assert repo.count_by_status(PENDING) == 1
        assert repo.total_hits() == 2

    def test_concurrent_hits_are_all_counted(self, repo):
        repo.save("/old/", "/new/", PERMANENT, ACTIVE)

        threads = [threading.Thread(target=repo.increment_hits, args=("/old/",)) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert repo.get_by_source("/old/").hits == 10

    def test_rename_and_rename_back_leaves_no_loop(self, repo):
        def page(slug):
            return ContentSnapshot(
                id="7", slug=slug, status="publish", permalink=f"https://example.com/{slug}/"
            )

        watcher = LifecycleWatcher(repo)
        watcher.on_post_updated(page("a"), page("b"))
        watcher.on_post_updated(page("b"), page("a"))

        assert [(r.source_path, r.target) for r in repo.list_all()] == [("/b/", "/a/")]
        assert HealthAnalyzer(repo).detect_loops() == []


class TestNotFoundLog:
    def test_upsert_counts_repeats(self, log):
        first_seen = datetime(2025, 1, 1, tzinfo=UTC)
        log.upsert_hit("/missing/", first_seen)
        log.upsert_hit("/missing/", first_seen + timedelta(hours=1))

        entry = log.get_by_url("/missing/")
        assert entry.hits == 2
        assert entry.last_seen == first_seen + timedelta(hours=1)
        assert len(log.list_all()) == 1

    def test_concurrent_upserts_give_one_row(self, log):
        seen = datetime(2025, 1, 1, tzinfo=UTC)
        barrier = threading.Barrier(2)

        def hit():
            barrier.wait()
            log.upsert_hit("/race/", seen)

        threads = [threading.Thread(target=hit) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        entries = log.list_all()
        assert len(entries) == 1
        assert entries[0].hits == 2

    def test_list_order_and_paging(self, log):
        seen = datetime(2025, 1, 1, tzinfo=UTC)
        for _ in range(3):
            log.upsert_hit("/popular/", seen)
        log.upsert_hit("/rare/", seen)

        assert [e.url for e in log.list_all()] == ["/popular/", "/rare/"]
        assert [e.url for e in log.list_all(limit=1, offset=1)] == ["/rare/"]

    def test_delete_and_clear(self, log):
        seen = datetime(2025, 1, 1, tzinfo=UTC)
        for url in ("/a/", "/b/", "/c/"):
            log.upsert_hit(url, seen)

        entry = log.get_by_url("/a/")
        assert log.delete(entry.id) is True
        assert log.delete_many([log.get_by_url("/b/").id]) == 1
        assert log.clear() == 1
        assert log.list_all() == []


class TestContentOracle:
    def test_published_page(self, content):
        content.sync(
            ContentSnapshot(
                id="1", slug="about", status="publish", permalink="https://example.com/about"
            )
        )

        assert content.path_maps_to_published_content("/about/")
        assert content.content_exists("/about")
        assert content.resolve_content_id("/about/") == "1"
        assert content.get_status("1") == "publish"

    def test_draft_does_not_count(self, content):
        content.sync(ContentSnapshot(id="2", slug="wip", status="draft", permalink="/wip/"))

        assert not content.path_maps_to_published_content("/wip/")
        assert not content.content_exists("/wip/")
        assert content.resolve_content_id("/wip/") == "2"

    def test_sync_tracks_latest_state(self, content):
        content.sync(ContentSnapshot(id="3", slug="a", status="publish", permalink="/a/"))
        content.sync(ContentSnapshot(id="3", slug="b", status="publish", permalink="/b/"))

        assert not content.path_maps_to_published_content("/a/")
        assert content.path_maps_to_published_content("/b/")

    def test_terms_exist_for_fallback_only(self, content):
        content.add_term("cat-1", "/category/news/", slug="news")

        assert content.content_exists("/category/news/")
        assert not content.path_maps_to_published_content("/category/news/")

"""
Tests for the content event webhooks.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from smart_redirects.api.deps import (
    get_content_oracle,
    get_notice_board,
    get_redirect_store,
    get_rules,
)
from smart_redirects.api.routes.content_events import router
from smart_redirects.domain.entities import ContentSnapshot, RedirectStatus


class MirrorSpy:
    """Content mirror that only remembers what it was told."""

    def __init__(self) -> None:
        self.synced: list[ContentSnapshot] = []

    def sync(self, item: ContentSnapshot) -> None:
        self.synced.append(item)


@pytest.fixture
def mirror() -> MirrorSpy:
    return MirrorSpy()


@pytest.fixture
def client(store, notices, rules, mirror) -> TestClient:
    app = FastAPI()
    app.include_router(router, prefix="/api/content-events")

    app.dependency_overrides[get_redirect_store] = lambda: store
    app.dependency_overrides[get_content_oracle] = lambda: mirror
    app.dependency_overrides[get_notice_board] = lambda: notices
    app.dependency_overrides[get_rules] = lambda: rules

    return TestClient(app)


def _item(slug: str, status: str = "publish", **extra) -> dict:
    return {
        "id": "7",
        "slug": slug,
        "status": status,
        "permalink": f"https://example.com/blog/{slug}/",
        **extra,
    }


class TestUpdated:
    def test_rename(self, client, store, notices, mirror) -> None:
        response = client.post(
            "/api/content-events/updated",
            json={"before": _item("old"), "after": _item("new")},
        )

        data = response.json()
        assert data["success"] is True
        assert data["mutations"] == ["RetargetUpstream", "RaiseNotice"]
        assert store.get_by_source("/blog/old/").target == "/blog/new/"
        assert notices.raised[0][0] == "slug_changed"
        assert mirror.synced[0].slug == "new"

    def test_bad_snapshot_is_422(self, client) -> None:
        response = client.post(
            "/api/content-events/updated",
            json={"before": _item("a", status="bogus"), "after": _item("b")},
        )

        assert response.status_code == 422


class TestTrashAndRestore:
    def test_trash_then_restore(self, client, store, mirror) -> None:
        item = _item("post", parent_permalink="https://example.com/blog/")

        client.post("/api/content-events/trashed", json={"item": item})

        record = store.get_by_source("/blog/post/")
        assert record.status == RedirectStatus.PENDING
        assert mirror.synced[-1].status == "trash"

        response = client.post("/api/content-events/restored", json={"item": item})

        assert response.json()["applied"] == 1
        assert store.list_all() == []
        assert mirror.synced[-1].status == "publish"

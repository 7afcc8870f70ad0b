"""
Content event webhooks.

The host CMS posts content snapshots here on save, trash and restore.
Each event updates the redirect store through the lifecycle watcher and
refreshes the local content mirror used by the resolver.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from smart_redirects.adapters.notices import InMemoryNoticeBoard
from smart_redirects.adapters.sqlite.repos import SQLiteContentOracle, SQLiteRedirectStore
from smart_redirects.api.deps import (
    get_content_oracle,
    get_notice_board,
    get_redirect_store,
    get_rules,
)
from smart_redirects.components.watcher import (
    PostUpdatedInput,
    RestoreInput,
    TrashInput,
    WatchOutput,
    run_post_updated,
    run_restore,
    run_trash,
)
from smart_redirects.domain.entities import ContentSnapshot
from smart_redirects.rules.models import Rules

router = APIRouter()


class PostUpdatedEvent(BaseModel):
    before: ContentSnapshot
    after: ContentSnapshot


class ItemEvent(BaseModel):
    item: ContentSnapshot


def _to_response(result: WatchOutput) -> dict[str, Any]:
    # Failed mutations are logged by the watcher; the host only gets a summary
    return {
        "success": result.success,
        "errors": result.errors,
        "planned": len(result.mutations),
        "applied": result.applied,
        "mutations": [type(m).__name__ for m in result.mutations],
    }


@router.post("/updated")
def post_updated(
    event: PostUpdatedEvent,
    store: SQLiteRedirectStore = Depends(get_redirect_store),
    oracle: SQLiteContentOracle = Depends(get_content_oracle),
    notices: InMemoryNoticeBoard = Depends(get_notice_board),
    rules: Rules = Depends(get_rules),
) -> dict[str, Any]:
    result = run_post_updated(
        PostUpdatedInput(before=event.before, after=event.after),
        store=store,
        notices=notices,
        rules=rules,
    )
    oracle.sync(event.after)
    return _to_response(result)


@router.post("/trashed")
def trashed(
    event: ItemEvent,
    store: SQLiteRedirectStore = Depends(get_redirect_store),
    oracle: SQLiteContentOracle = Depends(get_content_oracle),
    rules: Rules = Depends(get_rules),
) -> dict[str, Any]:
    result = run_trash(TrashInput(item=event.item), store=store, rules=rules)
    oracle.sync(event.item.model_copy(update={"status": "trash"}))
    return _to_response(result)


@router.post("/restored")
def restored(
    event: ItemEvent,
    store: SQLiteRedirectStore = Depends(get_redirect_store),
    oracle: SQLiteContentOracle = Depends(get_content_oracle),
    rules: Rules = Depends(get_rules),
) -> dict[str, Any]:
    result = run_restore(RestoreInput(item=event.item), store=store, rules=rules)
    oracle.sync(event.item)
    return _to_response(result)

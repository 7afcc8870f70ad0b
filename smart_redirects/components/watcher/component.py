"""
Watcher component - redirect upkeep for content lifecycle events.

Invariants:
- I1: A rename never leaves X -> old -> new; X is rewritten to new
- I2: System guesses (unpublish, trash) are stored as pending 302s
- I3: Republish cleanup only removes pending records
- I4: Root or empty paths never produce a mutation
"""

from __future__ import annotations

from dataclasses import dataclass

from smart_redirects.domain.entities import ContentSnapshot
from smart_redirects.rules.models import Rules

from ._impl import LifecycleWatcher, WatcherConfig
from .models import WatchOutput
from .ports import NoticeBoardPort, RedirectSyncPort

# --- Input Models ---


@dataclass(frozen=True)
class PostUpdatedInput:
    before: ContentSnapshot
    after: ContentSnapshot


@dataclass(frozen=True)
class TrashInput:
    item: ContentSnapshot


@dataclass(frozen=True)
class RestoreInput:
    item: ContentSnapshot


def build_config(rules: Rules | None) -> WatcherConfig:
    """Build watcher config from rules."""
    if rules is None:
        return WatcherConfig()

    return WatcherConfig(
        notice_ttl_seconds=rules.lifecycle.notice_ttl_seconds,
        trash_suffix=rules.lifecycle.trash_suffix,
    )


def _create_watcher(
    store: RedirectSyncPort,
    notices: NoticeBoardPort | None,
    rules: Rules | None,
) -> LifecycleWatcher:
    return LifecycleWatcher(store=store, notices=notices, config=build_config(rules))


# --- Component Entry Points ---


def run_post_updated(
    inp: PostUpdatedInput,
    *,
    store: RedirectSyncPort,
    notices: NoticeBoardPort | None = None,
    rules: Rules | None = None,
) -> WatchOutput:
    """
    Handle a content save (rename, unpublish or republish).

    Args:
        inp: Snapshots before and after the save.
        store: Redirect store (write side).
        notices: Optional notice board for the slug-change flag.
        rules: Optional rules for lifecycle configuration.

    Returns:
        WatchOutput with the planned mutations.
    """
    watcher = _create_watcher(store, notices, rules)
    return watcher.on_post_updated(inp.before, inp.after)


def run_trash(
    inp: TrashInput,
    *,
    store: RedirectSyncPort,
    notices: NoticeBoardPort | None = None,
    rules: Rules | None = None,
) -> WatchOutput:
    """Handle an item being moved to the trash."""
    watcher = _create_watcher(store, notices, rules)
    return watcher.on_trash(inp.item)


def run_restore(
    inp: RestoreInput,
    *,
    store: RedirectSyncPort,
    notices: NoticeBoardPort | None = None,
    rules: Rules | None = None,
) -> WatchOutput:
    """Handle an item coming back from the trash."""
    watcher = _create_watcher(store, notices, rules)
    return watcher.on_restore(inp.item)


def run(
    inp: PostUpdatedInput | TrashInput | RestoreInput,
    *,
    store: RedirectSyncPort,
    notices: NoticeBoardPort | None = None,
    rules: Rules | None = None,
) -> WatchOutput:
    """Dispatch a lifecycle event to its handler."""
    if isinstance(inp, PostUpdatedInput):
        return run_post_updated(inp, store=store, notices=notices, rules=rules)
    elif isinstance(inp, TrashInput):
        return run_trash(inp, store=store, notices=notices, rules=rules)
    elif isinstance(inp, RestoreInput):
        return run_restore(inp, store=store, notices=notices, rules=rules)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")

"""
LifecycleWatcher - keeps redirects in step with content moving around.

Planning and applying are separate: every planner is a pure function from
content snapshots to a list of mutations, and LifecycleWatcher.apply()
performs them against the store.

Transitions (before, after):
- published -> published, slug changed: old -> new (301, active), collapsing
  an existing X -> old into X -> new instead of growing a chain
- published -> draft/pending/private: old -> parent|term|root (302, pending)
- draft/pending/private -> published: drop pending records for the item

Separate events:
- trash of a published item: old -> parent|term|root (302, pending)
- restore into published: drop every record that looks like the item

Key behaviors:
- Guards are early returns; an empty or root path means "do nothing"
- Nothing raises into the host CMS; failures are logged
- The collapse check and the write are not one transaction; a race between
  two items can miss a collapse, which the health report will surface
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from smart_redirects.components.watcher.models import (
    ContentTransition,
    DeleteRedirects,
    Mutation,
    RaiseNotice,
    RetargetUpstream,
    SaveRedirect,
    StatusClass,
    WatchOutput,
)
from smart_redirects.components.watcher.ports import NoticeBoardPort, RedirectSyncPort
from smart_redirects.domain.entities import (
    ContentSnapshot,
    RedirectKind,
    RedirectOrigin,
    RedirectStatus,
)
from smart_redirects.domain.paths import (
    ROOT,
    is_root,
    last_segment,
    normalize_path,
    replace_last_segment,
    slug_suffix,
    strip_trailing_slash,
)

logger = logging.getLogger(__name__)

SLUG_CHANGED_NOTICE = "slug_changed"

# --- Configuration ---


@dataclass(frozen=True)
class WatcherConfig:
    """Watcher configuration from rules."""

    notice_ttl_seconds: int = 30
    trash_suffix: str = "__trashed"


DEFAULT_CONFIG = WatcherConfig()


# --- Helpers ---


def status_class(status: str) -> StatusClass:
    if status == "publish":
        return StatusClass.PUBLISHED
    if status in ("draft", "pending", "private"):
        return StatusClass.OFFLINE
    return StatusClass.OTHER


def fallback_target(item: ContentSnapshot, current: ContentSnapshot | None = None) -> str:
    """Parent permalink, else taxonomy term link, else the site root."""
    if item.parent_permalink:
        return normalize_path(item.parent_permalink)

    term_link = (current.term_link if current else None) or item.term_link
    if term_link:
        return normalize_path(term_link)

    return ROOT


# --- Planners ---


def plan_rename(
    transition: ContentTransition,
    config: WatcherConfig = DEFAULT_CONFIG,
) -> list[Mutation]:
    before, after = transition.before, transition.after
    if before.slug == after.slug:
        return []

    if not before.permalink or not after.permalink:
        return []

    old_path = normalize_path(before.permalink)
    new_path = normalize_path(after.permalink)
    if is_root(old_path) or is_root(new_path) or old_path == new_path:
        return []

    # Save conflicts can leave the permalink with a "-2"-style slug; trust
    # the slug the editor actually asked for.
    intended_slug = after.slug.strip("/")
    if intended_slug and last_segment(new_path) != intended_slug:
        new_path = replace_last_segment(new_path, intended_slug)
        if new_path == old_path:
            return []

    return [
        RetargetUpstream(old_target=old_path, new_target=new_path),
        RaiseNotice(SLUG_CHANGED_NOTICE),
    ]


def plan_unpublish(
    transition: ContentTransition,
    config: WatcherConfig = DEFAULT_CONFIG,
) -> list[Mutation]:
    before, after = transition.before, transition.after

    # Trashing fires as an update with a renamed slug first; on_trash owns it.
    if config.trash_suffix and config.trash_suffix in after.slug:
        return []

    if not before.permalink:
        return []
    old_path = normalize_path(before.permalink)
    if is_root(old_path):
        return []

    target = fallback_target(before, after)
    if target == old_path:
        return []

    return [
        SaveRedirect(
            source_path=old_path,
            target=target,
            kind=RedirectKind.TEMPORARY,
            status=RedirectStatus.PENDING,
            origin=RedirectOrigin.UNPUBLISH,
        )
    ]


def plan_republish(
    transition: ContentTransition,
    config: WatcherConfig = DEFAULT_CONFIG,
) -> list[Mutation]:
    after = transition.after

    sources: tuple[str, ...] = ()
    if after.permalink and not is_root(after.permalink):
        sources = (normalize_path(after.permalink),)

    # The parent may have changed while the item was offline, so the logged
    # path can differ from today's; the trailing slug still matches.
    suffixes: tuple[str, ...] = ()
    if after.slug.strip("/"):
        suffixes = (slug_suffix(after.slug),)

    if not sources and not suffixes:
        return []

    return [DeleteRedirects(sources=sources, suffixes=suffixes, status=RedirectStatus.PENDING)]


def plan_trash(item: ContentSnapshot, config: WatcherConfig = DEFAULT_CONFIG) -> list[Mutation]:
    if item.status != "publish":
        return []

    old_path = normalize_path(item.permalink)
    if is_root(old_path):
        # Permalinks of items leaving the published state can collapse to
        # the root; rebuild the path from the hierarchy or the slug.
        if item.uri and item.uri.strip("/"):
            old_path = normalize_path("/" + item.uri.strip("/") + "/")
        elif item.slug.strip("/"):
            old_path = normalize_path(slug_suffix(item.slug))

    if is_root(old_path):
        return []

    mutations: list[Mutation] = []
    if item.slug.strip("/"):
        mutations.append(
            DeleteRedirects(suffixes=(slug_suffix(item.slug),), status=RedirectStatus.PENDING)
        )

    target = fallback_target(item)
    if target == old_path:
        return mutations

    mutations.append(
        SaveRedirect(
            source_path=old_path,
            target=target,
            kind=RedirectKind.TEMPORARY,
            status=RedirectStatus.PENDING,
            origin=RedirectOrigin.TRASH,
        )
    )
    return mutations


def plan_restore(item: ContentSnapshot, config: WatcherConfig = DEFAULT_CONFIG) -> list[Mutation]:
    # Restored as a draft: the content is still not live, keep its redirect.
    if item.status != "publish":
        return []

    sources: tuple[str, ...] = ()
    if item.permalink and not is_root(item.permalink):
        path = normalize_path(item.permalink)
        sources = (path, strip_trailing_slash(path))

    suffixes: tuple[str, ...] = ()
    if item.slug.strip("/"):
        suffixes = (slug_suffix(item.slug), slug_suffix(item.slug, trailing_slash=False))

    if not sources and not suffixes:
        return []

    # Over-inclusive on purpose: any status, any parent path.
    return [DeleteRedirects(sources=sources, suffixes=suffixes, status=None)]


Planner = Callable[[ContentTransition, WatcherConfig], list[Mutation]]

TRANSITIONS: dict[tuple[StatusClass, StatusClass], Planner] = {
    (StatusClass.PUBLISHED, StatusClass.PUBLISHED): plan_rename,
    (StatusClass.PUBLISHED, StatusClass.OFFLINE): plan_unpublish,
    (StatusClass.OFFLINE, StatusClass.PUBLISHED): plan_republish,
}


def plan_transition(
    transition: ContentTransition,
    config: WatcherConfig = DEFAULT_CONFIG,
) -> list[Mutation]:
    """Pick the planner for a save from the transition table."""
    before = transition.before
    if not before.slug or before.status == "new":
        return []

    key = (status_class(before.status), status_class(transition.after.status))
    planner = TRANSITIONS.get(key)
    if planner is None:
        return []
    return planner(transition, config)


# --- Watcher ---


class LifecycleWatcher:
    """Applies planned mutations for content lifecycle events."""

    def __init__(
        self,
        store: RedirectSyncPort,
        notices: NoticeBoardPort | None = None,
        config: WatcherConfig | None = None,
    ) -> None:
        self._store = store
        self._notices = notices
        self._config = config or DEFAULT_CONFIG

    def on_post_updated(self, before: ContentSnapshot, after: ContentSnapshot) -> WatchOutput:
        transition = ContentTransition(before=before, after=after)
        return self._run(lambda: plan_transition(transition, self._config), after.id)

    def on_trash(self, item: ContentSnapshot) -> WatchOutput:
        return self._run(lambda: plan_trash(item, self._config), item.id)

    def on_restore(self, item: ContentSnapshot) -> WatchOutput:
        return self._run(lambda: plan_restore(item, self._config), item.id)

    def _run(self, plan: Callable[[], list[Mutation]], item_id: str) -> WatchOutput:
        try:
            mutations = plan()
        except Exception as e:
            logger.exception("Failed to plan redirects for content %s", item_id)
            return WatchOutput(errors=[str(e)])

        applied, errors = self.apply(mutations)
        if mutations:
            logger.info(
                "Content %s: applied %d/%d redirect mutations", item_id, applied, len(mutations)
            )
        return WatchOutput(mutations=tuple(mutations), applied=applied, errors=errors)

    def apply(self, mutations: list[Mutation]) -> tuple[int, list[str]]:
        """Apply mutations in order. A failing one is logged and skipped."""
        applied = 0
        errors: list[str] = []

        for mutation in mutations:
            try:
                self._apply_one(mutation)
                applied += 1
            except Exception as e:
                logger.exception("Failed to apply %r", mutation)
                errors.append(str(e))

        return applied, errors

    def _apply_one(self, mutation: Mutation) -> None:
        if isinstance(mutation, SaveRedirect):
            self._store.save(
                mutation.source_path,
                mutation.target,
                mutation.kind,
                mutation.status,
                origin=mutation.origin,
            )
        elif isinstance(mutation, RetargetUpstream):
            self._drop_reverse_redirect(mutation.old_target, mutation.new_target)
            changed = self._store.retarget(
                mutation.old_target,
                mutation.new_target,
                status=RedirectStatus.ACTIVE,
                forced=False,
            )
            if changed == 0:
                self._store.save(
                    mutation.old_target,
                    mutation.new_target,
                    RedirectKind.PERMANENT,
                    RedirectStatus.ACTIVE,
                    origin=RedirectOrigin.SLUG_CHANGE,
                )
        elif isinstance(mutation, DeleteRedirects):
            self._store.delete_matching(
                sources=mutation.sources,
                suffixes=mutation.suffixes,
                status=mutation.status,
            )
        elif isinstance(mutation, RaiseNotice):
            if self._notices is not None:
                self._notices.raise_notice(mutation.key, self._config.notice_ttl_seconds)
        else:
            raise ValueError(f"Unknown mutation type: {type(mutation)}")

    def _drop_reverse_redirect(self, old_path: str, new_path: str) -> None:
        """
        Renaming back to an earlier slug makes new_path live content again.

        The record left by the earlier rename (new_path -> old_path) would
        otherwise form a loop with the one about to be written.
        """
        stale = self._store.get_by_source(new_path)
        if (
            stale is not None
            and stale.target == old_path
            and stale.status == RedirectStatus.ACTIVE
            and not stale.forced
        ):
            self._store.delete(stale.id)
            logger.info("Dropped reverse redirect %s -> %s", new_path, old_path)

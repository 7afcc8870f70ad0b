"""
Watcher component models: lifecycle events and the store mutations they plan.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from smart_redirects.domain.entities import (
    ContentSnapshot,
    RedirectKind,
    RedirectOrigin,
    RedirectStatus,
)


class StatusClass(str, Enum):
    """Coarse publish state used to key the transition table."""

    OFFLINE = "offline"  # draft, pending, private
    PUBLISHED = "published"
    OTHER = "other"  # new, future, trash


# --- Events ---


@dataclass(frozen=True)
class ContentTransition:
    """One save of a content item: its state before and after."""

    before: ContentSnapshot
    after: ContentSnapshot


# --- Mutations ---


@dataclass(frozen=True)
class SaveRedirect:
    """Create, or update the record that owns source_path."""

    source_path: str
    target: str
    kind: RedirectKind
    status: RedirectStatus
    origin: RedirectOrigin


@dataclass(frozen=True)
class RetargetUpstream:
    """
    Point active, non-forced records aimed at old_target to new_target.

    When nothing was pointing at old_target, old_target -> new_target is
    saved as a permanent active redirect instead.
    """

    old_target: str
    new_target: str


@dataclass(frozen=True)
class DeleteRedirects:
    """Delete records whose source equals one of sources or ends with one of suffixes."""

    sources: tuple[str, ...] = ()
    suffixes: tuple[str, ...] = ()
    status: RedirectStatus | None = None  # None matches every status


@dataclass(frozen=True)
class RaiseNotice:
    key: str


Mutation = SaveRedirect | RetargetUpstream | DeleteRedirects | RaiseNotice


# --- Output ---


@dataclass(frozen=True)
class WatchOutput:
    """Mutations planned for an event and how many were applied."""

    mutations: tuple[Mutation, ...] = ()
    applied: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

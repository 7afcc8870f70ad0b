from datetime import UTC, datetime
from enum import Enum
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# --- Enums / Literals ---


class RedirectKind(int, Enum):
    """HTTP status family used when a redirect fires."""

    PERMANENT = 301
    TEMPORARY = 302


class RedirectStatus(str, Enum):
    """Review state of a redirect record."""

    ACTIVE = "active"  # confirmed by a human or trusted system output
    PENDING = "pending"  # system guess waiting in the review queue


class RedirectOrigin(str, Enum):
    """Which part of the system created a record."""

    MANUAL = "manual"
    SLUG_CHANGE = "slug_change"
    UNPUBLISH = "unpublish"
    TRASH = "trash"
    FALLBACK = "fallback"
    EXACT = "exact"
    FORCED = "forced"


ContentStatus = Literal["new", "draft", "pending", "private", "future", "publish", "trash"]

# --- Redirects ---


class RedirectRecord(BaseModel):
    """
    Stored redirect.

    Invariants:
    - source_path is normalized and unique across the store
    - created_at never changes after insert
    - hits only grows
    """

    id: UUID = Field(default_factory=uuid4)
    source_path: str
    target: str  # normalized internal path or absolute external URL
    kind: RedirectKind = RedirectKind.PERMANENT
    status: RedirectStatus = RedirectStatus.ACTIVE
    forced: bool = False
    hits: int = 0
    origin: RedirectOrigin = RedirectOrigin.MANUAL
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class NotFoundEntry(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    url: str
    hits: int = 1
    last_seen: datetime = Field(default_factory=lambda: datetime.now(UTC))


# --- Content ---


class ContentSnapshot(BaseModel):
    """
    State of one content item as seen by the host CMS at a single moment.

    Link fields are whatever the host reports (absolute URLs or paths);
    they are normalized by the watcher before use.
    """

    id: str
    slug: str = ""
    status: ContentStatus = "draft"
    permalink: str | None = None
    uri: str | None = None  # hierarchical page URI, e.g. "parent/child"
    parent_permalink: str | None = None
    term_link: str | None = None

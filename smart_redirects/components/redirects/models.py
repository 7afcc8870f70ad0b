"""
Redirects component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from smart_redirects.domain.entities import RedirectRecord, RedirectStatus

# --- Validation Error ---


@dataclass(frozen=True)
class RedirectValidationError:
    """Redirect validation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class SaveRedirectInput:
    """Input for adding a redirect (or replacing the one at the same source)."""

    source_url: str
    target_url: str
    kind: int = 301
    forced: bool = False


@dataclass(frozen=True)
class UpdateRedirectInput:
    """Input for updating an existing redirect."""

    redirect_id: UUID
    updates: dict[str, Any]


@dataclass(frozen=True)
class DeleteRedirectInput:
    redirect_id: UUID


@dataclass(frozen=True)
class BulkDeleteInput:
    redirect_ids: list[UUID]


@dataclass(frozen=True)
class AcceptPendingInput:
    """Promote a pending guess to an active 301."""

    redirect_id: UUID


@dataclass(frozen=True)
class DiscardPendingInput:
    redirect_id: UUID


@dataclass(frozen=True)
class GetRedirectInput:
    """Input for getting a redirect."""

    redirect_id: UUID | None = None
    source_path: str | None = None


@dataclass(frozen=True)
class ListRedirectsInput:
    """Input for listing redirects."""

    status: RedirectStatus | None = None


@dataclass(frozen=True)
class StatsInput:
    pass


@dataclass(frozen=True)
class CheckConflictInput:
    """Would this redirect shadow a live page with another live page?"""

    source_url: str
    target_url: str


# --- Output Models ---


@dataclass(frozen=True)
class RedirectOutput:
    """Output containing a single redirect."""

    redirect: RedirectRecord | None
    errors: list[RedirectValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class RedirectListOutput:
    """Output containing a list of redirects."""

    redirects: tuple[RedirectRecord, ...]
    errors: list[RedirectValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class RedirectOperationOutput:
    """Output for redirect operations (save, update, delete, accept, discard)."""

    redirect: RedirectRecord | None = None
    affected: int = 0
    errors: list[RedirectValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class StatsOutput:
    active: int
    pending: int
    hits: int


@dataclass(frozen=True)
class ConflictOutput:
    exists: bool

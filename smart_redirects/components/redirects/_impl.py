"""
RedirectAdminService - manual redirect management with validation.

Key behaviors:
- Sources are stored normalized; a full URL is reduced to its path
- Targets on this site are stored as normalized paths, other absolute
  URLs are stored as given
- Saving an existing source replaces its target/kind/forced in place
- Manual saves are always Active
- Accepting a pending guess makes it an Active 301
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse
from uuid import UUID

from smart_redirects.domain.entities import (
    RedirectKind,
    RedirectOrigin,
    RedirectRecord,
    RedirectStatus,
)
from smart_redirects.domain.paths import is_absolute_url, normalize_path, normalize_target

from .models import RedirectValidationError
from .ports import PublishedContentPort, RedirectStorePort

logger = logging.getLogger(__name__)

ALLOWED_KINDS = (301, 302)
UPDATABLE_FIELDS = ("source_path", "target", "kind", "forced")


@dataclass(frozen=True)
class RedirectAdminConfig:
    base_url: str = "http://localhost:8000"


# --- Validation Functions ---


def to_site_target(target: str, base_url: str) -> str:
    """
    Store form of a target.

    Absolute URLs pointing at this site become paths; other absolute URLs
    are kept as given.
    """
    target = (target or "").strip()
    if is_absolute_url(target) and _same_host(target, base_url):
        return normalize_path(target)
    return normalize_target(target)


def _same_host(url: str, base_url: str) -> bool:
    return urlparse(url).netloc.lower() == urlparse(base_url).netloc.lower()


def validate_source(source: str, base_url: str) -> list[RedirectValidationError]:
    """Validate a source URL or path."""
    if not source or not source.strip():
        return [
            RedirectValidationError(
                code="source_required",
                message="Source URL is required",
                field="source_path",
            )
        ]

    if is_absolute_url(source.strip()) and not _same_host(source.strip(), base_url):
        return [
            RedirectValidationError(
                code="source_not_on_site",
                message="Source must be a path on this site",
                field="source_path",
            )
        ]

    return []


def validate_target(target: str) -> list[RedirectValidationError]:
    if not target or not target.strip():
        return [
            RedirectValidationError(
                code="target_required",
                message="Target URL is required",
                field="target",
            )
        ]
    return []


def validate_kind(kind: Any) -> list[RedirectValidationError]:
    if kind not in ALLOWED_KINDS:
        return [
            RedirectValidationError(
                code="invalid_kind",
                message=f"Redirect type must be one of {ALLOWED_KINDS}",
                field="kind",
            )
        ]
    return []


def detect_self_redirect(source_path: str, target: str) -> list[RedirectValidationError]:
    if source_path == target:
        return [
            RedirectValidationError(
                code="redirect_loop",
                message="Redirect cannot point to itself",
                field="target",
            )
        ]
    return []


# --- Redirect Admin Service ---


class RedirectAdminService:
    """Admin-side operations on the redirect store."""

    def __init__(
        self,
        store: RedirectStorePort,
        oracle: PublishedContentPort | None = None,
        config: RedirectAdminConfig | None = None,
    ) -> None:
        self._store = store
        self._oracle = oracle
        self._config = config or RedirectAdminConfig()

    def save(
        self,
        source_url: str,
        target_url: str,
        kind: int = 301,
        forced: bool = False,
    ) -> tuple[RedirectRecord | None, list[RedirectValidationError]]:
        """Create a redirect, or replace the one stored at the same source."""
        errors = (
            validate_source(source_url, self._config.base_url)
            + validate_target(target_url)
            + validate_kind(kind)
        )
        if errors:
            return None, errors

        source_path = normalize_path(source_url)
        target = to_site_target(target_url, self._config.base_url)

        errors = detect_self_redirect(source_path, target)
        if errors:
            return None, errors

        record = self._store.save(
            source_path,
            target,
            RedirectKind(kind),
            RedirectStatus.ACTIVE,
            forced=forced,
            origin=RedirectOrigin.MANUAL,
        )
        logger.info("Saved redirect %s -> %s (%s)", source_path, target, kind)
        return record, []

    def update(
        self,
        redirect_id: UUID,
        updates: dict[str, Any],
    ) -> tuple[RedirectRecord | None, list[RedirectValidationError]]:
        """Edit one record; an edited record is always Active."""
        existing = self._store.get_by_id(redirect_id)
        if existing is None:
            return None, [
                RedirectValidationError(
                    code="not_found",
                    message="Redirect not found",
                )
            ]

        fields: dict[str, Any] = {
            key: value for key, value in updates.items() if key in UPDATABLE_FIELDS
        }

        errors: list[RedirectValidationError] = []
        if "source_path" in fields:
            errors.extend(validate_source(fields["source_path"], self._config.base_url))
        if "target" in fields:
            errors.extend(validate_target(fields["target"]))
        if "kind" in fields:
            errors.extend(validate_kind(fields["kind"]))
        if errors:
            return None, errors

        source_path = normalize_path(fields.get("source_path", existing.source_path))
        target = to_site_target(fields.get("target", existing.target), self._config.base_url)

        errors = detect_self_redirect(source_path, target)
        if errors:
            return None, errors

        if source_path != existing.source_path:
            clash = self._store.get_by_source(source_path)
            if clash is not None and clash.id != existing.id:
                return None, [
                    RedirectValidationError(
                        code="source_exists",
                        message=f"A redirect from '{source_path}' already exists",
                        field="source_path",
                    )
                ]

        fields["source_path"] = source_path
        fields["target"] = target
        if "kind" in fields:
            fields["kind"] = RedirectKind(fields["kind"])
        fields["status"] = RedirectStatus.ACTIVE

        record = self._store.update_fields(redirect_id, **fields)
        return record, []

    def delete(self, redirect_id: UUID) -> list[RedirectValidationError]:
        if not self._store.delete(redirect_id):
            return [
                RedirectValidationError(
                    code="not_found",
                    message="Redirect not found",
                )
            ]
        return []

    def bulk_delete(self, redirect_ids: list[UUID]) -> int:
        if not redirect_ids:
            return 0
        return self._store.delete_many(redirect_ids)

    def _get_pending(
        self, redirect_id: UUID
    ) -> tuple[RedirectRecord | None, list[RedirectValidationError]]:
        existing = self._store.get_by_id(redirect_id)
        if existing is None:
            return None, [
                RedirectValidationError(
                    code="not_found",
                    message="Redirect not found",
                )
            ]
        if existing.status != RedirectStatus.PENDING:
            return None, [
                RedirectValidationError(
                    code="not_pending",
                    message="Only pending redirects can be reviewed",
                    field="status",
                )
            ]
        return existing, []

    def accept(
        self, redirect_id: UUID
    ) -> tuple[RedirectRecord | None, list[RedirectValidationError]]:
        """Promote a pending guess to a permanent redirect."""
        _, errors = self._get_pending(redirect_id)
        if errors:
            return None, errors

        record = self._store.update_fields(
            redirect_id,
            status=RedirectStatus.ACTIVE,
            kind=RedirectKind.PERMANENT,
        )
        logger.info("Accepted pending redirect %s", redirect_id)
        return record, []

    def discard(self, redirect_id: UUID) -> list[RedirectValidationError]:
        _, errors = self._get_pending(redirect_id)
        if errors:
            return errors
        self._store.delete(redirect_id)
        return []

    def get(
        self,
        redirect_id: UUID | None = None,
        source_path: str | None = None,
    ) -> RedirectRecord | None:
        if redirect_id is not None:
            return self._store.get_by_id(redirect_id)
        if source_path is not None:
            return self._store.get_by_source(normalize_path(source_path))
        return None

    def list_redirects(self, status: RedirectStatus | None = None) -> list[RedirectRecord]:
        return self._store.list_all(status=status)

    def stats(self) -> tuple[int, int, int]:
        """(active count, pending count, total hits)."""
        return (
            self._store.count_by_status(RedirectStatus.ACTIVE),
            self._store.count_by_status(RedirectStatus.PENDING),
            self._store.total_hits(),
        )

    def check_conflict(self, source_url: str, target_url: str) -> bool:
        """
        True when source and target are both live published pages.

        Redirecting one live page to another hides the source page, which
        is usually a mistake worth a warning.
        """
        if self._oracle is None:
            return False

        target = to_site_target(target_url, self._config.base_url)
        if is_absolute_url(target):
            return False

        source_path = normalize_path(source_url)
        return self._oracle.path_maps_to_published_content(
            source_path
        ) and self._oracle.path_maps_to_published_content(target)

"""
Admin Redirects API Routes.

Manual redirect management, the pending review queue and the dry-run
test tool.
"""

from __future__ import annotations

from typing import Any, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from smart_redirects.adapters.sqlite.repos import SQLiteContentOracle, SQLiteRedirectStore
from smart_redirects.api.deps import get_content_oracle, get_redirect_store, get_rules
from smart_redirects.components.redirects import (
    AcceptPendingInput,
    BulkDeleteInput,
    CheckConflictInput,
    DeleteRedirectInput,
    DiscardPendingInput,
    GetRedirectInput,
    ListRedirectsInput,
    RedirectOperationOutput,
    RedirectValidationError,
    SaveRedirectInput,
    StatsInput,
    UpdateRedirectInput,
    run_accept,
    run_bulk_delete,
    run_check_conflict,
    run_delete,
    run_discard,
    run_get,
    run_list,
    run_save,
    run_stats,
    run_update,
)
from smart_redirects.components.resolver import DryRunInput, run_dry_run
from smart_redirects.domain.entities import RedirectRecord, RedirectStatus
from smart_redirects.rules.models import Rules

router = APIRouter()


class SaveRedirectRequest(BaseModel):
    """Request to add a redirect."""

    source_url: str = Field(..., description="Source URL or path (e.g., /old-page)")
    target_url: str = Field(..., description="Target path or absolute URL")
    kind: Literal[301, 302] = Field(301, description="HTTP status code")
    forced: bool = Field(False, description="Fire even when content exists at the source")


class UpdateRedirectRequest(BaseModel):
    """Request to update a redirect."""

    source_path: str | None = Field(None, description="New source path")
    target: str | None = Field(None, description="New target")
    kind: Literal[301, 302] | None = Field(None, description="HTTP status code")
    forced: bool | None = Field(None, description="Forced flag")


class BulkDeleteRequest(BaseModel):
    ids: list[UUID]


class DryRunRequest(BaseModel):
    url: str
    forced_only: bool = False


class ConflictRequest(BaseModel):
    source_url: str
    target_url: str


class RedirectResponse(BaseModel):
    """Redirect response."""

    id: str
    source_path: str
    target: str
    kind: int
    status: str
    forced: bool
    hits: int
    origin: str
    created_at: str


class RedirectListResponse(BaseModel):
    redirects: list[RedirectResponse]
    count: int


class ValidationErrorResponse(BaseModel):
    """Validation error response."""

    errors: list[dict[str, Any]]


# --- Helper Functions ---


def _redirect_to_response(redirect: RedirectRecord) -> RedirectResponse:
    return RedirectResponse(
        id=str(redirect.id),
        source_path=redirect.source_path,
        target=redirect.target,
        kind=int(redirect.kind),
        status=redirect.status.value,
        forced=redirect.forced,
        hits=redirect.hits,
        origin=redirect.origin.value,
        created_at=redirect.created_at.isoformat(),
    )


def _serialize_errors(
    errors: list[RedirectValidationError],
) -> list[dict[str, Any]]:
    return [
        {
            "code": e.code,
            "message": e.message,
            "field": e.field,
        }
        for e in errors
    ]


def _raise_for_errors(result: RedirectOperationOutput) -> None:
    if result.success:
        return
    if any(e.code == "not_found" for e in result.errors):
        raise HTTPException(status_code=404, detail="Redirect not found")
    raise HTTPException(
        status_code=400,
        detail={"errors": _serialize_errors(result.errors)},
    )


# --- Routes ---


@router.get("/redirects", response_model=RedirectListResponse)
def list_redirects(
    status: RedirectStatus | None = None,
    store: SQLiteRedirectStore = Depends(get_redirect_store),
) -> RedirectListResponse:
    """List redirects, optionally only Active or only Pending ones."""
    result = run_list(ListRedirectsInput(status=status), store=store)
    return RedirectListResponse(
        redirects=[_redirect_to_response(r) for r in result.redirects],
        count=len(result.redirects),
    )


@router.post(
    "/redirects",
    response_model=RedirectResponse,
    responses={400: {"model": ValidationErrorResponse}},
)
def save_redirect(
    request: SaveRedirectRequest,
    store: SQLiteRedirectStore = Depends(get_redirect_store),
    rules: Rules = Depends(get_rules),
) -> RedirectResponse:
    """Add a redirect, or replace the one stored at the same source."""
    result = run_save(
        SaveRedirectInput(
            source_url=request.source_url,
            target_url=request.target_url,
            kind=request.kind,
            forced=request.forced,
        ),
        store=store,
        rules=rules,
    )
    _raise_for_errors(result)

    assert result.redirect is not None
    return _redirect_to_response(result.redirect)


@router.get("/redirects/stats")
def redirect_stats(
    store: SQLiteRedirectStore = Depends(get_redirect_store),
) -> dict[str, int]:
    result = run_stats(StatsInput(), store=store)
    return {"active": result.active, "pending": result.pending, "hits": result.hits}


@router.post("/redirects/test")
def dry_run_redirect(
    request: DryRunRequest,
    store: SQLiteRedirectStore = Depends(get_redirect_store),
    oracle: SQLiteContentOracle = Depends(get_content_oracle),
    rules: Rules = Depends(get_rules),
) -> dict[str, Any]:
    """
    Dry run: would this URL redirect, and where?

    Nothing is recorded.
    """
    result = run_dry_run(
        DryRunInput(url=request.url, forced_only=request.forced_only),
        store=store,
        oracle=oracle,
        rules=rules,
    )
    if not result.found:
        return {"found": False, "path": result.path}

    return {
        "found": True,
        "path": result.path,
        "target": result.target,
        "kind": result.kind,
        "source": result.source,
    }


@router.post("/redirects/check-conflict")
def check_conflict(
    request: ConflictRequest,
    store: SQLiteRedirectStore = Depends(get_redirect_store),
    oracle: SQLiteContentOracle = Depends(get_content_oracle),
    rules: Rules = Depends(get_rules),
) -> dict[str, bool]:
    """Warn when both ends of a proposed redirect are live pages."""
    result = run_check_conflict(
        CheckConflictInput(source_url=request.source_url, target_url=request.target_url),
        store=store,
        oracle=oracle,
        rules=rules,
    )
    return {"exists": result.exists}


@router.post("/redirects/bulk-delete")
def bulk_delete_redirects(
    request: BulkDeleteRequest,
    store: SQLiteRedirectStore = Depends(get_redirect_store),
) -> dict[str, int]:
    result = run_bulk_delete(BulkDeleteInput(redirect_ids=request.ids), store=store)
    return {"deleted": result.affected}


@router.get(
    "/redirects/{redirect_id}",
    response_model=RedirectResponse,
    responses={404: {"description": "Redirect not found"}},
)
def get_redirect(
    redirect_id: UUID,
    store: SQLiteRedirectStore = Depends(get_redirect_store),
) -> RedirectResponse:
    """Get a redirect by ID."""
    result = run_get(GetRedirectInput(redirect_id=redirect_id), store=store)
    if result.redirect is None:
        raise HTTPException(status_code=404, detail="Redirect not found")
    return _redirect_to_response(result.redirect)


@router.put(
    "/redirects/{redirect_id}",
    response_model=RedirectResponse,
    responses={
        400: {"model": ValidationErrorResponse},
        404: {"description": "Redirect not found"},
    },
)
def update_redirect(
    redirect_id: UUID,
    request: UpdateRedirectRequest,
    store: SQLiteRedirectStore = Depends(get_redirect_store),
    rules: Rules = Depends(get_rules),
) -> RedirectResponse:
    """Update a redirect. An edited redirect becomes Active."""
    updates = request.model_dump(exclude_none=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No updates provided")

    result = run_update(
        UpdateRedirectInput(redirect_id=redirect_id, updates=updates),
        store=store,
        rules=rules,
    )
    _raise_for_errors(result)

    assert result.redirect is not None
    return _redirect_to_response(result.redirect)


@router.delete(
    "/redirects/{redirect_id}",
    responses={404: {"description": "Redirect not found"}},
)
def delete_redirect(
    redirect_id: UUID,
    store: SQLiteRedirectStore = Depends(get_redirect_store),
) -> dict[str, bool]:
    result = run_delete(DeleteRedirectInput(redirect_id=redirect_id), store=store)
    _raise_for_errors(result)
    return {"deleted": True}


@router.post(
    "/redirects/{redirect_id}/accept",
    response_model=RedirectResponse,
    responses={404: {"description": "Redirect not found"}},
)
def accept_redirect(
    redirect_id: UUID,
    store: SQLiteRedirectStore = Depends(get_redirect_store),
) -> RedirectResponse:
    """Promote a pending redirect to an Active 301."""
    result = run_accept(AcceptPendingInput(redirect_id=redirect_id), store=store)
    _raise_for_errors(result)

    assert result.redirect is not None
    return _redirect_to_response(result.redirect)


@router.post(
    "/redirects/{redirect_id}/discard",
    responses={404: {"description": "Redirect not found"}},
)
def discard_redirect(
    redirect_id: UUID,
    store: SQLiteRedirectStore = Depends(get_redirect_store),
) -> dict[str, bool]:
    result = run_discard(DiscardPendingInput(redirect_id=redirect_id), store=store)
    _raise_for_errors(result)
    return {"discarded": True}

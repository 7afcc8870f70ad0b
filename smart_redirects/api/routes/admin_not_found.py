"""
Admin Not-Found Log Routes.

Review queue of URLs that nothing could redirect.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from smart_redirects.adapters.clock import SystemClock
from smart_redirects.adapters.sqlite.repos import SQLiteNotFoundLog
from smart_redirects.api.deps import get_not_found_log
from smart_redirects.components.not_found import NotFoundLogger
from smart_redirects.domain.entities import NotFoundEntry

router = APIRouter()


class NotFoundEntryResponse(BaseModel):
    id: str
    url: str
    hits: int
    last_seen: str


class BulkDeleteRequest(BaseModel):
    ids: list[UUID]


def get_not_found_logger(
    log: SQLiteNotFoundLog = Depends(get_not_found_log),
) -> NotFoundLogger:
    return NotFoundLogger(log, clock=SystemClock())


def _entry_to_response(entry: NotFoundEntry) -> NotFoundEntryResponse:
    return NotFoundEntryResponse(
        id=str(entry.id),
        url=entry.url,
        hits=entry.hits,
        last_seen=entry.last_seen.isoformat(),
    )


@router.get("/not-found", response_model=list[NotFoundEntryResponse])
def list_not_found(
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    service: NotFoundLogger = Depends(get_not_found_logger),
) -> list[NotFoundEntryResponse]:
    """Most frequently missed URLs first."""
    return [_entry_to_response(e) for e in service.list_entries(limit=limit, offset=offset)]


@router.delete("/not-found/{entry_id}")
def delete_not_found(
    entry_id: UUID,
    service: NotFoundLogger = Depends(get_not_found_logger),
) -> dict[str, bool]:
    if not service.delete(entry_id):
        raise HTTPException(status_code=404, detail="Entry not found")
    return {"deleted": True}


@router.post("/not-found/bulk-delete")
def bulk_delete_not_found(
    request: BulkDeleteRequest,
    service: NotFoundLogger = Depends(get_not_found_logger),
) -> dict[str, int]:
    return {"deleted": service.bulk_delete(request.ids)}


@router.delete("/not-found")
def clear_not_found(
    service: NotFoundLogger = Depends(get_not_found_logger),
) -> dict[str, int]:
    return {"deleted": service.clear()}

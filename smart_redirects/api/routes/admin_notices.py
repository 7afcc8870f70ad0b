"""
Admin notices raised by content events (e.g. "slug changed").
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from smart_redirects.adapters.notices import InMemoryNoticeBoard
from smart_redirects.api.deps import get_notice_board

router = APIRouter()


@router.get("/notices/{key}")
def pop_notice(
    key: str,
    board: InMemoryNoticeBoard = Depends(get_notice_board),
) -> dict[str, bool | str]:
    """Read-once: a live notice is reported and removed."""
    return {"key": key, "active": board.pop_notice(key)}

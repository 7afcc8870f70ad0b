"""
Admin redirect health report: chains and loops.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from smart_redirects.adapters.sqlite.repos import SQLiteRedirectStore
from smart_redirects.api.deps import get_redirect_store
from smart_redirects.components.health import HealthAnalyzer, summary_message

router = APIRouter()


@router.get("/redirect-health")
def redirect_health(
    store: SQLiteRedirectStore = Depends(get_redirect_store),
) -> dict[str, Any]:
    report = HealthAnalyzer(store).report()
    return {
        "healthy": not report.has_issues,
        "summary": summary_message(report),
        "chains": [
            {
                "id": str(c.chain_id),
                "step1_source": c.step1_source,
                "step1_target": c.step1_target,
                "step2_target": c.step2_target,
                "hits": c.hits,
            }
            for c in report.chains
        ],
        "loops": [
            {
                "redirect1_id": str(loop.redirect1_id),
                "url_a": loop.url_a,
                "url_b": loop.url_b,
                "redirect2_id": str(loop.redirect2_id),
            }
            for loop in report.loops
        ],
    }

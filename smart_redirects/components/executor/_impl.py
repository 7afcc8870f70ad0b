"""
RedirectExecutor - turns a resolved match into a redirect response.

Key behaviors:
- External targets keep the visitor's query string ("?" or "&" as needed)
- Internal targets are joined with the site base URL
- A match with no stored row is saved as Pending for review
- A match with a stored row gets one more hit
- Bookkeeping is best-effort: a store failure is logged and the redirect
  is still issued
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from smart_redirects.components.executor.ports import RedirectTelemetryPort
from smart_redirects.components.resolver.models import RedirectMatch
from smart_redirects.domain.entities import RedirectOrigin, RedirectStatus
from smart_redirects.domain.paths import is_absolute_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutorConfig:
    base_url: str = "http://localhost:8000"


@dataclass(frozen=True)
class RedirectDecision:
    """Final redirect to emit."""

    location: str
    status_code: int


def append_query_string(target: str, query_string: str) -> str:
    if not query_string:
        return target
    separator = "&" if "?" in target else "?"
    return f"{target}{separator}{query_string}"


class RedirectExecutor:
    def __init__(
        self,
        store: RedirectTelemetryPort,
        config: ExecutorConfig | None = None,
    ) -> None:
        self._store = store
        self._config = config or ExecutorConfig()

    def build_location(self, match: RedirectMatch, query_string: str = "") -> str:
        """Absolute URL the visitor is sent to."""
        if is_absolute_url(match.target):
            return append_query_string(match.target, query_string)

        return self._config.base_url.rstrip("/") + "/" + match.target.lstrip("/")

    def execute(self, match: RedirectMatch, query_string: str = "") -> RedirectDecision:
        """Build the redirect. Never touches the store."""
        return RedirectDecision(
            location=self.build_location(match, query_string),
            status_code=int(match.kind),
        )

    def record(self, match: RedirectMatch) -> None:
        """
        Count the redirect against its stored row.

        Externally managed matches are left alone. Runs after the response
        has been built; failures never propagate.
        """
        if match.externally_managed:
            return

        try:
            existing = self._store.get_by_source(match.source_path)
            if existing is None:
                self._store.save(
                    match.source_path,
                    match.target,
                    match.kind,
                    RedirectStatus.PENDING,
                    origin=RedirectOrigin(match.layer.value),
                )
                logger.info(
                    "Saved pending redirect %s -> %s (%s)",
                    match.source_path,
                    match.target,
                    match.layer.value,
                )
            else:
                self._store.increment_hits(match.source_path)
        except Exception:
            logger.exception("Failed to record redirect hit for %s", match.source_path)

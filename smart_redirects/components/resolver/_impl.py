"""
MatchResolver - decides whether and where a "not found" request redirects.

Layers are scanned in strict priority order and the first hit wins:

1. Conditional strategies  - win unconditionally, always 302, not stored
2. Forced records          - fire even when a live page exists at the path
3. Existence gate          - published content at the path ends resolution
4. Regex strategies        - always 301, not stored
5. Exact records           - any status, stored kind returned as-is
6. Hierarchical fallback   - nearest live ancestor, never the root

Key behaviors:
- Read-only: resolution never writes to the store
- Draft/pending content does not pass the existence gate
- Failures in a collaborator are logged and treated as "no hit" for that layer
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from smart_redirects.components.resolver.models import (
    MatchLayer,
    NoMatchReason,
    RedirectMatch,
    ResolveResult,
)
from smart_redirects.components.resolver.ports import (
    ContentOraclePort,
    RedirectLookupPort,
    ResolverStrategy,
)
from smart_redirects.domain.entities import RedirectKind, RedirectRecord
from smart_redirects.domain.paths import normalize_path, normalize_target, parent_paths

logger = logging.getLogger(__name__)

# --- Configuration ---


@dataclass(frozen=True)
class ResolverConfig:
    """Resolver configuration from rules."""

    enable_fallback: bool = True
    fallback_kind: RedirectKind = RedirectKind.TEMPORARY


DEFAULT_CONFIG = ResolverConfig()


# --- Resolver ---


class MatchResolver:
    """
    Ordered-layer redirect matcher.

    Extension strategies are injected as ordered sequences; each exposes
    try_resolve(path) and the first non-empty target short-circuits.
    """

    def __init__(
        self,
        store: RedirectLookupPort,
        oracle: ContentOraclePort,
        config: ResolverConfig | None = None,
        conditional: Sequence[ResolverStrategy] = (),
        regex: Sequence[ResolverStrategy] = (),
    ) -> None:
        self._store = store
        self._oracle = oracle
        self._config = config or DEFAULT_CONFIG
        self._conditional = tuple(conditional)
        self._regex = tuple(regex)

    def resolve(self, path: str) -> ResolveResult:
        """Run every layer against a request path."""
        current = normalize_path(path)

        target = self._first_strategy_hit(self._conditional, current)
        if target:
            return ResolveResult(
                RedirectMatch(
                    source_path=current,
                    target=target,
                    kind=RedirectKind.TEMPORARY,
                    layer=MatchLayer.CONDITIONAL,
                    externally_managed=True,
                )
            )

        forced = self.find_match(current, forced_only=True)
        if forced is not None:
            return ResolveResult(forced)

        if self._is_published(current):
            return ResolveResult(None, NoMatchReason.CONTENT_EXISTS)

        target = self._first_strategy_hit(self._regex, current)
        if target:
            return ResolveResult(
                RedirectMatch(
                    source_path=current,
                    target=target,
                    kind=RedirectKind.PERMANENT,
                    layer=MatchLayer.REGEX,
                    externally_managed=True,
                )
            )

        match = self.find_match(current)
        if match is not None:
            return ResolveResult(match)

        return ResolveResult(None, NoMatchReason.UNMATCHED)

    def find_match(self, path: str, forced_only: bool = False) -> RedirectMatch | None:
        """
        Look a path up in the store, then walk its ancestors.

        Skips the extension layers and the existence gate, which makes it
        usable as a dry-run for administrators. The fallback walk is never
        attempted for forced lookups.
        """
        current = normalize_path(path)

        record = self._lookup(current)
        if record is not None and (record.forced or not forced_only):
            return RedirectMatch(
                source_path=current,
                target=record.target,
                kind=RedirectKind(record.kind),
                layer=MatchLayer.FORCED if forced_only else MatchLayer.EXACT,
            )

        if forced_only or not self._config.enable_fallback:
            return None

        for parent in parent_paths(current):
            if self._exists(parent):
                return RedirectMatch(
                    source_path=current,
                    target=parent,
                    kind=self._config.fallback_kind,
                    layer=MatchLayer.FALLBACK,
                )

        return None

    # --- Collaborator calls ---

    def _first_strategy_hit(
        self, strategies: Sequence[ResolverStrategy], path: str
    ) -> str | None:
        for strategy in strategies:
            try:
                target = strategy.try_resolve(path)
            except Exception:
                logger.exception("Redirect strategy %r failed for %s", strategy, path)
                continue
            if target:
                return normalize_target(target)
        return None

    def _lookup(self, path: str) -> RedirectRecord | None:
        try:
            return self._store.get_by_source(path)
        except Exception:
            logger.exception("Redirect lookup failed for %s", path)
            return None

    def _is_published(self, path: str) -> bool:
        try:
            return self._oracle.path_maps_to_published_content(path)
        except Exception:
            logger.exception("Content existence check failed for %s", path)
            return False

    def _exists(self, path: str) -> bool:
        try:
            return self._oracle.content_exists(path)
        except Exception:
            logger.exception("Fallback existence check failed for %s", path)
            return False


# --- Factory ---


def create_match_resolver(
    store: RedirectLookupPort,
    oracle: ContentOraclePort,
    config: ResolverConfig | None = None,
    conditional: Sequence[ResolverStrategy] = (),
    regex: Sequence[ResolverStrategy] = (),
) -> MatchResolver:
    """Create a MatchResolver."""
    return MatchResolver(
        store=store,
        oracle=oracle,
        config=config,
        conditional=conditional,
        regex=regex,
    )

"""
Resolver component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from smart_redirects.domain.entities import RedirectKind


class MatchLayer(str, Enum):
    """Resolution layer that produced a match, in priority order."""

    CONDITIONAL = "conditional"
    FORCED = "forced"
    REGEX = "regex"
    EXACT = "exact"
    FALLBACK = "fallback"

    @property
    def label(self) -> str:
        return _LAYER_LABELS[self]


_LAYER_LABELS = {
    MatchLayer.CONDITIONAL: "Conditional Redirect",
    MatchLayer.FORCED: "Forced Redirect",
    MatchLayer.REGEX: "Regex Redirect",
    MatchLayer.EXACT: "Database Match",
    MatchLayer.FALLBACK: "Smart Fallback",
}


class NoMatchReason(str, Enum):
    CONTENT_EXISTS = "content_exists"
    UNMATCHED = "unmatched"


@dataclass(frozen=True)
class RedirectMatch:
    """A positive resolution for one normalized request path."""

    source_path: str
    target: str
    kind: RedirectKind
    layer: MatchLayer
    externally_managed: bool = False


@dataclass(frozen=True)
class ResolveResult:
    match: RedirectMatch | None
    reason: NoMatchReason | None = None

    @property
    def found(self) -> bool:
        return self.match is not None


# --- Input Models ---


@dataclass(frozen=True)
class ResolveInput:
    """Input for resolving an incoming request path."""

    path: str


@dataclass(frozen=True)
class DryRunInput:
    """Input for the admin dry-run of a path against stored redirects."""

    url: str
    forced_only: bool = False


# --- Output Models ---


@dataclass(frozen=True)
class DryRunOutput:
    path: str
    found: bool
    target: str | None = None
    kind: int | None = None
    source: str | None = None

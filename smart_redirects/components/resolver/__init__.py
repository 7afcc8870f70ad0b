"""
Resolver component - decides whether a "not found" request redirects.
"""

from ._impl import MatchResolver, ResolverConfig, create_match_resolver
from .component import build_config, run_dry_run, run_resolve
from .models import (
    DryRunInput,
    DryRunOutput,
    MatchLayer,
    NoMatchReason,
    RedirectMatch,
    ResolveInput,
    ResolveResult,
)
from .ports import ContentOraclePort, RedirectLookupPort, ResolverStrategy

__all__ = [
    # Entry points
    "run_resolve",
    "run_dry_run",
    "build_config",
    # Models
    "DryRunInput",
    "DryRunOutput",
    "MatchLayer",
    "NoMatchReason",
    "RedirectMatch",
    "ResolveInput",
    "ResolveResult",
    # Ports
    "ContentOraclePort",
    "RedirectLookupPort",
    "ResolverStrategy",
    # Service
    "MatchResolver",
    "ResolverConfig",
    "create_match_resolver",
]

"""
Resolver component - ordered-layer redirect matching.

Invariants:
- I1: Forced records fire before the existence gate
- I2: Published content at the request path stops every non-forced layer
- I3: Exact records beat the hierarchical fallback
- I4: The fallback never targets the site root
"""

from __future__ import annotations

from collections.abc import Sequence

from smart_redirects.domain.entities import RedirectKind
from smart_redirects.domain.paths import normalize_path
from smart_redirects.rules.models import Rules

from ._impl import MatchResolver, ResolverConfig
from .models import DryRunInput, DryRunOutput, ResolveInput, ResolveResult
from .ports import ContentOraclePort, RedirectLookupPort, ResolverStrategy


def build_config(rules: Rules | None) -> ResolverConfig:
    """Build resolver config from rules."""
    if rules is None:
        return ResolverConfig()

    return ResolverConfig(
        enable_fallback=rules.redirects.enable_fallback,
        fallback_kind=RedirectKind(rules.redirects.default_kind),
    )


def _create_resolver(
    store: RedirectLookupPort,
    oracle: ContentOraclePort,
    rules: Rules | None,
    conditional: Sequence[ResolverStrategy] = (),
    regex: Sequence[ResolverStrategy] = (),
) -> MatchResolver:
    return MatchResolver(
        store=store,
        oracle=oracle,
        config=build_config(rules),
        conditional=conditional,
        regex=regex,
    )


# --- Component Entry Points ---


def run_resolve(
    inp: ResolveInput,
    *,
    store: RedirectLookupPort,
    oracle: ContentOraclePort,
    rules: Rules | None = None,
    conditional: Sequence[ResolverStrategy] = (),
    regex: Sequence[ResolverStrategy] = (),
) -> ResolveResult:
    """
    Resolve an incoming request path.

    Args:
        inp: Input containing the raw request path.
        store: Redirect store (read side).
        oracle: Content existence oracle.
        rules: Optional rules for fallback configuration.
        conditional: Conditional strategies, in priority order.
        regex: Pattern strategies, in priority order.

    Returns:
        ResolveResult with a match or the reason there is none.
    """
    resolver = _create_resolver(store, oracle, rules, conditional, regex)
    return resolver.resolve(inp.path)


def run_dry_run(
    inp: DryRunInput,
    *,
    store: RedirectLookupPort,
    oracle: ContentOraclePort,
    rules: Rules | None = None,
) -> DryRunOutput:
    """
    Check whether a URL matches a stored redirect or a fallback parent.

    Nothing is executed or recorded.
    """
    path = normalize_path(inp.url)
    resolver = _create_resolver(store, oracle, rules)

    match = resolver.find_match(path, forced_only=inp.forced_only)
    if match is None:
        return DryRunOutput(path=path, found=False)

    return DryRunOutput(
        path=path,
        found=True,
        target=match.target,
        kind=int(match.kind),
        source=match.layer.label,
    )

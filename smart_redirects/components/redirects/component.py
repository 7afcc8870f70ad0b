"""
Redirects component - admin redirect management.

Invariants:
- I1: Source path is unique and stored normalized
- I2: A redirect cannot point to itself
- I3: Kind is 301 or 302
- I4: Manually saved or edited redirects are Active
- I5: Accept and discard only act on Pending records
"""

from __future__ import annotations

from smart_redirects.rules.models import Rules

from ._impl import RedirectAdminConfig, RedirectAdminService
from .models import (
    AcceptPendingInput,
    BulkDeleteInput,
    CheckConflictInput,
    ConflictOutput,
    DeleteRedirectInput,
    DiscardPendingInput,
    GetRedirectInput,
    ListRedirectsInput,
    RedirectListOutput,
    RedirectOperationOutput,
    RedirectOutput,
    SaveRedirectInput,
    StatsInput,
    StatsOutput,
    UpdateRedirectInput,
)
from .ports import PublishedContentPort, RedirectStorePort


def build_config(rules: Rules | None) -> RedirectAdminConfig:
    """Build admin config from rules."""
    if rules is None:
        return RedirectAdminConfig()
    return RedirectAdminConfig(base_url=rules.site.base_url)


def _create_service(
    store: RedirectStorePort,
    rules: Rules | None,
    oracle: PublishedContentPort | None = None,
) -> RedirectAdminService:
    return RedirectAdminService(store=store, oracle=oracle, config=build_config(rules))


# --- Component Entry Points ---


def run_save(
    inp: SaveRedirectInput,
    *,
    store: RedirectStorePort,
    rules: Rules | None = None,
) -> RedirectOperationOutput:
    """
    Add a redirect, or replace the one stored at the same source.

    Args:
        inp: Source, target, kind and forced flag.
        store: Redirect store.
        rules: Optional rules (site base URL).

    Returns:
        RedirectOperationOutput with the saved record or validation errors.
    """
    service = _create_service(store, rules)
    record, errors = service.save(
        source_url=inp.source_url,
        target_url=inp.target_url,
        kind=inp.kind,
        forced=inp.forced,
    )
    return RedirectOperationOutput(
        redirect=record,
        affected=1 if record else 0,
        errors=errors,
        success=record is not None,
    )


def run_update(
    inp: UpdateRedirectInput,
    *,
    store: RedirectStorePort,
    rules: Rules | None = None,
) -> RedirectOperationOutput:
    """Update an existing redirect by id."""
    service = _create_service(store, rules)
    record, errors = service.update(inp.redirect_id, inp.updates)
    return RedirectOperationOutput(
        redirect=record,
        affected=1 if record else 0,
        errors=errors,
        success=record is not None,
    )


def run_delete(
    inp: DeleteRedirectInput,
    *,
    store: RedirectStorePort,
) -> RedirectOperationOutput:
    service = _create_service(store, None)
    errors = service.delete(inp.redirect_id)
    return RedirectOperationOutput(
        affected=0 if errors else 1,
        errors=errors,
        success=not errors,
    )


def run_bulk_delete(
    inp: BulkDeleteInput,
    *,
    store: RedirectStorePort,
) -> RedirectOperationOutput:
    service = _create_service(store, None)
    affected = service.bulk_delete(inp.redirect_ids)
    return RedirectOperationOutput(affected=affected)


def run_accept(
    inp: AcceptPendingInput,
    *,
    store: RedirectStorePort,
) -> RedirectOperationOutput:
    """Promote a pending redirect to an Active 301."""
    service = _create_service(store, None)
    record, errors = service.accept(inp.redirect_id)
    return RedirectOperationOutput(
        redirect=record,
        affected=1 if record else 0,
        errors=errors,
        success=record is not None,
    )


def run_discard(
    inp: DiscardPendingInput,
    *,
    store: RedirectStorePort,
) -> RedirectOperationOutput:
    """Delete a pending redirect."""
    service = _create_service(store, None)
    errors = service.discard(inp.redirect_id)
    return RedirectOperationOutput(
        affected=0 if errors else 1,
        errors=errors,
        success=not errors,
    )


def run_get(
    inp: GetRedirectInput,
    *,
    store: RedirectStorePort,
) -> RedirectOutput:
    """Get a redirect by id or source path."""
    service = _create_service(store, None)
    record = service.get(redirect_id=inp.redirect_id, source_path=inp.source_path)
    return RedirectOutput(redirect=record, success=record is not None)


def run_list(
    inp: ListRedirectsInput,
    *,
    store: RedirectStorePort,
) -> RedirectListOutput:
    service = _create_service(store, None)
    return RedirectListOutput(redirects=tuple(service.list_redirects(status=inp.status)))


def run_stats(
    inp: StatsInput,
    *,
    store: RedirectStorePort,
) -> StatsOutput:
    service = _create_service(store, None)
    active, pending, hits = service.stats()
    return StatsOutput(active=active, pending=pending, hits=hits)


def run_check_conflict(
    inp: CheckConflictInput,
    *,
    store: RedirectStorePort,
    oracle: PublishedContentPort,
    rules: Rules | None = None,
) -> ConflictOutput:
    """Warn when both ends of a proposed redirect are live pages."""
    service = _create_service(store, rules, oracle)
    return ConflictOutput(exists=service.check_conflict(inp.source_url, inp.target_url))

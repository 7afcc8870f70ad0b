"""
HealthAnalyzer - finds SEO problems in the redirect graph.

Looks at active, non-forced records only:
- chains: A -> B where B -> C also exists (two hops for the visitor)
- loops: A -> B and B -> A, reported once per pair

Read-only; never mutates the store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from smart_redirects.domain.entities import RedirectRecord, RedirectStatus


class RedirectListingPort(Protocol):
    def list_all(self, status: RedirectStatus | None = None) -> list[RedirectRecord]:
        ...


@dataclass(frozen=True)
class RedirectChain:
    chain_id: UUID
    step1_source: str
    step1_target: str
    step2_target: str
    hits: int


@dataclass(frozen=True)
class RedirectLoop:
    redirect1_id: UUID
    url_a: str
    url_b: str
    redirect2_id: UUID


@dataclass(frozen=True)
class HealthReport:
    chains: list[RedirectChain] = field(default_factory=list)
    loops: list[RedirectLoop] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        return bool(self.chains or self.loops)


class HealthAnalyzer:
    def __init__(self, store: RedirectListingPort) -> None:
        self._store = store

    def _active(self) -> list[RedirectRecord]:
        return [r for r in self._store.list_all(status=RedirectStatus.ACTIVE) if not r.forced]

    def detect_chains(self) -> list[RedirectChain]:
        records = self._active()
        by_source = {r.source_path: r for r in records}

        chains = []
        for first in records:
            second = by_source.get(first.target)
            if second is None:
                continue
            chains.append(
                RedirectChain(
                    chain_id=first.id,
                    step1_source=first.source_path,
                    step1_target=first.target,
                    step2_target=second.target,
                    hits=first.hits,
                )
            )

        chains.sort(key=lambda c: c.hits, reverse=True)
        return chains

    def detect_loops(self) -> list[RedirectLoop]:
        records = self._active()
        by_source = {r.source_path: r for r in records}

        loops = []
        for first in records:
            second = by_source.get(first.target)
            if second is None or second.id == first.id:
                continue
            if second.target != first.source_path:
                continue
            # one report per pair
            if str(first.id) >= str(second.id):
                continue
            loops.append(
                RedirectLoop(
                    redirect1_id=first.id,
                    url_a=first.source_path,
                    url_b=first.target,
                    redirect2_id=second.id,
                )
            )
        return loops

    def report(self) -> HealthReport:
        return HealthReport(chains=self.detect_chains(), loops=self.detect_loops())


def summary_message(report: HealthReport) -> str:
    """One-line summary for the dashboard."""
    if not report.has_issues:
        return "No SEO issues detected. All redirects are healthy!"

    messages = []
    chain_count = len(report.chains)
    loop_count = len(report.loops)

    if chain_count:
        messages.append(f"Found {chain_count} redirect chain{'s' if chain_count > 1 else ''}")
    if loop_count:
        messages.append(f"Found {loop_count} redirect loop{'s' if loop_count > 1 else ''}")

    return " | ".join(messages)

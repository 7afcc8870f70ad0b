"""
Tests for the redirect health report.
"""

from __future__ import annotations

from smart_redirects.components.health import HealthAnalyzer, HealthReport, summary_message
from smart_redirects.domain.entities import RedirectStatus


class TestChains:
    def test_detects_two_hop_chain(self, store) -> None:
        first = store.add("/a/", "/b/", hits=7)
        store.add("/b/", "/c/")

        chains = HealthAnalyzer(store).detect_chains()

        assert len(chains) == 1
        chain = chains[0]
        assert chain.chain_id == first.id
        assert (chain.step1_source, chain.step1_target, chain.step2_target) == ("/a/", "/b/", "/c/")
        assert chain.hits == 7

    def test_sorted_by_hits(self, store) -> None:
        store.add("/a/", "/hub/", hits=1)
        store.add("/b/", "/hub/", hits=9)
        store.add("/hub/", "/final/")

        chains = HealthAnalyzer(store).detect_chains()

        assert [c.step1_source for c in chains] == ["/b/", "/a/"]

    def test_pending_and_forced_are_ignored(self, store) -> None:
        store.add("/a/", "/b/", status=RedirectStatus.PENDING)
        store.add("/x/", "/b/", forced=True)
        store.add("/b/", "/c/")

        assert HealthAnalyzer(store).detect_chains() == []


class TestLoops:
    def test_loop_reported_once(self, store) -> None:
        store.add("/a/", "/b/")
        store.add("/b/", "/a/")

        loops = HealthAnalyzer(store).detect_loops()

        assert len(loops) == 1
        assert {loops[0].url_a, loops[0].url_b} == {"/a/", "/b/"}

    def test_loop_is_also_a_chain(self, store) -> None:
        store.add("/a/", "/b/")
        store.add("/b/", "/a/")

        report = HealthAnalyzer(store).report()

        assert len(report.chains) == 2
        assert len(report.loops) == 1


class TestSummary:
    def test_healthy(self) -> None:
        assert summary_message(HealthReport()) == "No SEO issues detected. All redirects are healthy!"

    def test_counts_and_plurals(self, store) -> None:
        store.add("/a/", "/b/")
        store.add("/b/", "/a/")

        message = summary_message(HealthAnalyzer(store).report())

        assert message == "Found 2 redirect chains | Found 1 redirect loop"

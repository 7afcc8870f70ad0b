"""
Resolver component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from smart_redirects.domain.entities import RedirectRecord


class RedirectLookupPort(Protocol):
    """Read side of the redirect store."""

    def get_by_source(self, source_path: str) -> RedirectRecord | None:
        """Get redirect by normalized source path."""
        ...


class ContentOraclePort(Protocol):
    """What the host CMS knows about live content."""

    def path_maps_to_published_content(self, path: str) -> bool:
        """Check if a path is served by published content right now."""
        ...

    def content_exists(self, path: str) -> bool:
        """Check if a path belongs to a real page or taxonomy term."""
        ...


class ResolverStrategy(Protocol):
    """Extension hook owned by other code (conditional or pattern rules)."""

    def try_resolve(self, path: str) -> str | None:
        """Return a redirect target for the path, or None to pass."""
        ...

"""
Health component - redirect chain and loop diagnostics.
"""

from ._impl import (
    HealthAnalyzer,
    HealthReport,
    RedirectChain,
    RedirectListingPort,
    RedirectLoop,
    summary_message,
)

__all__ = [
    "HealthAnalyzer",
    "HealthReport",
    "RedirectChain",
    "RedirectListingPort",
    "RedirectLoop",
    "summary_message",
]

"""
Executor component - emits redirects and counts hits.
"""

from ._impl import (
    ExecutorConfig,
    RedirectDecision,
    RedirectExecutor,
    append_query_string,
)
from .ports import RedirectTelemetryPort

__all__ = [
    "ExecutorConfig",
    "RedirectDecision",
    "RedirectExecutor",
    "RedirectTelemetryPort",
    "append_query_string",
]

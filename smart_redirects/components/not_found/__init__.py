"""
Not-found component - 404 log for human review.
"""

from ._impl import NotFoundLogger
from .ports import ClockPort, NotFoundLogPort

__all__ = [
    "ClockPort",
    "NotFoundLogPort",
    "NotFoundLogger",
]

"""Smart Redirects - 404 interception, hierarchical fallback and slug monitoring."""

__version__ = "3.1.0"

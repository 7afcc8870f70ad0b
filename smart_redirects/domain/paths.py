"""
Path normalization used as the matching key everywhere.

Every stored source path, every internal target and every incoming request
path goes through normalize_path() before any comparison, so all matching
is plain string equality on the normalized form:

    "https://example.com/foo"  -> "/foo/"
    "/foo"                     -> "/foo/"
    ""                         -> "/"
"""

from __future__ import annotations

from urllib.parse import unquote, urlparse

ROOT = "/"


def normalize_path(url: str | None) -> str:
    """Strip scheme and host, keep the path, end it with exactly one slash."""
    if not url:
        return ROOT

    try:
        path = urlparse(url.strip()).path
    except ValueError:
        return ROOT

    path = path.rstrip("/")
    if not path:
        return ROOT

    if not path.startswith("/"):
        path = "/" + path

    return path + "/"


def is_absolute_url(target: str | None) -> bool:
    """Check if a target is an external http(s) URL."""
    if not target:
        return False
    try:
        parsed = urlparse(target)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def normalize_target(target: str | None) -> str:
    """Absolute URLs are stored as given; anything else is a normalized path."""
    if target and is_absolute_url(target.strip()):
        return target.strip()
    return normalize_path(target)


def is_root(path: str | None) -> bool:
    return normalize_path(path) == ROOT


def strip_trailing_slash(path: str) -> str:
    return path.rstrip("/")


def last_segment(path: str) -> str:
    """Last non-empty path segment, URL-decoded ("" for root)."""
    segments = [s for s in normalize_path(path).split("/") if s]
    return unquote(segments[-1]) if segments else ""


def replace_last_segment(path: str, segment: str) -> str:
    segments = [s for s in normalize_path(path).split("/") if s]
    if not segments:
        return ROOT
    segments[-1] = segment.strip("/")
    return normalize_path("/" + "/".join(segments))


def parent_paths(path: str) -> list[str]:
    """
    Ancestors of a path, nearest first, root excluded.

    parent_paths("/a/b/c/") == ["/a/b/", "/a/"]
    """
    segments = [s for s in normalize_path(path).split("/") if s]
    parents = []
    while segments:
        segments.pop()
        if not segments:
            break
        parents.append("/" + "/".join(segments) + "/")
    return parents


def slug_suffix(slug: str, trailing_slash: bool = True) -> str:
    """Suffix a path must end with to belong to a slug: "/<slug>/" or "/<slug>"."""
    clean = slug.strip("/")
    return f"/{clean}/" if trailing_slash else f"/{clean}"

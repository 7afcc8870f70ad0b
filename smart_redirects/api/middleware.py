"""
Redirect middleware.

Runs in front of the routers for every GET/HEAD request outside the
excluded prefixes:
- a resolved match is answered with a 301/302 straight away and its hit
  is recorded after the response is sent
- otherwise the request goes through; a 404 coming back is counted in the
  not-found log unless the path belongs to published content
"""

import logging
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from fastapi.responses import RedirectResponse
from starlette.background import BackgroundTask
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from smart_redirects.api.deps import RedirectRuntime, get_redirect_runtime
from smart_redirects.components.resolver import NoMatchReason

logger = logging.getLogger(__name__)

REDIRECTABLE_METHODS = frozenset({"GET", "HEAD"})


def is_excluded(path: str, prefixes: tuple[str, ...]) -> bool:
    """
    Check a request path against the excluded entries.

    An entry ending in "/" excludes everything below it ("/api/" covers
    "/api" and "/api/admin/..."). Any other entry names one route:
    "/docs" excludes "/docs" and "/docs/" but not "/docs/guide/" or
    "/docs-tips/".
    """
    for prefix in prefixes:
        base = prefix.rstrip("/")
        if not base:
            continue
        if path in (base, base + "/"):
            return True
        if prefix.endswith("/") and path.startswith(base + "/"):
            return True
    return False


class RedirectMiddleware(BaseHTTPMiddleware):
    def _runtime(self, request: Request) -> RedirectRuntime:
        factory = request.app.dependency_overrides.get(get_redirect_runtime, get_redirect_runtime)
        runtime: RedirectRuntime = factory()
        return runtime

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        path = request.url.path
        if request.method not in REDIRECTABLE_METHODS:
            return await call_next(request)

        runtime = self._runtime(request)
        if is_excluded(path, runtime.excluded_prefixes):
            return await call_next(request)

        result = await run_in_threadpool(runtime.resolver.resolve, path)

        if result.match is not None:
            decision = runtime.executor.execute(result.match, request.url.query)
            logger.debug(
                "Redirecting %s -> %s (%s, %s)",
                path,
                decision.location,
                decision.status_code,
                result.match.layer.value,
            )
            return RedirectResponse(
                url=decision.location,
                status_code=decision.status_code,
                background=BackgroundTask(runtime.executor.record, result.match),
            )

        response = await call_next(request)
        if response.status_code == 404 and result.reason != NoMatchReason.CONTENT_EXISTS:
            await run_in_threadpool(runtime.not_found.log, path)
        return response

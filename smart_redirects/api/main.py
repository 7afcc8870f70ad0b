import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from smart_redirects import __version__
from smart_redirects.adapters.sqlite.migrator import SQLiteMigrator
from smart_redirects.api.deps import get_rules, get_settings
from smart_redirects.api.middleware import RedirectMiddleware
from smart_redirects.app_shell.config import validate_ops_rules

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Fail fast on bad rules or environment
    try:
        rules = get_rules()
        validate_ops_rules(rules, settings.data_dir)
    except Exception:
        logger.critical("Startup failed: rules from %s are unusable", settings.rules_path)
        raise

    logging.getLogger().setLevel(rules.ops.log_level)
    logger.info("Rules loaded from %s", settings.rules_path)

    SQLiteMigrator(settings.db_path, settings.migrations_dir).run_migrations()

    yield


app = FastAPI(
    title="Smart Redirects API",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from smart_redirects.api.routes import (  # noqa: E402
    admin_health,
    admin_not_found,
    admin_notices,
    admin_redirects,
    content_events,
)

app.include_router(admin_redirects.router, prefix="/api/admin", tags=["Admin Redirects"])
app.include_router(admin_not_found.router, prefix="/api/admin", tags=["Admin Not Found"])
app.include_router(admin_health.router, prefix="/api/admin", tags=["Admin Health"])
app.include_router(admin_notices.router, prefix="/api/admin", tags=["Admin Notices"])
app.include_router(content_events.router, prefix="/api/content-events", tags=["Content Events"])

app.add_middleware(RedirectMiddleware)


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "smart-redirects"}

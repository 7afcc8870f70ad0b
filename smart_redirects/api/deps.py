import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from smart_redirects.adapters.clock import SystemClock
from smart_redirects.adapters.notices import InMemoryNoticeBoard
from smart_redirects.adapters.sqlite.repos import (
    SQLiteContentOracle,
    SQLiteNotFoundLog,
    SQLiteRedirectStore,
)
from smart_redirects.components.executor import ExecutorConfig, RedirectExecutor
from smart_redirects.components.not_found import NotFoundLogger
from smart_redirects.components.resolver import MatchResolver
from smart_redirects.components.resolver import build_config as build_resolver_config
from smart_redirects.rules.loader import load_rules
from smart_redirects.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("SMART_REDIRECTS_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "smart_redirects.db")
        self.rules_path = Path(
            os.environ.get("SMART_REDIRECTS_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )
        self.migrations_dir = str(self.base_dir / "migrations")


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules() -> Rules:
    return load_rules(get_settings().rules_path)


# --- Repos / Adapters ---
def get_redirect_store(settings: Settings = Depends(get_settings)) -> SQLiteRedirectStore:
    return SQLiteRedirectStore(settings.db_path)


def get_not_found_log(settings: Settings = Depends(get_settings)) -> SQLiteNotFoundLog:
    return SQLiteNotFoundLog(settings.db_path)


def get_content_oracle(settings: Settings = Depends(get_settings)) -> SQLiteContentOracle:
    return SQLiteContentOracle(settings.db_path)


# Notices live in process memory, so every request must share one board.
@lru_cache
def get_notice_board() -> InMemoryNoticeBoard:
    return InMemoryNoticeBoard()


# --- Request pipeline ---
@dataclass
class RedirectRuntime:
    """Everything the redirect middleware needs for one request."""

    resolver: MatchResolver
    executor: RedirectExecutor
    not_found: NotFoundLogger
    excluded_prefixes: tuple[str, ...]


def get_redirect_runtime() -> RedirectRuntime:
    """
    Build the request pipeline from settings and rules.

    The middleware looks this function up in app.dependency_overrides, so
    tests replace it the same way they replace route dependencies.
    """
    settings = get_settings()
    rules = get_rules()
    store = SQLiteRedirectStore(settings.db_path)

    return RedirectRuntime(
        resolver=MatchResolver(
            store=store,
            oracle=SQLiteContentOracle(settings.db_path),
            config=build_resolver_config(rules),
        ),
        executor=RedirectExecutor(
            store=store,
            config=ExecutorConfig(base_url=rules.site.base_url),
        ),
        not_found=NotFoundLogger(SQLiteNotFoundLog(settings.db_path), clock=SystemClock()),
        excluded_prefixes=tuple(rules.redirects.excluded_prefixes),
    )

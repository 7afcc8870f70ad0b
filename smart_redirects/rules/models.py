from typing import Literal

from pydantic import BaseModel, Field


class SiteRules(BaseModel):
    base_url: str = "http://localhost:8000"


class RedirectRules(BaseModel):
    enable_fallback: bool = True
    # kind used for records discovered by the hierarchical fallback
    default_kind: Literal[301, 302] = 302
    excluded_prefixes: list[str] = Field(
        default_factory=lambda: [
            "/api/",
            "/docs",
            "/docs/oauth2-redirect",
            "/openapi.json",
            "/redoc",
            "/health",
        ]
    )


class LifecycleRules(BaseModel):
    notice_ttl_seconds: int = Field(default=30, ge=0)
    trash_suffix: str = "__trashed"


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class Rules(BaseModel):
    site: SiteRules = Field(default_factory=SiteRules)
    redirects: RedirectRules = Field(default_factory=RedirectRules)
    lifecycle: LifecycleRules = Field(default_factory=LifecycleRules)
    ops: OpsRules = Field(default_factory=OpsRules)

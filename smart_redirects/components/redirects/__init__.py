"""
Redirects component - admin redirect management.
"""

from ._impl import RedirectAdminConfig, RedirectAdminService, to_site_target
from .component import (
    build_config,
    run_accept,
    run_bulk_delete,
    run_check_conflict,
    run_delete,
    run_discard,
    run_get,
    run_list,
    run_save,
    run_stats,
    run_update,
)
from .models import (
    AcceptPendingInput,
    BulkDeleteInput,
    CheckConflictInput,
    ConflictOutput,
    DeleteRedirectInput,
    DiscardPendingInput,
    GetRedirectInput,
    ListRedirectsInput,
    RedirectListOutput,
    RedirectOperationOutput,
    RedirectOutput,
    RedirectValidationError,
    SaveRedirectInput,
    StatsInput,
    StatsOutput,
    UpdateRedirectInput,
)
from .ports import PublishedContentPort, RedirectStorePort

__all__ = [
    # Entry points
    "run_accept",
    "run_bulk_delete",
    "run_check_conflict",
    "run_delete",
    "run_discard",
    "run_get",
    "run_list",
    "run_save",
    "run_stats",
    "run_update",
    "build_config",
    # Input models
    "AcceptPendingInput",
    "BulkDeleteInput",
    "CheckConflictInput",
    "DeleteRedirectInput",
    "DiscardPendingInput",
    "GetRedirectInput",
    "ListRedirectsInput",
    "SaveRedirectInput",
    "StatsInput",
    "UpdateRedirectInput",
    # Output models
    "ConflictOutput",
    "RedirectListOutput",
    "RedirectOperationOutput",
    "RedirectOutput",
    "RedirectValidationError",
    "StatsOutput",
    # Ports
    "PublishedContentPort",
    "RedirectStorePort",
    # Service
    "RedirectAdminConfig",
    "RedirectAdminService",
    "to_site_target",
]

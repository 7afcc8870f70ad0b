"""
Watcher component - content lifecycle to redirect synchronization.
"""

from ._impl import (
    SLUG_CHANGED_NOTICE,
    TRANSITIONS,
    LifecycleWatcher,
    WatcherConfig,
    fallback_target,
    plan_rename,
    plan_republish,
    plan_restore,
    plan_transition,
    plan_trash,
    plan_unpublish,
    status_class,
)
from .component import (
    PostUpdatedInput,
    RestoreInput,
    TrashInput,
    build_config,
    run,
    run_post_updated,
    run_restore,
    run_trash,
)
from .models import (
    ContentTransition,
    DeleteRedirects,
    Mutation,
    RaiseNotice,
    RetargetUpstream,
    SaveRedirect,
    StatusClass,
    WatchOutput,
)
from .ports import NoticeBoardPort, RedirectSyncPort

__all__ = [
    # Entry points
    "run",
    "run_post_updated",
    "run_restore",
    "run_trash",
    "build_config",
    # Inputs
    "PostUpdatedInput",
    "RestoreInput",
    "TrashInput",
    # Models
    "ContentTransition",
    "DeleteRedirects",
    "Mutation",
    "RaiseNotice",
    "RetargetUpstream",
    "SaveRedirect",
    "StatusClass",
    "WatchOutput",
    # Ports
    "NoticeBoardPort",
    "RedirectSyncPort",
    # Planners
    "SLUG_CHANGED_NOTICE",
    "TRANSITIONS",
    "LifecycleWatcher",
    "WatcherConfig",
    "fallback_target",
    "plan_rename",
    "plan_republish",
    "plan_restore",
    "plan_transition",
    "plan_trash",
    "plan_unpublish",
    "status_class",
]

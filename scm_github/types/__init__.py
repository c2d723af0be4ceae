"""scm-github type definitions.

This module exports all data model types used by the adapter.
"""

from scm_github.types.events import PullRequestEvent, RepoEvent, WebhookEvent
from scm_github.types.repos import (
    CommitInfo,
    Permissions,
    RepoReference,
    UserInfo,
)
from scm_github.types.stats import StatsSnapshot

__all__ = [
    # Repository types
    "RepoReference",
    "Permissions",
    "CommitInfo",
    "UserInfo",
    # Webhook types
    "RepoEvent",
    "PullRequestEvent",
    "WebhookEvent",
    # Executor types
    "StatsSnapshot",
]

# taskbridge/__init__.py

from .exceptions import ErrorCode, PlatformError
from .jira import JiraClient, JiraFactory
from .linear import LinearClient, LinearFactory
from .models import (
    Metadata,
    Platform,
    Priority,
    Project,
    Task,
    TaskFilter,
    TaskStatus,
    User,
)
from .platform import (
    AuthProvider,
    AuthToken,
    PlatformClient,
    PlatformFactory,
    PlatformInfo,
    Registry,
)

__version__ = "0.1.0"


def build_default_registry():
    """Return a new registry with the Jira and Linear factories registered."""
    registry = Registry()
    registry.register(JiraFactory())
    registry.register(LinearFactory())
    return registry


__all__ = [
    "AuthProvider",
    "AuthToken",
    "ErrorCode",
    "JiraClient",
    "JiraFactory",
    "LinearClient",
    "LinearFactory",
    "Metadata",
    "Platform",
    "PlatformClient",
    "PlatformError",
    "PlatformFactory",
    "PlatformInfo",
    "Priority",
    "Project",
    "Registry",
    "Task",
    "TaskFilter",
    "TaskStatus",
    "User",
    "build_default_registry",
]

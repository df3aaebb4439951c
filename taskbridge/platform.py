# taskbridge/platform.py

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .exceptions import ErrorCode, PlatformError
from .logger import logger
from .models import Project, Task, TaskFilter, User


@dataclass
class PlatformInfo:
    name: str
    type: str
    version: str
    description: str
    base_url: str = ""


class PlatformClient(ABC):
    """
    Operations every task-tracking backend must provide.

    All I/O methods are coroutines. Callers bound them with asyncio.timeout()
    or asyncio.wait_for(); cancellation is never swallowed. Failures are
    raised as PlatformError, never as transport exceptions.
    """

    # Task operations

    @abstractmethod
    async def create_task(self, task: Task) -> Task: ...

    @abstractmethod
    async def get_task(self, task_id: str) -> Task: ...

    @abstractmethod
    async def update_task(self, task: Task) -> Task: ...

    @abstractmethod
    async def delete_task(self, task_id: str) -> None: ...

    @abstractmethod
    async def list_tasks(
        self, task_filter: Optional[TaskFilter] = None
    ) -> List[Task]: ...

    # Project operations

    @abstractmethod
    async def list_projects(self) -> List[Project]: ...

    @abstractmethod
    async def get_project(self, project_id: str) -> Project: ...

    # User operations

    @abstractmethod
    async def get_current_user(self) -> User: ...

    @abstractmethod
    async def search_users(self, query: str) -> List[User]: ...

    # Self-description

    @abstractmethod
    def get_platform_info(self) -> PlatformInfo: ...

    async def health_check(self) -> None:
        """Cheapest authenticated call; raises PlatformError on failure."""
        await self.get_current_user()

    async def close(self):
        """Release transport resources held by the client."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


@dataclass
class AuthToken:
    access_token: str
    token_type: str = "Bearer"
    refresh_token: Optional[str] = None
    expires_at: int = 0
    scopes: List[str] = field(default_factory=list)

    def is_expired(self, now: Optional[float] = None) -> bool:
        if not self.expires_at:
            return False
        return (now if now is not None else time.time()) >= self.expires_at


class AuthProvider(ABC):
    """Credential acquisition for backends using delegated tokens."""

    @abstractmethod
    async def authenticate(self) -> AuthToken: ...

    @abstractmethod
    async def refresh_token(self, token: AuthToken) -> AuthToken: ...

    @abstractmethod
    async def revoke_token(self, token: AuthToken) -> None: ...

    @abstractmethod
    async def validate_token(self, token: AuthToken) -> None: ...


class PlatformFactory(ABC):
    """Builds clients for one platform type from a flat config mapping."""

    @property
    @abstractmethod
    def type(self) -> str: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def validate_config(self, config: Mapping[str, Any]) -> None:
        """Raise ValueError describing the first problem found."""

    @abstractmethod
    def create(self, config: Mapping[str, Any]) -> PlatformClient: ...


class Registry:
    """Maps platform type strings to factories."""

    def __init__(self):
        self._factories: Dict[str, PlatformFactory] = {}

    def register(self, factory: PlatformFactory) -> None:
        if factory.type in self._factories:
            logger.debug(f"Replacing factory for platform type '{factory.type}'")
        self._factories[factory.type] = factory

    def get_factory(self, platform_type: str) -> Optional[PlatformFactory]:
        return self._factories.get(platform_type)

    def create(
        self, platform_type: str, config: Optional[Mapping[str, Any]] = None
    ) -> PlatformClient:
        factory = self._factories.get(platform_type)
        if factory is None:
            raise PlatformError(ErrorCode.PLATFORM_NOT_SUPPORTED, platform_type)

        config = config or {}
        try:
            factory.validate_config(config)
        except ValueError as e:
            raise PlatformError(
                ErrorCode.INVALID_CONFIG, platform_type, cause=e
            ) from e

        return factory.create(config)

    def supported_platforms(self) -> List[str]:
        return sorted(self._factories)

    def is_supported(self, platform_type: str) -> bool:
        return platform_type in self._factories

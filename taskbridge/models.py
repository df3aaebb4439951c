# taskbridge/models.py

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

MetadataValue = Union[str, int, float, bool, datetime, None]

_METADATA_TYPES = (str, int, float, bool, datetime, type(None))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    CANCELLED = "cancelled"

    @classmethod
    def is_valid(cls, value) -> bool:
        try:
            cls(value)
        except (ValueError, TypeError):
            return False
        return True

    def __str__(self):
        return self.value


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @classmethod
    def is_valid(cls, value) -> bool:
        try:
            cls(value)
        except (ValueError, TypeError):
            return False
        return True

    def __str__(self):
        return self.value


class Platform(str, Enum):
    LINEAR = "linear"
    JIRA = "jira"
    SLACK = "slack"
    GITHUB = "github"

    @classmethod
    def is_valid(cls, value) -> bool:
        try:
            cls(value)
        except (ValueError, TypeError):
            return False
        return True

    def __str__(self):
        return self.value


class Metadata(dict):
    """
    Extension bag for platform fields with no canonical slot.

    Values are restricted to strings, numbers, booleans, timestamps and None
    so entities stay introspectable and serialisable.
    """

    def __init__(self, *args, **kwargs):
        super().__init__()
        self.update(*args, **kwargs)

    def __setitem__(self, key: str, value: MetadataValue):
        if not isinstance(key, str):
            raise TypeError(
                f"metadata keys must be strings, got {type(key).__name__}"
            )
        if not isinstance(value, _METADATA_TYPES):
            raise TypeError(
                f"unsupported metadata value for '{key}': {type(value).__name__}"
            )
        super().__setitem__(key, value)

    def update(self, *args, **kwargs):
        for key, value in dict(*args, **kwargs).items():
            self[key] = value

    def setdefault(self, key, default=None):
        if key not in self:
            self[key] = default
        return self[key]

    def get_str(self, key: str) -> Optional[str]:
        """Return the value for key if it is a non-empty string."""
        value = self.get(key)
        if isinstance(value, str) and value:
            return value
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            key: value.isoformat() if isinstance(value, datetime) else value
            for key, value in self.items()
        }


def _get_metadata(bag: Optional[Metadata], key: str) -> Tuple[MetadataValue, bool]:
    if bag is None or key not in bag:
        return None, False
    return bag[key], True


def _dedupe(labels) -> List[str]:
    seen = []
    for label in labels or []:
        if label not in seen:
            seen.append(label)
    return seen


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class User:
    id: str
    name: str = ""
    email: str = ""
    platform: Platform = Platform.JIRA
    username: Optional[str] = None
    avatar: Optional[str] = None
    active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None
    metadata: Optional[Metadata] = field(default_factory=Metadata)

    def __post_init__(self):
        if self.updated_at is None:
            self.updated_at = self.created_at
        if self.metadata is not None and not isinstance(self.metadata, Metadata):
            self.metadata = Metadata(self.metadata)

    def set_metadata(self, key: str, value: MetadataValue):
        if self.metadata is None:
            self.metadata = Metadata()
        self.metadata[key] = value
        self.updated_at = utcnow()

    def get_metadata(self, key: str) -> Tuple[MetadataValue, bool]:
        return _get_metadata(self.metadata, key)

    def display_name(self) -> str:
        return self.name or self.username or self.email

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "username": self.username,
            "avatar": self.avatar,
            "platform": str(self.platform),
            "active": self.active,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "metadata": self.metadata.to_dict() if self.metadata else {},
        }


@dataclass
class Project:
    id: str
    name: str
    platform: Platform = Platform.JIRA
    description: str = ""
    key: Optional[str] = None
    active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None
    metadata: Optional[Metadata] = field(default_factory=Metadata)

    def __post_init__(self):
        if self.updated_at is None:
            self.updated_at = self.created_at
        if self.metadata is not None and not isinstance(self.metadata, Metadata):
            self.metadata = Metadata(self.metadata)

    def set_metadata(self, key: str, value: MetadataValue):
        if self.metadata is None:
            self.metadata = Metadata()
        self.metadata[key] = value
        self.updated_at = utcnow()

    def get_metadata(self, key: str) -> Tuple[MetadataValue, bool]:
        return _get_metadata(self.metadata, key)

    def display_name(self) -> str:
        return self.key or self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "key": self.key,
            "description": self.description,
            "platform": str(self.platform),
            "active": self.active,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "metadata": self.metadata.to_dict() if self.metadata else {},
        }


@dataclass
class Task:
    """
    Canonical unit of work.

    `id` is the platform's human identifier (Jira issue key, Linear
    identifier). The native ids needed to address the task again live in
    `metadata` and must be kept verbatim by callers.
    """

    title: str
    platform: Platform
    id: str = ""
    description: str = ""
    status: TaskStatus = TaskStatus.OPEN
    priority: Priority = Priority.MEDIUM
    assignee: Optional[User] = None
    project_id: Optional[str] = None
    labels: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None
    due_date: Optional[datetime] = None
    metadata: Optional[Metadata] = field(default_factory=Metadata)

    def __post_init__(self):
        if self.updated_at is None:
            self.updated_at = self.created_at
        self.labels = _dedupe(self.labels)
        if self.metadata is not None and not isinstance(self.metadata, Metadata):
            self.metadata = Metadata(self.metadata)

    def _touch(self):
        self.updated_at = utcnow()

    def set_title(self, title: str):
        self.title = title
        self._touch()

    def set_description(self, description: str):
        self.description = description
        self._touch()

    def set_status(self, status: Union[TaskStatus, str]) -> bool:
        """Set the status; invalid values are ignored and return False."""
        if not TaskStatus.is_valid(status):
            return False
        self.status = TaskStatus(status)
        self._touch()
        return True

    def set_priority(self, priority: Union[Priority, str]) -> bool:
        """Set the priority; invalid values are ignored and return False."""
        if not Priority.is_valid(priority):
            return False
        self.priority = Priority(priority)
        self._touch()
        return True

    def set_assignee(self, user: Optional[User]):
        self.assignee = user
        self._touch()

    def add_label(self, label: str):
        if label in self.labels:
            return
        self.labels.append(label)
        self._touch()

    def remove_label(self, label: str):
        if label not in self.labels:
            return
        self.labels.remove(label)
        self._touch()

    def set_metadata(self, key: str, value: MetadataValue):
        if self.metadata is None:
            self.metadata = Metadata()
        self.metadata[key] = value
        self._touch()

    def get_metadata(self, key: str) -> Tuple[MetadataValue, bool]:
        return _get_metadata(self.metadata, key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": str(self.status),
            "priority": str(self.priority),
            "assignee": self.assignee.to_dict() if self.assignee else None,
            "platform": str(self.platform),
            "project_id": self.project_id,
            "labels": list(self.labels),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "due_date": _iso(self.due_date),
            "metadata": self.metadata.to_dict() if self.metadata else {},
        }


@dataclass
class TaskFilter:
    """
    Query shape for list_tasks.

    None/empty fields are unconstrained. An assignee of "me" means the
    authenticated user. A limit of 0 leaves the page size to the adapter.
    """

    platform: Optional[Platform] = None
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    assignee: str = ""
    project_id: str = ""
    labels: List[str] = field(default_factory=list)
    query: str = ""
    limit: int = 0
    offset: int = 0

    def __post_init__(self):
        self.labels = _dedupe(self.labels)

    def is_empty(self) -> bool:
        return not (
            self.platform
            or self.status
            or self.priority
            or self.assignee
            or self.project_id
            or self.labels
            or self.query
        )

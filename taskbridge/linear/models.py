# taskbridge/linear/models.py

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ..models import Metadata, Platform, Project, Task, User
from ..utils import parse_timestamp
from .mapping import map_priority, map_state_type


@dataclass
class LinearUser:
    id: str
    name: str = ""
    display_name: str = ""
    email: str = ""
    avatar_url: Optional[str] = None
    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get("id", ""),
            name=data.get("name") or "",
            display_name=data.get("displayName") or "",
            email=data.get("email") or "",
            avatar_url=data.get("avatarUrl"),
            active=bool(data.get("active", True)),
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
        )

    def to_user(self):
        user = User(
            id=self.id,
            name=self.name or self.display_name,
            email=self.email,
            username=self.display_name or None,
            avatar=self.avatar_url,
            platform=Platform.LINEAR,
            active=self.active,
            metadata=Metadata(linear_id=self.id),
        )
        if self.created_at:
            user.created_at = self.created_at
        user.updated_at = self.updated_at or user.created_at
        return user


@dataclass
class LinearState:
    id: str
    name: str = ""
    type: str = ""
    color: str = ""
    position: float = 0

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get("id", ""),
            name=data.get("name") or "",
            type=data.get("type") or "",
            color=data.get("color") or "",
            position=data.get("position") or 0,
        )

    def to_status(self):
        return map_state_type(self.type)


@dataclass
class LinearTeam:
    id: str
    name: str = ""
    key: str = ""

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get("id", ""),
            name=data.get("name") or "",
            key=data.get("key") or "",
        )


@dataclass
class LinearLabel:
    id: str
    name: str
    color: str = ""

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get("id", ""),
            name=data.get("name") or "",
            color=data.get("color") or "",
        )


@dataclass
class LinearProject:
    id: str
    name: str
    description: str = ""
    slug_id: str = ""
    url: str = ""
    state: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data.get("id", ""),
            name=data.get("name") or "",
            description=data.get("description") or "",
            slug_id=data.get("slugId") or "",
            url=data.get("url") or "",
            state=data.get("state") or "",
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
        )

    def to_project(self):
        project = Project(
            id=self.id,
            name=self.name,
            description=self.description,
            platform=Platform.LINEAR,
            # Linear has no archived flag on this query; closed states count
            active=self.state not in ("completed", "canceled"),
            metadata=Metadata(
                linear_id=self.id, slug_id=self.slug_id, linear_url=self.url
            ),
        )
        if self.created_at:
            project.created_at = self.created_at
        project.updated_at = self.updated_at or project.created_at
        return project


@dataclass
class LinearIssue:
    id: str
    identifier: str
    title: str = ""
    description: str = ""
    priority: float = 0
    url: str = ""
    state: Optional[LinearState] = None
    assignee: Optional[LinearUser] = None
    team: Optional[LinearTeam] = None
    project_id: Optional[str] = None
    labels: List[LinearLabel] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    due_date: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data):
        state = data.get("state")
        assignee = data.get("assignee")
        team = data.get("team")
        project = data.get("project") or {}
        labels = (data.get("labels") or {}).get("nodes") or []
        return cls(
            id=data.get("id", ""),
            identifier=data.get("identifier") or "",
            title=data.get("title") or "",
            description=data.get("description") or "",
            priority=data.get("priority") or 0,
            url=data.get("url") or "",
            state=LinearState.from_dict(state) if state else None,
            assignee=LinearUser.from_dict(assignee) if assignee else None,
            team=LinearTeam.from_dict(team) if team else None,
            project_id=project.get("id"),
            labels=[LinearLabel.from_dict(label) for label in labels],
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
            due_date=parse_timestamp(data.get("dueDate")),
        )

    def to_task(self):
        metadata = Metadata(linear_id=self.id, linear_url=self.url)
        if self.team:
            metadata["team"] = self.team.key
            metadata["team_id"] = self.team.id
        if self.state:
            metadata["state_id"] = self.state.id
            metadata["state_name"] = self.state.name
            metadata["state_type"] = self.state.type
            metadata["state_color"] = self.state.color

        task = Task(
            id=self.identifier or self.id,
            title=self.title,
            description=self.description,
            platform=Platform.LINEAR,
            status=map_state_type(self.state.type if self.state else None),
            priority=map_priority(self.priority),
            assignee=self.assignee.to_user() if self.assignee else None,
            project_id=self.project_id,
            labels=[label.name for label in self.labels if label.name],
            due_date=self.due_date,
            metadata=metadata,
        )
        if self.created_at:
            task.created_at = self.created_at
        task.updated_at = self.updated_at or task.created_at
        return task

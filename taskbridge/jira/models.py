# taskbridge/jira/models.py

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ..models import Metadata, Platform, Project, Task, TaskStatus, User
from ..utils import parse_timestamp
from .mapping import map_priority, map_status_category, map_status_name


@dataclass
class JiraUser:
    account_id: str
    display_name: str = ""
    email: str = ""
    active: bool = False
    avatar_url: Optional[str] = None
    self_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        return cls(
            account_id=data.get("accountId") or data.get("name") or "",
            display_name=data.get("displayName") or "",
            email=data.get("emailAddress") or "",
            active=bool(data.get("active", False)),
            avatar_url=(data.get("avatarUrls") or {}).get("48x48"),
            self_url=data.get("self"),
        )

    def to_user(self):
        metadata = Metadata(jira_account_id=self.account_id)
        if self.self_url:
            metadata["jira_self"] = self.self_url
        return User(
            id=self.account_id,
            name=self.display_name,
            email=self.email,
            avatar=self.avatar_url,
            platform=Platform.JIRA,
            active=self.active,
            metadata=metadata,
        )


@dataclass
class JiraProject:
    id: str
    key: str
    name: str
    description: Optional[str] = None
    self_url: Optional[str] = None
    project_type: Optional[str] = None
    lead: Optional[JiraUser] = None

    @classmethod
    def from_dict(cls, data):
        lead = data.get("lead")
        return cls(
            id=str(data.get("id", "")),
            key=data.get("key", ""),
            name=data.get("name", ""),
            description=data.get("description"),
            self_url=data.get("self"),
            project_type=data.get("projectTypeKey"),
            lead=JiraUser.from_dict(lead) if lead else None,
        )

    def to_project(self):
        metadata = Metadata(jira_id=self.id, jira_self=self.self_url or "")
        if self.project_type:
            metadata["project_type"] = self.project_type
        if self.lead:
            metadata["lead_account_id"] = self.lead.account_id
        return Project(
            id=self.id,
            name=self.name,
            key=self.key or None,
            description=self.description or "",
            platform=Platform.JIRA,
            active=True,
            metadata=metadata,
        )


@dataclass
class JiraStatus:
    name: str
    category_key: str = ""

    @classmethod
    def from_dict(cls, data):
        return cls(
            name=data.get("name", ""),
            category_key=(data.get("statusCategory") or {}).get("key", ""),
        )

    def to_status(self):
        # Category keys are the stable signal; names are per-workflow text
        if self.category_key:
            return map_status_category(self.category_key)
        return map_status_name(self.name)


@dataclass
class JiraIssue:
    id: str
    key: str
    summary: str = ""
    description: str = ""
    self_url: Optional[str] = None
    status: Optional[JiraStatus] = None
    priority_name: Optional[str] = None
    assignee: Optional[JiraUser] = None
    project_id: Optional[str] = None
    project_key: Optional[str] = None
    issue_type: Optional[str] = None
    labels: List[str] = field(default_factory=list)
    created: Optional[datetime] = None
    updated: Optional[datetime] = None
    due_date: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data):
        fields = data.get("fields") or {}
        status = fields.get("status")
        priority = fields.get("priority")
        assignee = fields.get("assignee")
        project = fields.get("project") or {}
        issue_type = fields.get("issuetype") or {}
        return cls(
            id=str(data.get("id", "")),
            key=data.get("key", ""),
            summary=fields.get("summary") or "",
            description=fields.get("description") or "",
            self_url=data.get("self"),
            status=JiraStatus.from_dict(status) if status else None,
            priority_name=priority.get("name") if priority else None,
            assignee=JiraUser.from_dict(assignee) if assignee else None,
            project_id=str(project["id"]) if project.get("id") else None,
            project_key=project.get("key"),
            issue_type=issue_type.get("name"),
            labels=list(fields.get("labels") or []),
            created=parse_timestamp(fields.get("created")),
            updated=parse_timestamp(fields.get("updated")),
            due_date=parse_timestamp(fields.get("duedate")),
        )

    def to_task(self):
        metadata = Metadata(jira_id=self.id, jira_self=self.self_url or "")
        if self.issue_type:
            metadata["issue_type"] = self.issue_type
        if self.status:
            metadata["status_name"] = self.status.name
            metadata["status_category"] = self.status.category_key
        if self.priority_name:
            metadata["priority_name"] = self.priority_name
        if self.project_id:
            metadata["project_id"] = self.project_id

        task = Task(
            id=self.key,
            title=self.summary,
            description=self.description,
            platform=Platform.JIRA,
            status=self.status.to_status() if self.status else TaskStatus.OPEN,
            priority=map_priority(self.priority_name),
            assignee=self.assignee.to_user() if self.assignee else None,
            project_id=self.project_key or self.project_id,
            labels=self.labels,
            due_date=self.due_date,
            metadata=metadata,
        )
        if self.created:
            task.created_at = self.created
        task.updated_at = self.updated or task.created_at
        return task

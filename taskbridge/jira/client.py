# taskbridge/jira/client.py

import asyncio
from contextlib import contextmanager

from ..config import Config
from ..exceptions import ErrorCode, PlatformError, error_for_status
from ..logger import get_logger
from ..models import Platform
from ..platform import PlatformClient, PlatformInfo
from ..utils import format_date
from .api import JiraAPI
from .exceptions import JiraAPIError, JiraConnectionError, TransitionNotFoundError
from .mapping import build_jql_query, to_jira_priority, to_jira_status
from .models import JiraIssue, JiraProject, JiraUser

logger = get_logger("jira")

PLATFORM = Platform.JIRA.value
DEFAULT_ISSUE_TYPE = "Task"


class JiraClient(PlatformClient):
    """
    Jira implementation of the platform contract.

    Tasks are identified by issue key; the numeric issue id is kept in
    metadata["jira_id"] and is what update_task addresses.
    """

    def __init__(self, base_url, email, token, timeout=None, api=None):
        if not base_url:
            raise PlatformError(
                ErrorCode.INVALID_CONFIG,
                PLATFORM,
                cause=ValueError("base URL is required"),
            )
        if not email or not token:
            raise PlatformError(
                ErrorCode.INVALID_CONFIG,
                PLATFORM,
                cause=ValueError("email and token are required"),
            )

        self.base_url = base_url.rstrip("/")
        self.email = email
        self.api = api or JiraAPI(
            self.base_url, email, token, timeout=timeout or Config.REQUEST_TIMEOUT
        )

    async def close(self):
        await self.api.close()

    @contextmanager
    def _translate_errors(self, task_id="", action="request"):
        try:
            yield
        except PlatformError:
            raise
        except JiraConnectionError as e:
            logger.error(f"Jira {action} failed: {e}")
            raise PlatformError(ErrorCode.NETWORK_ERROR, PLATFORM, task_id, e) from e
        except JiraAPIError as e:
            logger.error(f"Jira {action} failed: {e}")
            raise error_for_status(e.status_code, PLATFORM, task_id, e) from e
        except asyncio.TimeoutError as e:
            logger.error(f"Jira {action} timed out")
            raise PlatformError(
                ErrorCode.NETWORK_ERROR,
                PLATFORM,
                task_id,
                e,
                message="Request timed out",
            ) from e
        except (TransitionNotFoundError, AttributeError, KeyError, TypeError) as e:
            logger.error(f"Jira {action} failed: {e}")
            raise PlatformError(ErrorCode.PLATFORM_API, PLATFORM, task_id, e) from e

    # Task operations

    async def create_task(self, task):
        if not task.project_id:
            raise PlatformError(
                ErrorCode.INVALID_INPUT,
                PLATFORM,
                cause=ValueError("project ID is required for Jira issues"),
            )

        fields = self._build_fields(task, creating=True)

        with self._translate_errors(action="create issue"):
            created = await self.api.create_issue(fields)
            issue_key = created.get("key") or created["id"]
            logger.info(f"Created Jira issue {issue_key}")
            data = await self.api.get_issue(issue_key)
            return JiraIssue.from_dict(data).to_task()

    async def get_task(self, task_id):
        with self._translate_errors(task_id, action="get issue"):
            data = await self.api.get_issue(task_id)
            return JiraIssue.from_dict(data).to_task()

    async def update_task(self, task):
        jira_id = task.metadata.get_str("jira_id") if task.metadata else None
        if not jira_id:
            raise PlatformError(
                ErrorCode.INVALID_INPUT,
                PLATFORM,
                task.id,
                ValueError("jira_id not found in task metadata"),
            )

        fields = self._build_fields(task)

        with self._translate_errors(task.id, action="update issue"):
            current = JiraIssue.from_dict(await self.api.get_issue(jira_id))
            current_status = current.status.to_status() if current.status else None
            if current_status != task.status:
                await self._transition_issue(jira_id, task.status)

            await self.api.update_issue(jira_id, fields)
            logger.info(f"Updated Jira issue {task.id}")
            data = await self.api.get_issue(jira_id)
            return JiraIssue.from_dict(data).to_task()

    async def delete_task(self, task_id):
        with self._translate_errors(task_id, action="delete issue"):
            await self.api.delete_issue(task_id)
        logger.info(f"Deleted Jira issue {task_id}")

    async def list_tasks(self, task_filter=None):
        jql = build_jql_query(task_filter)
        max_results = Config.DEFAULT_PAGE_SIZE
        start_at = 0
        if task_filter is not None:
            if task_filter.limit > 0:
                max_results = task_filter.limit
            if task_filter.offset > 0:
                start_at = task_filter.offset

        logger.debug(f"Searching Jira issues: {jql}")
        with self._translate_errors(action="search issues"):
            result = await self.api.search_issues(
                jql, start_at=start_at, max_results=max_results
            )

        tasks = [
            JiraIssue.from_dict(issue).to_task()
            for issue in (result or {}).get("issues", [])
        ]
        # JQL has no canonical priority vocabulary; filter after mapping
        if task_filter is not None and task_filter.priority is not None:
            tasks = [task for task in tasks if task.priority == task_filter.priority]
        return tasks

    # Project operations

    async def list_projects(self):
        with self._translate_errors(action="list projects"):
            projects = await self.api.get_projects()
        return [
            JiraProject.from_dict(project).to_project() for project in projects or []
        ]

    async def get_project(self, project_id):
        with self._translate_errors(project_id, action="get project"):
            data = await self.api.get_project(project_id)
            return JiraProject.from_dict(data).to_project()

    # User operations

    async def get_current_user(self):
        with self._translate_errors(action="get current user"):
            data = await self.api.get_myself()
            return JiraUser.from_dict(data).to_user()

    async def search_users(self, query):
        with self._translate_errors(action="search users"):
            users = await self.api.search_users(query)
        return [JiraUser.from_dict(user).to_user() for user in users or []]

    def get_platform_info(self):
        return PlatformInfo(
            name="Jira",
            type=PLATFORM,
            version="1.0",
            description="Atlassian Jira issue tracking and project management",
            base_url=self.base_url,
        )

    # Helpers

    async def _transition_issue(self, issue_id, status):
        target = to_jira_status(status)
        transitions = await self.api.get_transitions(issue_id)

        transition_id = None
        for transition in transitions:
            to_name = (transition.get("to") or {}).get("name", "")
            if to_name.lower() == target.lower():
                transition_id = transition["id"]
                break

        if not transition_id:
            raise TransitionNotFoundError(issue_id, target)

        await self.api.do_transition(issue_id, transition_id)
        logger.info(f"Transitioned Jira issue {issue_id} to '{target}'")

    def _build_fields(self, task, creating=False):
        fields = {
            "summary": task.title,
            "description": task.description or "",
            "priority": {"name": to_jira_priority(task.priority)},
        }

        if creating:
            project_id = str(task.project_id)
            fields["project"] = (
                {"id": project_id} if project_id.isdigit() else {"key": project_id}
            )
            issue_type = None
            if task.metadata:
                issue_type = task.metadata.get_str("issue_type")
            fields["issuetype"] = {"name": issue_type or DEFAULT_ISSUE_TYPE}

        if task.assignee is not None:
            fields["assignee"] = {"accountId": self._assignee_account_id(task)}

        if task.labels:
            fields["labels"] = list(task.labels)

        if task.due_date:
            fields["duedate"] = format_date(task.due_date)

        return fields

    def _assignee_account_id(self, task):
        assignee = task.assignee
        account_id = None
        if assignee.metadata:
            account_id = assignee.metadata.get_str("jira_account_id")
        if not account_id and assignee.platform == Platform.JIRA:
            account_id = assignee.id
        if not account_id:
            raise PlatformError(
                ErrorCode.INVALID_INPUT,
                PLATFORM,
                task.id,
                ValueError("assignee has no jira_account_id in metadata"),
            )
        return account_id

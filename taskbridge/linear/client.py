# taskbridge/linear/client.py

import asyncio
from contextlib import contextmanager

from ..config import Config
from ..exceptions import ErrorCode, PlatformError, error_for_status
from ..logger import get_logger
from ..models import Platform, TaskStatus
from ..platform import PlatformClient, PlatformInfo
from ..utils import format_date
from .api import LINEAR_API_URL, LinearAPI
from .exceptions import LinearAPIError, LinearConnectionError, StateNotFoundError
from .mapping import (
    build_issue_filter,
    map_state_type,
    to_linear_priority,
    to_linear_state_type,
)
from .models import LinearIssue, LinearProject, LinearState, LinearUser

logger = get_logger("linear")

PLATFORM = Platform.LINEAR.value
MAX_PAGE_SIZE = 250
PROJECT_PAGE_SIZE = 100

# GraphQL error extension codes -> error taxonomy
EXTENSION_CODES = {
    "AUTHENTICATION_ERROR": ErrorCode.AUTHENTICATION,
    "UNAUTHENTICATED": ErrorCode.AUTHENTICATION,
    "FORBIDDEN": ErrorCode.PERMISSION_DENIED,
    "RATELIMITED": ErrorCode.RATE_LIMITED,
    "RATE_LIMITED": ErrorCode.RATE_LIMITED,
    "NOT_FOUND": ErrorCode.NOT_FOUND,
}


def _classify(error):
    for code in error.extension_codes:
        if code in EXTENSION_CODES:
            return EXTENSION_CODES[code]
    return None


class LinearClient(PlatformClient):
    """
    Linear implementation of the platform contract.

    Tasks are identified by their short identifier (e.g. "ENG-123"); the
    issue UUID is kept in metadata["linear_id"] and the owning team in
    metadata["team_id"]. Creating an issue needs a team, taken from the
    task metadata or the client's default team.
    """

    def __init__(self, token, base_url=None, team_id=None, timeout=None, api=None):
        if not token:
            raise PlatformError(
                ErrorCode.INVALID_CONFIG,
                PLATFORM,
                cause=ValueError("API token is required"),
            )

        self.base_url = base_url or LINEAR_API_URL
        self.team_id = team_id
        self.api = api or LinearAPI(
            token, url=self.base_url, timeout=timeout or Config.REQUEST_TIMEOUT
        )

    async def close(self):
        await self.api.close()

    @contextmanager
    def _translate_errors(self, task_id="", action="request"):
        try:
            yield
        except PlatformError:
            raise
        except LinearConnectionError as e:
            logger.error(f"Linear {action} failed: {e}")
            raise PlatformError(ErrorCode.NETWORK_ERROR, PLATFORM, task_id, e) from e
        except LinearAPIError as e:
            code = _classify(e)
            if code is not None:
                logger.error(f"Linear {action} failed: {e}")
                raise PlatformError(code, PLATFORM, task_id, e) from e
            if e.is_not_found:
                logger.warning(f"Linear {action}: {task_id or 'entity'} not found")
                raise PlatformError(ErrorCode.NOT_FOUND, PLATFORM, task_id, e) from e
            logger.error(f"Linear {action} failed: {e}")
            if e.status_code:
                raise error_for_status(e.status_code, PLATFORM, task_id, e) from e
            raise PlatformError(ErrorCode.PLATFORM_API, PLATFORM, task_id, e) from e
        except asyncio.TimeoutError as e:
            logger.error(f"Linear {action} timed out")
            raise PlatformError(
                ErrorCode.NETWORK_ERROR,
                PLATFORM,
                task_id,
                e,
                message="Request timed out",
            ) from e
        except (StateNotFoundError, AttributeError, KeyError, TypeError) as e:
            logger.error(f"Linear {action} failed: {e}")
            raise PlatformError(ErrorCode.PLATFORM_API, PLATFORM, task_id, e) from e

    # Task operations

    async def create_task(self, task):
        team_id = self._team_id(task)
        if not team_id:
            raise PlatformError(
                ErrorCode.INVALID_INPUT,
                PLATFORM,
                cause=ValueError("team_id is required to create a Linear issue"),
            )

        data = self._build_input(task)
        data["teamId"] = team_id

        with self._translate_errors(action="create issue"):
            if task.labels:
                data["labelIds"] = await self._resolve_labels(team_id, task.labels)
            if task.status != TaskStatus.OPEN:
                state = await self._find_state(team_id, task.status)
                data["stateId"] = state.id

            result = await self.api.create_issue(data)
            self._check_success(result, "issueCreate")
            issue = LinearIssue.from_dict(result["issue"])
            logger.info(f"Created Linear issue {issue.identifier}")
            return issue.to_task()

    async def get_task(self, task_id):
        with self._translate_errors(task_id, action="get issue"):
            data = await self.api.get_issue(task_id)
            if not data:
                raise PlatformError(ErrorCode.NOT_FOUND, PLATFORM, task_id)
            return LinearIssue.from_dict(data).to_task()

    async def update_task(self, task):
        linear_id = task.metadata.get_str("linear_id") if task.metadata else None
        if not linear_id:
            raise PlatformError(
                ErrorCode.INVALID_INPUT,
                PLATFORM,
                task.id,
                ValueError("linear_id not found in task metadata"),
            )

        data = self._build_input(task)
        team_id = self._team_id(task)
        state_type = task.metadata.get_str("state_type")

        with self._translate_errors(task.id, action="update issue"):
            if state_type is None:
                # No stored state; compare against the issue as it is now
                current = await self.api.get_issue(linear_id)
                if not current:
                    raise PlatformError(ErrorCode.NOT_FOUND, PLATFORM, task.id)
                issue = LinearIssue.from_dict(current)
                state_type = issue.state.type if issue.state else ""
                if not team_id and issue.team:
                    team_id = issue.team.id

            status_changed = map_state_type(state_type) != task.status
            if (status_changed or task.labels) and not team_id:
                raise PlatformError(
                    ErrorCode.INVALID_INPUT,
                    PLATFORM,
                    task.id,
                    ValueError("team_id is required to update state or labels"),
                )

            if task.labels:
                data["labelIds"] = await self._resolve_labels(team_id, task.labels)
            if status_changed:
                state = await self._find_state(team_id, task.status)
                data["stateId"] = state.id

            result = await self.api.update_issue(linear_id, data)
            self._check_success(result, "issueUpdate")
            logger.info(f"Updated Linear issue {task.id}")
            return LinearIssue.from_dict(result["issue"]).to_task()

    async def delete_task(self, task_id):
        with self._translate_errors(task_id, action="delete issue"):
            result = await self.api.delete_issue(task_id)
            self._check_success(result, "issueDelete")
        logger.info(f"Deleted Linear issue {task_id}")

    async def list_tasks(self, task_filter=None):
        issue_filter = build_issue_filter(task_filter)
        limit = Config.DEFAULT_PAGE_SIZE
        skip = 0
        if task_filter is not None:
            if task_filter.limit > 0:
                limit = task_filter.limit
            if task_filter.offset > 0:
                skip = task_filter.offset

        logger.debug(f"Listing Linear issues with filter {issue_filter}")
        nodes = []
        after = None
        with self._translate_errors(action="list issues"):
            # Linear pages by cursor; an offset is reached by walking pages
            while True:
                first = min(skip + limit - len(nodes), MAX_PAGE_SIZE)
                page = await self.api.list_issues(
                    issue_filter, first=first, after=after
                )
                page_nodes = page.get("nodes") or []
                if skip:
                    dropped = min(skip, len(page_nodes))
                    page_nodes = page_nodes[dropped:]
                    skip -= dropped
                nodes.extend(page_nodes[: limit - len(nodes)])

                page_info = page.get("pageInfo") or {}
                if len(nodes) >= limit or not page_info.get("hasNextPage"):
                    break
                after = page_info.get("endCursor")
                if not after:
                    logger.warning("Linear reported another page without a cursor")
                    break

            return [LinearIssue.from_dict(node).to_task() for node in nodes]

    # Project operations

    async def list_projects(self):
        with self._translate_errors(action="list projects"):
            projects = await self.api.list_projects(first=PROJECT_PAGE_SIZE)
            return [
                LinearProject.from_dict(project).to_project()
                for project in projects or []
            ]

    async def get_project(self, project_id):
        with self._translate_errors(project_id, action="get project"):
            data = await self.api.get_project(project_id)
            if not data:
                raise PlatformError(ErrorCode.NOT_FOUND, PLATFORM, project_id)
            return LinearProject.from_dict(data).to_project()

    # User operations

    async def get_current_user(self):
        with self._translate_errors(action="get viewer"):
            data = await self.api.get_viewer()
            return LinearUser.from_dict(data).to_user()

    async def search_users(self, query):
        with self._translate_errors(action="search users"):
            users = await self.api.search_users(query)
            return [LinearUser.from_dict(user).to_user() for user in users or []]

    def get_platform_info(self):
        return PlatformInfo(
            name="Linear",
            type=PLATFORM,
            version="1.0",
            description="Linear issue tracking and project management",
            base_url=self.base_url,
        )

    # Helpers

    def _team_id(self, task):
        team_id = task.metadata.get_str("team_id") if task.metadata else None
        return team_id or self.team_id

    def _check_success(self, result, operation):
        if not result or not result.get("success"):
            raise LinearAPIError(f"{operation} did not succeed")

    async def _find_state(self, team_id, status):
        """Pick the team's first workflow state whose type matches status."""
        state_type = to_linear_state_type(status)
        states = [
            LinearState.from_dict(state)
            for state in await self.api.get_workflow_states(team_id)
        ]
        candidates = [state for state in states if state.type == state_type]
        if not candidates:
            raise StateNotFoundError(team_id, state_type)
        return min(candidates, key=lambda state: state.position)

    async def _resolve_labels(self, team_id, names):
        labels = await self.api.get_team_labels(team_id)
        by_name = {label["name"].lower(): label["id"] for label in labels}
        label_ids = []
        for name in names:
            label_id = by_name.get(name.lower())
            if label_id is None:
                logger.warning(f"Label '{name}' does not exist in team {team_id}")
                continue
            label_ids.append(label_id)
        return label_ids

    def _build_input(self, task):
        data = {
            "title": task.title,
            "description": task.description or "",
            "priority": to_linear_priority(task.priority),
        }

        if task.project_id:
            data["projectId"] = task.project_id

        if task.assignee is not None:
            data["assigneeId"] = self._assignee_id(task)

        if task.due_date:
            data["dueDate"] = format_date(task.due_date)

        return data

    def _assignee_id(self, task):
        assignee = task.assignee
        linear_id = None
        if assignee.metadata:
            linear_id = assignee.metadata.get_str("linear_id")
        if not linear_id and assignee.platform == Platform.LINEAR:
            linear_id = assignee.id
        if not linear_id:
            raise PlatformError(
                ErrorCode.INVALID_INPUT,
                PLATFORM,
                task.id,
                ValueError("assignee has no linear_id in metadata"),
            )
        return linear_id

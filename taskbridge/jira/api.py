# taskbridge/jira/api.py

import aiohttp

from ..logger import get_logger
from .exceptions import JiraAPIError, JiraConnectionError

logger = get_logger("jira.api")

ISSUE_FIELDS = [
    "summary",
    "description",
    "status",
    "priority",
    "assignee",
    "labels",
    "project",
    "issuetype",
    "created",
    "updated",
    "duedate",
]


class JiraAPI:
    """
    Thin async wrapper around the Jira REST API (v2).

    Raises JiraAPIError for non-success responses and JiraConnectionError
    when the server cannot be reached. Timeouts surface as
    asyncio.TimeoutError. Nothing is retried here.
    """

    def __init__(self, base_url, email, token, timeout=30.0, api_version=2):
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.auth = aiohttp.BasicAuth(email, token)
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.session = None

    def _get_session(self):
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                auth=self.auth,
                timeout=self.timeout,
                headers={"Accept": "application/json"},
            )
        return self.session

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _request(self, method, endpoint, data=None, params=None):
        url = f"{self.base_url}/rest/api/{self.api_version}/{endpoint}"
        session = self._get_session()

        try:
            async with session.request(
                method, url, json=data, params=params
            ) as response:
                if response.status >= 400:
                    error_body = await response.text()
                    logger.debug(
                        f"{method} {url} failed with {response.status}: {error_body}"
                    )
                    raise JiraAPIError(
                        f"HTTP Error: {response.status}, "
                        f"message='{response.reason}', url='{url}'",
                        status_code=response.status,
                        response=error_body,
                    )
                if response.status == 204:
                    return None
                body = await response.read()
                if not body:
                    return None
                return await response.json(content_type=None)
        except aiohttp.ClientResponseError as e:
            raise JiraAPIError(
                f"HTTP Error: {e.status}, message='{e.message}', url='{url}'",
                status_code=e.status,
            ) from e
        except aiohttp.ClientError as e:
            raise JiraConnectionError(f"Request to {url} failed: {e}") from e

    async def get_issue(self, issue_key, fields=None):
        params = {"fields": ",".join(fields or ISSUE_FIELDS)}
        return await self._request("GET", f"issue/{issue_key}", params=params)

    async def create_issue(self, fields):
        return await self._request("POST", "issue", data={"fields": fields})

    async def update_issue(self, issue_key, fields):
        return await self._request("PUT", f"issue/{issue_key}", data={"fields": fields})

    async def delete_issue(self, issue_key):
        return await self._request("DELETE", f"issue/{issue_key}")

    async def search_issues(self, jql, start_at=0, max_results=50, fields=None):
        params = {
            "jql": jql,
            "startAt": start_at,
            "maxResults": max_results,
            "fields": ",".join(fields or ISSUE_FIELDS),
        }
        return await self._request("GET", "search", params=params)

    async def get_transitions(self, issue_key):
        response = await self._request("GET", f"issue/{issue_key}/transitions")
        return (response or {}).get("transitions", [])

    async def do_transition(self, issue_key, transition_id):
        return await self._request(
            "POST",
            f"issue/{issue_key}/transitions",
            data={"transition": {"id": transition_id}},
        )

    async def get_projects(self):
        return await self._request("GET", "project")

    async def get_project(self, project_key):
        return await self._request("GET", f"project/{project_key}")

    async def get_myself(self):
        return await self._request("GET", "myself")

    async def search_users(self, query, max_results=20):
        return await self._request(
            "GET", "user/search", params={"query": query, "maxResults": max_results}
        )

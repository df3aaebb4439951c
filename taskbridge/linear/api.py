# taskbridge/linear/api.py

from typing import Any, Dict, List, Optional

import aiohttp
from gql import Client, gql
from gql.transport.aiohttp import AIOHTTPTransport
from gql.transport.exceptions import (
    TransportProtocolError,
    TransportQueryError,
    TransportServerError,
)

from ..logger import get_logger
from .exceptions import LinearAPIError, LinearConnectionError

logger = get_logger("linear.api")

LINEAR_API_URL = "https://api.linear.app/graphql"

USER_FIELDS = """
    id
    name
    displayName
    email
    avatarUrl
    active
    createdAt
    updatedAt
"""

PROJECT_FIELDS = """
    id
    name
    description
    slugId
    url
    state
    createdAt
    updatedAt
"""

ISSUE_FIELDS = f"""
    id
    identifier
    title
    description
    priority
    url
    dueDate
    createdAt
    updatedAt
    state {{ id name type color }}
    assignee {{ {USER_FIELDS} }}
    team {{ id name key }}
    project {{ id name }}
    labels {{ nodes {{ id name color }} }}
"""


def authorization_header(token: str) -> str:
    """Personal API keys are sent as-is; OAuth access tokens need Bearer."""
    if token.startswith("lin_api_") or token.lower().startswith("bearer "):
        return token
    return f"Bearer {token}"


class LinearAPI:
    """
    Thin async wrapper around the Linear GraphQL API.

    Each query opens its own connection through gql's aiohttp transport,
    so one instance can be shared by concurrent tasks. GraphQL and HTTP
    failures raise LinearAPIError; unreachable hosts raise
    LinearConnectionError. Nothing is retried here.
    """

    def __init__(self, token: str, url: str = LINEAR_API_URL, timeout: float = 30.0):
        self.url = url
        self.token = token
        self.timeout = timeout

    def _client(self) -> Client:
        transport = AIOHTTPTransport(
            url=self.url,
            headers={"Authorization": authorization_header(self.token)},
            client_session_args={
                "timeout": aiohttp.ClientTimeout(total=self.timeout)
            },
        )
        return Client(transport=transport, fetch_schema_from_transport=False)

    async def close(self):
        """Connections are per query; nothing is held between calls."""

    async def execute_query(
        self, query: str, variables: Optional[Dict] = None
    ) -> Dict:
        try:
            return await self._client().execute_async(
                gql(query), variable_values=variables
            )
        except TransportQueryError as e:
            logger.error(f"API request failed: {str(e)}")
            raise LinearAPIError(
                f"API request failed: {str(e)}", errors=e.errors
            ) from e
        except TransportServerError as e:
            logger.error(f"API request failed: {str(e)}")
            raise LinearAPIError(
                f"API request failed: {str(e)}", status_code=e.code
            ) from e
        except TransportProtocolError as e:
            logger.error(f"API request failed: {str(e)}")
            raise LinearAPIError(f"API request failed: {str(e)}") from e
        except aiohttp.ClientResponseError as e:
            logger.error(f"API request failed: {str(e)}")
            raise LinearAPIError(
                f"API request failed: {str(e)}", status_code=e.status
            ) from e
        except aiohttp.ClientError as e:
            logger.error(f"Could not reach Linear: {str(e)}")
            raise LinearConnectionError(f"Could not reach Linear: {str(e)}") from e

    # Issues

    async def get_issue(self, issue_id: str) -> Dict:
        query = f"""
        query GetIssue($id: String!) {{
          issue(id: $id) {{ {ISSUE_FIELDS} }}
        }}
        """
        result = await self.execute_query(query, {"id": issue_id})
        return result["issue"]

    async def create_issue(self, data: Dict[str, Any]) -> Dict:
        query = f"""
        mutation CreateIssue($input: IssueCreateInput!) {{
          issueCreate(input: $input) {{
            success
            issue {{ {ISSUE_FIELDS} }}
          }}
        }}
        """
        result = await self.execute_query(query, {"input": data})
        return result["issueCreate"]

    async def update_issue(self, issue_id: str, data: Dict[str, Any]) -> Dict:
        query = f"""
        mutation UpdateIssue($id: String!, $input: IssueUpdateInput!) {{
          issueUpdate(id: $id, input: $input) {{
            success
            issue {{ {ISSUE_FIELDS} }}
          }}
        }}
        """
        result = await self.execute_query(query, {"id": issue_id, "input": data})
        return result["issueUpdate"]

    async def delete_issue(self, issue_id: str) -> Dict:
        query = """
        mutation DeleteIssue($id: String!) {
          issueDelete(id: $id) {
            success
          }
        }
        """
        result = await self.execute_query(query, {"id": issue_id})
        return result["issueDelete"]

    async def list_issues(
        self, filter: Dict[str, Any], first: int = 50, after: Optional[str] = None
    ) -> Dict:
        query = f"""
        query ListIssues($first: Int!, $after: String, $filter: IssueFilter) {{
          issues(first: $first, after: $after, filter: $filter) {{
            nodes {{ {ISSUE_FIELDS} }}
            pageInfo {{ hasNextPage endCursor }}
          }}
        }}
        """
        variables = {"first": first, "after": after, "filter": filter}
        result = await self.execute_query(query, variables)
        return result["issues"]

    # Teams

    async def get_workflow_states(self, team_id: str) -> List[Dict]:
        query = """
        query GetWorkflowStates($teamId: String!) {
          team(id: $teamId) {
            states {
              nodes {
                id
                name
                type
                position
              }
            }
          }
        }
        """
        result = await self.execute_query(query, {"teamId": team_id})
        return result["team"]["states"]["nodes"]

    async def get_team_labels(self, team_id: str) -> List[Dict]:
        query = """
        query GetTeamLabels($teamId: String!) {
          team(id: $teamId) {
            labels(first: 250) {
              nodes {
                id
                name
              }
            }
          }
        }
        """
        result = await self.execute_query(query, {"teamId": team_id})
        return result["team"]["labels"]["nodes"]

    # Projects

    async def list_projects(self, first: int = 100) -> List[Dict]:
        query = f"""
        query ListProjects($first: Int!) {{
          projects(first: $first) {{
            nodes {{ {PROJECT_FIELDS} }}
          }}
        }}
        """
        result = await self.execute_query(query, {"first": first})
        return result["projects"]["nodes"]

    async def get_project(self, project_id: str) -> Dict:
        query = f"""
        query GetProject($id: String!) {{
          project(id: $id) {{ {PROJECT_FIELDS} }}
        }}
        """
        result = await self.execute_query(query, {"id": project_id})
        return result["project"]

    # Users

    async def get_viewer(self) -> Dict:
        query = f"""
        query Viewer {{
          viewer {{ {USER_FIELDS} }}
        }}
        """
        result = await self.execute_query(query)
        return result["viewer"]

    async def search_users(self, name: str, first: int = 20) -> List[Dict]:
        query = f"""
        query SearchUsers($first: Int!, $filter: UserFilter) {{
          users(first: $first, filter: $filter) {{
            nodes {{ {USER_FIELDS} }}
          }}
        }}
        """
        variables = {
            "first": first,
            "filter": {"name": {"containsIgnoreCase": name}},
        }
        result = await self.execute_query(query, variables)
        return result["users"]["nodes"]

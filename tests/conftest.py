# tests/conftest.py

import copy
from unittest.mock import AsyncMock

import pytest

JIRA_ISSUE = {
    "id": "10001",
    "key": "TEST-1",
    "self": "https://example.atlassian.net/rest/api/2/issue/10001",
    "fields": {
        "summary": "Fix login redirect",
        "description": "Users land on a blank page after login.",
        "status": {"name": "In Progress", "statusCategory": {"key": "indeterminate"}},
        "priority": {"name": "High"},
        "assignee": {
            "accountId": "5b10a2844c20165700ede21g",
            "displayName": "Ada Lovelace",
            "emailAddress": "ada@example.com",
            "active": True,
            "self": "https://example.atlassian.net/rest/api/2/user?accountId=5b10",
        },
        "project": {"id": "10000", "key": "TEST", "name": "Test"},
        "issuetype": {"name": "Bug"},
        "labels": ["bug", "backend"],
        "created": "2024-01-02T10:00:00.000+0000",
        "updated": "2024-01-03T11:30:00.000+0000",
        "duedate": "2024-02-01",
    },
}

LINEAR_ISSUE = {
    "id": "9cfb482a-81e3-4154-b5b9-2c805e70a02d",
    "identifier": "ENG-123",
    "title": "Crash on startup",
    "description": "Stack trace attached.",
    "priority": 2,
    "url": "https://linear.app/acme/issue/ENG-123",
    "dueDate": None,
    "createdAt": "2024-03-01T09:00:00.000Z",
    "updatedAt": "2024-03-02T09:00:00.000Z",
    "state": {
        "id": "state-started",
        "name": "In Progress",
        "type": "started",
        "color": "#f2c94c",
    },
    "assignee": {
        "id": "user-1",
        "name": "Grace Hopper",
        "displayName": "grace",
        "email": "grace@example.com",
        "active": True,
    },
    "team": {"id": "team-1", "name": "Engineering", "key": "ENG"},
    "project": {"id": "project-1", "name": "Platform"},
    "labels": {"nodes": [{"id": "label-bug", "name": "bug", "color": "#eb5757"}]},
}

WORKFLOW_STATES = [
    {"id": "state-backlog", "name": "Backlog", "type": "backlog", "position": 0},
    {"id": "state-todo", "name": "Todo", "type": "unstarted", "position": 1},
    {"id": "state-started", "name": "In Progress", "type": "started", "position": 2},
    {"id": "state-review", "name": "In Review", "type": "started", "position": 3},
    {"id": "state-done", "name": "Done", "type": "completed", "position": 4},
    {"id": "state-canceled", "name": "Canceled", "type": "canceled", "position": 5},
]


@pytest.fixture
def jira_issue():
    return copy.deepcopy(JIRA_ISSUE)


@pytest.fixture
def linear_issue():
    return copy.deepcopy(LINEAR_ISSUE)


@pytest.fixture
def jira_api(jira_issue):
    """JiraAPI stand-in whose reads return the sample issue."""
    api = AsyncMock()
    api.get_issue.return_value = jira_issue
    api.create_issue.return_value = {"id": "10001", "key": "TEST-1"}
    api.update_issue.return_value = None
    api.get_transitions.return_value = [
        {"id": "11", "name": "Start", "to": {"name": "In Progress"}},
        {"id": "31", "name": "Finish", "to": {"name": "Done"}},
    ]
    api.search_issues.return_value = {"issues": [jira_issue], "total": 1}
    return api


@pytest.fixture
def linear_api(linear_issue):
    """LinearAPI stand-in whose reads return the sample issue."""
    api = AsyncMock()
    api.get_issue.return_value = linear_issue
    api.create_issue.return_value = {"success": True, "issue": linear_issue}
    api.update_issue.return_value = {"success": True, "issue": linear_issue}
    api.delete_issue.return_value = {"success": True}
    api.get_workflow_states.return_value = copy.deepcopy(WORKFLOW_STATES)
    api.get_team_labels.return_value = [
        {"id": "label-bug", "name": "bug"},
        {"id": "label-ui", "name": "UI"},
    ]
    api.list_issues.return_value = {
        "nodes": [linear_issue],
        "pageInfo": {"hasNextPage": False, "endCursor": None},
    }
    return api

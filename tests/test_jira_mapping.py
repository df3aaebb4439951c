# tests/test_jira_mapping.py

import pytest

from taskbridge.jira.mapping import (
    build_jql_query,
    map_priority,
    map_status_category,
    map_status_name,
    to_jira_priority,
    to_jira_status,
)
from taskbridge.models import Priority, TaskFilter, TaskStatus


class TestStatusMapping:
    @pytest.mark.parametrize(
        "category, status",
        [
            ("new", TaskStatus.OPEN),
            ("indeterminate", TaskStatus.IN_PROGRESS),
            ("done", TaskStatus.DONE),
            ("cancelled", TaskStatus.CANCELLED),
            ("NEW", TaskStatus.OPEN),
        ],
    )
    def test_categories(self, category, status):
        assert map_status_category(category) == status

    @pytest.mark.parametrize(
        "name, status",
        [
            ("To Do", TaskStatus.OPEN),
            ("IN PROGRESS", TaskStatus.IN_PROGRESS),
            ("in development", TaskStatus.IN_PROGRESS),
            ("Resolved", TaskStatus.DONE),
            ("Closed", TaskStatus.DONE),
            ("Rejected", TaskStatus.CANCELLED),
        ],
    )
    def test_names_are_case_insensitive(self, name, status):
        assert map_status_name(name) == status

    @pytest.mark.parametrize("value", ["Waiting for QA", "", None, "undefined"])
    def test_unknown_values_default_to_open(self, value):
        assert map_status_name(value) == TaskStatus.OPEN
        assert map_status_category(value) == TaskStatus.OPEN

    def test_reverse_names(self):
        assert to_jira_status(TaskStatus.OPEN) == "To Do"
        assert to_jira_status(TaskStatus.IN_PROGRESS) == "In Progress"
        assert to_jira_status(TaskStatus.DONE) == "Done"
        assert to_jira_status(TaskStatus.CANCELLED) == "Cancelled"

    def test_reverse_then_forward_is_identity(self):
        for status in TaskStatus:
            assert map_status_name(to_jira_status(status)) == status


class TestPriorityMapping:
    @pytest.mark.parametrize(
        "name, priority",
        [
            ("Highest", Priority.URGENT),
            ("critical", Priority.URGENT),
            ("BLOCKER", Priority.URGENT),
            ("High", Priority.HIGH),
            ("major", Priority.HIGH),
            ("Medium", Priority.MEDIUM),
            ("normal", Priority.MEDIUM),
            ("Low", Priority.LOW),
            ("minor", Priority.LOW),
            ("Trivial", Priority.LOW),
            ("lowest", Priority.LOW),
        ],
    )
    def test_names(self, name, priority):
        assert map_priority(name) == priority

    def test_unknown_defaults_to_medium(self):
        assert map_priority("P0") == Priority.MEDIUM
        assert map_priority(None) == Priority.MEDIUM

    def test_reverse(self):
        assert to_jira_priority(Priority.URGENT) == "Highest"
        assert to_jira_priority(Priority.HIGH) == "High"
        assert to_jira_priority(Priority.MEDIUM) == "Medium"
        assert to_jira_priority(Priority.LOW) == "Low"


class TestBuildJql:
    def test_full_filter(self):
        task_filter = TaskFilter(
            status=TaskStatus.OPEN,
            assignee="me",
            project_id="TEST",
            labels=["bug"],
            query="urgent",
        )
        assert build_jql_query(task_filter) == (
            'status = "To Do" AND assignee = currentUser() AND project = "TEST" '
            'AND (labels = "bug") AND text ~ "urgent" ORDER BY created DESC'
        )

    def test_empty_filter(self):
        assert build_jql_query(None) == "ORDER BY created DESC"
        assert build_jql_query(TaskFilter()) == "ORDER BY created DESC"
        paging_only = TaskFilter(limit=5, offset=10)
        assert build_jql_query(paging_only) == "ORDER BY created DESC"

    def test_multiple_labels_grouped(self):
        task_filter = TaskFilter(labels=["bug", "ui"])
        assert build_jql_query(task_filter) == (
            '(labels = "bug" AND labels = "ui") ORDER BY created DESC'
        )

    def test_named_assignee_is_quoted(self):
        task_filter = TaskFilter(assignee="ada@example.com")
        assert build_jql_query(task_filter) == (
            'assignee = "ada@example.com" ORDER BY created DESC'
        )

    def test_quotes_are_escaped(self):
        task_filter = TaskFilter(query='say "hi"')
        assert build_jql_query(task_filter) == (
            'text ~ "say \\"hi\\"" ORDER BY created DESC'
        )

# tests/test_linear_mapping.py

import pytest

from taskbridge.linear.mapping import (
    build_issue_filter,
    map_priority,
    map_state_type,
    to_linear_priority,
    to_linear_state_type,
)
from taskbridge.models import Priority, TaskFilter, TaskStatus


class TestStateMapping:
    @pytest.mark.parametrize(
        "state_type, status",
        [
            ("triage", TaskStatus.OPEN),
            ("backlog", TaskStatus.OPEN),
            ("unstarted", TaskStatus.OPEN),
            ("started", TaskStatus.IN_PROGRESS),
            ("completed", TaskStatus.DONE),
            ("canceled", TaskStatus.CANCELLED),
            ("cancelled", TaskStatus.CANCELLED),
            ("Started", TaskStatus.IN_PROGRESS),
        ],
    )
    def test_known_types(self, state_type, status):
        assert map_state_type(state_type) == status

    @pytest.mark.parametrize("state_type", ["paused", "", None])
    def test_unknown_defaults_to_open(self, state_type):
        assert map_state_type(state_type) == TaskStatus.OPEN

    def test_reverse(self):
        assert to_linear_state_type(TaskStatus.OPEN) == "unstarted"
        assert to_linear_state_type(TaskStatus.IN_PROGRESS) == "started"
        assert to_linear_state_type(TaskStatus.DONE) == "completed"
        assert to_linear_state_type(TaskStatus.CANCELLED) == "canceled"

    def test_reverse_then_forward_is_identity(self):
        for status in TaskStatus:
            assert map_state_type(to_linear_state_type(status)) == status


class TestPriorityMapping:
    def test_numbers(self):
        mapped = [map_priority(number) for number in range(5)]
        assert mapped == [
            Priority.MEDIUM,
            Priority.URGENT,
            Priority.HIGH,
            Priority.MEDIUM,
            Priority.LOW,
        ]

    @pytest.mark.parametrize("value", [5, -1, 2.5, None, "high"])
    def test_other_values_default_to_medium(self, value):
        assert map_priority(value) == Priority.MEDIUM

    def test_float_priorities(self):
        assert map_priority(1.0) == Priority.URGENT

    def test_reverse(self):
        assert to_linear_priority(Priority.URGENT) == 1
        assert to_linear_priority(Priority.HIGH) == 2
        assert to_linear_priority(Priority.MEDIUM) == 3
        assert to_linear_priority(Priority.LOW) == 4


class TestBuildIssueFilter:
    def test_empty(self):
        assert build_issue_filter(None) == {}
        assert build_issue_filter(TaskFilter()) == {}
        assert build_issue_filter(TaskFilter(limit=5, offset=10)) == {}

    def test_full_filter(self):
        task_filter = TaskFilter(
            status=TaskStatus.IN_PROGRESS,
            priority=Priority.HIGH,
            assignee="me",
            project_id="project-1",
            labels=["bug", "ui"],
            query="crash",
        )
        assert build_issue_filter(task_filter) == {
            "state": {"type": {"eq": "started"}},
            "priority": {"eq": 2},
            "assignee": {"isMe": {"eq": True}},
            "project": {"id": {"eq": "project-1"}},
            "and": [
                {"labels": {"some": {"name": {"eq": "bug"}}}},
                {"labels": {"some": {"name": {"eq": "ui"}}}},
            ],
            "or": [
                {"title": {"containsIgnoreCase": "crash"}},
                {"description": {"containsIgnoreCase": "crash"}},
            ],
        }

    def test_assignee_by_email_or_id(self):
        by_email = build_issue_filter(TaskFilter(assignee="ada@example.com"))
        assert by_email == {"assignee": {"email": {"eq": "ada@example.com"}}}
        by_id = build_issue_filter(TaskFilter(assignee="user-1"))
        assert by_id == {"assignee": {"id": {"eq": "user-1"}}}

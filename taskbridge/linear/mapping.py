# taskbridge/linear/mapping.py

from ..logger import get_logger
from ..models import Priority, TaskStatus

logger = get_logger("linear.mapping")

# Workflow state type -> canonical status
STATE_TYPE_MAP = {
    "triage": TaskStatus.OPEN,
    "backlog": TaskStatus.OPEN,
    "unstarted": TaskStatus.OPEN,
    "started": TaskStatus.IN_PROGRESS,
    "completed": TaskStatus.DONE,
    "canceled": TaskStatus.CANCELLED,
    "cancelled": TaskStatus.CANCELLED,
}

LINEAR_STATE_TYPES = {
    TaskStatus.OPEN: "unstarted",
    TaskStatus.IN_PROGRESS: "started",
    TaskStatus.DONE: "completed",
    TaskStatus.CANCELLED: "canceled",
}

# Linear priority: 0 = No priority, 1 = Urgent, 2 = High, 3 = Medium, 4 = Low
PRIORITY_MAP = {
    0: Priority.MEDIUM,
    1: Priority.URGENT,
    2: Priority.HIGH,
    3: Priority.MEDIUM,
    4: Priority.LOW,
}

LINEAR_PRIORITIES = {
    Priority.URGENT: 1,
    Priority.HIGH: 2,
    Priority.MEDIUM: 3,
    Priority.LOW: 4,
}


def map_state_type(state_type):
    """Map a workflow state type to a canonical status, defaulting to open."""
    status = STATE_TYPE_MAP.get((state_type or "").lower())
    if status is None:
        logger.debug(f"Unknown Linear state type '{state_type}', using open")
        return TaskStatus.OPEN
    return status


def to_linear_state_type(status):
    if not TaskStatus.is_valid(status):
        return LINEAR_STATE_TYPES[TaskStatus.OPEN]
    return LINEAR_STATE_TYPES[TaskStatus(status)]


def map_priority(priority):
    """Map Linear's numeric priority to a canonical priority."""
    try:
        number = float(priority)
    except (TypeError, ValueError):
        return Priority.MEDIUM
    if not number.is_integer():
        return Priority.MEDIUM
    return PRIORITY_MAP.get(int(number), Priority.MEDIUM)


def to_linear_priority(priority):
    if not Priority.is_valid(priority):
        return LINEAR_PRIORITIES[Priority.MEDIUM]
    return LINEAR_PRIORITIES[Priority(priority)]


def build_issue_filter(task_filter=None):
    """
    Translate a TaskFilter into a Linear IssueFilter object.

    Predicates present on the filter are combined with AND semantics;
    an empty filter yields an empty object (no constraint).
    """
    issue_filter = {}
    if task_filter is None or task_filter.is_empty():
        return issue_filter

    if task_filter.status is not None:
        issue_filter["state"] = {
            "type": {"eq": to_linear_state_type(task_filter.status)}
        }

    if task_filter.priority is not None:
        issue_filter["priority"] = {"eq": to_linear_priority(task_filter.priority)}

    if task_filter.assignee:
        if task_filter.assignee == "me":
            issue_filter["assignee"] = {"isMe": {"eq": True}}
        elif "@" in task_filter.assignee:
            issue_filter["assignee"] = {"email": {"eq": task_filter.assignee}}
        else:
            issue_filter["assignee"] = {"id": {"eq": task_filter.assignee}}

    if task_filter.project_id:
        issue_filter["project"] = {"id": {"eq": task_filter.project_id}}

    if task_filter.labels:
        issue_filter["and"] = [
            {"labels": {"some": {"name": {"eq": label}}}}
            for label in task_filter.labels
        ]

    if task_filter.query:
        issue_filter["or"] = [
            {"title": {"containsIgnoreCase": task_filter.query}},
            {"description": {"containsIgnoreCase": task_filter.query}},
        ]

    return issue_filter

# taskbridge/jira/mapping.py

from ..logger import get_logger
from ..models import Priority, TaskStatus

logger = get_logger("jira.mapping")

# Status category keys as returned in fields.status.statusCategory.key
STATUS_CATEGORY_MAP = {
    "new": TaskStatus.OPEN,
    "to do": TaskStatus.OPEN,
    "todo": TaskStatus.OPEN,
    "indeterminate": TaskStatus.IN_PROGRESS,
    "in progress": TaskStatus.IN_PROGRESS,
    "done": TaskStatus.DONE,
    "complete": TaskStatus.DONE,
    "cancelled": TaskStatus.CANCELLED,
    "canceled": TaskStatus.CANCELLED,
}

# Free-text workflow status names
STATUS_NAME_MAP = {
    "to do": TaskStatus.OPEN,
    "open": TaskStatus.OPEN,
    "new": TaskStatus.OPEN,
    "created": TaskStatus.OPEN,
    "in progress": TaskStatus.IN_PROGRESS,
    "in development": TaskStatus.IN_PROGRESS,
    "doing": TaskStatus.IN_PROGRESS,
    "done": TaskStatus.DONE,
    "closed": TaskStatus.DONE,
    "resolved": TaskStatus.DONE,
    "completed": TaskStatus.DONE,
    "cancelled": TaskStatus.CANCELLED,
    "canceled": TaskStatus.CANCELLED,
    "rejected": TaskStatus.CANCELLED,
}

# Canonical status -> status name used in JQL and transition lookup
JIRA_STATUS_NAMES = {
    TaskStatus.OPEN: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.DONE: "Done",
    TaskStatus.CANCELLED: "Cancelled",
}

PRIORITY_NAME_MAP = {
    "highest": Priority.URGENT,
    "critical": Priority.URGENT,
    "blocker": Priority.URGENT,
    "high": Priority.HIGH,
    "major": Priority.HIGH,
    "medium": Priority.MEDIUM,
    "normal": Priority.MEDIUM,
    "low": Priority.LOW,
    "minor": Priority.LOW,
    "trivial": Priority.LOW,
    "lowest": Priority.LOW,
}

JIRA_PRIORITY_NAMES = {
    Priority.URGENT: "Highest",
    Priority.HIGH: "High",
    Priority.MEDIUM: "Medium",
    Priority.LOW: "Low",
}

JQL_ORDER_BY = "ORDER BY created DESC"


def _normalize(value):
    return (value or "").strip().lower()


def map_status_category(category_key):
    """Map a status category key to a canonical status, defaulting to open."""
    status = STATUS_CATEGORY_MAP.get(_normalize(category_key))
    if status is None:
        logger.debug(f"Unknown Jira status category '{category_key}', using open")
        return TaskStatus.OPEN
    return status


def map_status_name(status_name):
    """Map a workflow status name (case-insensitive) to a canonical status."""
    status = STATUS_NAME_MAP.get(_normalize(status_name))
    if status is None:
        logger.debug(f"Unknown Jira status '{status_name}', using open")
        return TaskStatus.OPEN
    return status


def to_jira_status(status):
    if not TaskStatus.is_valid(status):
        return JIRA_STATUS_NAMES[TaskStatus.OPEN]
    return JIRA_STATUS_NAMES[TaskStatus(status)]


def map_priority(priority_name):
    """Map a Jira priority name (case-insensitive) to a canonical priority."""
    priority = PRIORITY_NAME_MAP.get(_normalize(priority_name))
    if priority is None:
        logger.debug(f"Unknown Jira priority '{priority_name}', using medium")
        return Priority.MEDIUM
    return priority


def to_jira_priority(priority):
    if not Priority.is_valid(priority):
        return JIRA_PRIORITY_NAMES[Priority.MEDIUM]
    return JIRA_PRIORITY_NAMES[Priority(priority)]


def _quote(value):
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_jql_query(task_filter=None):
    """
    Translate a TaskFilter into JQL.

    Present predicates are AND-ed in a fixed order: status, assignee,
    project, labels (as a parenthesised AND group), free text. The result
    always ends with the creation-date sort.
    """
    if task_filter is None or task_filter.is_empty():
        return JQL_ORDER_BY

    conditions = []

    if task_filter.status is not None:
        conditions.append(f"status = {_quote(to_jira_status(task_filter.status))}")

    if task_filter.assignee:
        if task_filter.assignee == "me":
            conditions.append("assignee = currentUser()")
        else:
            conditions.append(f"assignee = {_quote(task_filter.assignee)}")

    if task_filter.project_id:
        conditions.append(f"project = {_quote(task_filter.project_id)}")

    if task_filter.labels:
        label_conditions = [
            f"labels = {_quote(label)}" for label in task_filter.labels
        ]
        conditions.append("(" + " AND ".join(label_conditions) + ")")

    if task_filter.query:
        conditions.append(f"text ~ {_quote(task_filter.query)}")

    if not conditions:
        return JQL_ORDER_BY
    return " AND ".join(conditions) + " " + JQL_ORDER_BY

# taskbridge/jira/__init__.py

from .client import JiraClient
from .factory import JiraFactory, parse_config

__all__ = ["JiraClient", "JiraFactory", "parse_config"]

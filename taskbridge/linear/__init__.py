# taskbridge/linear/__init__.py

from .client import LinearClient
from .factory import LinearFactory, parse_config

__all__ = ["LinearClient", "LinearFactory", "parse_config"]

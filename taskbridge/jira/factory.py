# taskbridge/jira/factory.py

from dataclasses import dataclass
from typing import Optional

from ..platform import PlatformFactory
from ..utils import parse_timeout
from .client import JiraClient


@dataclass
class JiraConfig:
    base_url: str
    email: str
    token: str
    timeout: Optional[float] = None


def parse_config(config):
    """
    Validate the flat config mapping for Jira.

    :param config: mapping with base_url, email, token and optional timeout
    :return: JiraConfig
    :raises ValueError: describing the first problem found
    """
    base_url = config.get("base_url")
    if not isinstance(base_url, str):
        raise ValueError("base_url is required and must be a string")
    email = config.get("email")
    if not isinstance(email, str):
        raise ValueError("email is required and must be a string")
    token = config.get("token")
    if not isinstance(token, str):
        raise ValueError("token is required and must be a string")

    base_url = base_url.strip().rstrip("/")
    if not base_url:
        raise ValueError("base_url cannot be empty")
    if not email:
        raise ValueError("email cannot be empty")
    if not token:
        raise ValueError("token cannot be empty")

    if not base_url.startswith(("http://", "https://")):
        raise ValueError("base_url must start with http:// or https://")

    return JiraConfig(
        base_url=base_url,
        email=email,
        token=token,
        timeout=parse_timeout(config),
    )


class JiraFactory(PlatformFactory):
    @property
    def type(self):
        return "jira"

    @property
    def name(self):
        return "Jira"

    def validate_config(self, config):
        parse_config(config)

    def create(self, config):
        cfg = parse_config(config)
        return JiraClient(cfg.base_url, cfg.email, cfg.token, timeout=cfg.timeout)

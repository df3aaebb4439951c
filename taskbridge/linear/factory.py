# taskbridge/linear/factory.py

from dataclasses import dataclass
from typing import Optional

from ..platform import PlatformFactory
from ..utils import parse_timeout
from .api import LINEAR_API_URL
from .client import LinearClient


@dataclass
class LinearConfig:
    token: str
    base_url: str = LINEAR_API_URL
    team_id: Optional[str] = None
    timeout: Optional[float] = None


def parse_config(config):
    """
    Validate the flat config mapping for Linear.

    :param config: mapping with token and optional base_url, team_id, timeout
    :return: LinearConfig
    :raises ValueError: describing the first problem found
    """
    token = config.get("token")
    if not isinstance(token, str):
        raise ValueError("token is required and must be a string")
    token = token.strip()
    if not token:
        raise ValueError("token cannot be empty")

    base_url = config.get("base_url") or LINEAR_API_URL
    if not isinstance(base_url, str):
        raise ValueError("base_url must be a string")
    if not base_url.startswith(("http://", "https://")):
        raise ValueError("base_url must start with http:// or https://")

    team_id = config.get("team_id")
    if team_id is not None and not isinstance(team_id, str):
        raise ValueError("team_id must be a string")

    return LinearConfig(
        token=token,
        base_url=base_url,
        team_id=team_id or None,
        timeout=parse_timeout(config),
    )


class LinearFactory(PlatformFactory):
    @property
    def type(self):
        return "linear"

    @property
    def name(self):
        return "Linear"

    def validate_config(self, config):
        parse_config(config)

    def create(self, config):
        cfg = parse_config(config)
        return LinearClient(
            cfg.token, base_url=cfg.base_url, team_id=cfg.team_id, timeout=cfg.timeout
        )

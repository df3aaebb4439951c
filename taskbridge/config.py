# taskbridge/config.py

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    # Jira Configuration
    JIRA_URL = os.getenv("JIRA_URL")
    JIRA_EMAIL = os.getenv("JIRA_EMAIL")
    JIRA_API_TOKEN = os.getenv("JIRA_API_TOKEN")

    # Linear Configuration
    LINEAR_API_KEY = os.getenv("LINEAR_API_KEY")
    LINEAR_API_URL = os.getenv("LINEAR_API_URL", "https://api.linear.app/graphql")
    LINEAR_TEAM_ID = os.getenv("LINEAR_TEAM_ID")

    # Transport Settings
    REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", 30))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE")

    # Page sizes used when a filter carries no limit
    DEFAULT_PAGE_SIZE = 50

    @classmethod
    def platform_config(cls, platform_type):
        """
        Build the flat config mapping a platform factory expects.

        :param platform_type: Registry key, e.g. "jira" or "linear"
        :return: dict of credentials and settings; unset values are omitted
        """
        if platform_type == "jira":
            config = {
                "base_url": cls.JIRA_URL,
                "email": cls.JIRA_EMAIL,
                "token": cls.JIRA_API_TOKEN,
            }
        elif platform_type == "linear":
            config = {
                "token": cls.LINEAR_API_KEY,
                "base_url": cls.LINEAR_API_URL,
                "team_id": cls.LINEAR_TEAM_ID,
            }
        else:
            config = {}

        config = {key: value for key, value in config.items() if value}
        if config:
            config["timeout"] = cls.REQUEST_TIMEOUT
        return config

    @classmethod
    def configured_platforms(cls):
        platforms = []
        if cls.JIRA_URL and cls.JIRA_API_TOKEN:
            platforms.append("jira")
        if cls.LINEAR_API_KEY:
            platforms.append("linear")
        return platforms

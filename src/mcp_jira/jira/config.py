"""Configuration module for Jira API interactions."""

import os
from dataclasses import dataclass
from typing import Literal

from ..models.jira.issue import DEFAULT_EPIC_LINK_FIELD, DEFAULT_STORY_POINTS_FIELD
from ..utils import getenv_first, is_atlassian_cloud_url, is_env_ssl_verify
from .constants import DEFAULT_ISSUE_FIELDS


@dataclass
class JiraConfig:
    """Jira API configuration.

    Handles authentication for both Jira Cloud (using username/API token)
    and Jira Server/Data Center (using personal access token), and names the
    custom fields the issue normalizer reads story points and epic links from.
    """

    url: str  # Base URL for Jira
    auth_type: Literal["basic", "token"]  # Authentication type
    username: str | None = None  # Email or username (Cloud)
    api_token: str | None = None  # API token (Cloud)
    personal_token: str | None = None  # Personal access token (Server/DC)
    ssl_verify: bool = True  # Whether to verify SSL certificates
    story_points_field: str = DEFAULT_STORY_POINTS_FIELD
    epic_link_field: str = DEFAULT_EPIC_LINK_FIELD
    timeout: float | None = None  # Seconds; None disables client timeouts

    @classmethod
    def from_env(cls) -> "JiraConfig":
        """Create configuration from environment variables.

        Returns:
            JiraConfig with values from environment variables

        Raises:
            ValueError: If required environment variables are missing or invalid
        """
        url = getenv_first("JIRA_URL", "JIRA_BASE_URL")
        if not url:
            raise ValueError("Missing required JIRA_URL environment variable")

        username = getenv_first("JIRA_USERNAME", "JIRA_USER_EMAIL")
        api_token = os.getenv("JIRA_API_TOKEN")
        personal_token = os.getenv("JIRA_PERSONAL_TOKEN")

        is_cloud = is_atlassian_cloud_url(url)

        match (is_cloud, bool(username and api_token), bool(personal_token)):
            case (True, True, _):
                auth_type = "basic"
            case (True, False, _):
                msg = "Cloud authentication requires JIRA_USERNAME and JIRA_API_TOKEN"
                raise ValueError(msg)
            case (False, _, True):
                auth_type = "token"
            case (False, True, False):
                auth_type = "basic"
            case _:
                msg = "Server/Data Center authentication requires JIRA_PERSONAL_TOKEN"
                raise ValueError(msg)

        timeout_env = os.getenv("JIRA_TIMEOUT")
        try:
            timeout = float(timeout_env) if timeout_env else None
        except ValueError as e:
            raise ValueError(f"JIRA_TIMEOUT must be a number, got {timeout_env!r}") from e

        return cls(
            url=url.rstrip("/"),
            auth_type=auth_type,
            username=username,
            api_token=api_token,
            personal_token=personal_token,
            ssl_verify=is_env_ssl_verify("JIRA_SSL_VERIFY"),
            story_points_field=os.getenv(
                "JIRA_STORY_POINTS_FIELD", DEFAULT_STORY_POINTS_FIELD
            ),
            epic_link_field=os.getenv("JIRA_EPIC_LINK_FIELD", DEFAULT_EPIC_LINK_FIELD),
            timeout=timeout,
        )

    @property
    def issue_fields(self) -> list[str]:
        """Field list requested when fetching issues for normalization."""
        return [*DEFAULT_ISSUE_FIELDS, self.epic_link_field, self.story_points_field]

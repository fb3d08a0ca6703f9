"""URL-related utility functions for MCP Jira."""

import re
from urllib.parse import urlparse


def is_atlassian_cloud_url(url: str | None) -> bool:
    """Determine if a URL belongs to Atlassian Cloud or Server/Data Center.

    Args:
        url: The URL to check

    Returns:
        True if the URL is for an Atlassian Cloud instance, False for Server/Data Center
    """
    if not url:
        return False

    hostname = urlparse(url).hostname or ""

    # Localhost and private addresses are always Server/Data Center
    if (
        hostname == "localhost"
        or re.match(r"^127\.", hostname)
        or re.match(r"^192\.168\.", hostname)
        or re.match(r"^10\.", hostname)
        or re.match(r"^172\.(1[6-9]|2[0-9]|3[0-1])\.", hostname)
    ):
        return False

    return (
        ".atlassian.net" in hostname
        or ".jira.com" in hostname
        or ".jira-dev.com" in hostname
        or "api.atlassian.com" in hostname
    )


def project_key_from_issue_key(issue_key: str) -> str:
    """Return the project part of an issue key ("ACI-11" -> "ACI")."""
    return issue_key.split("-")[0]

"""
Utility functions for the MCP Jira integration.
"""

from .env import getenv_first, is_env_ssl_verify, is_env_truthy, is_read_only_mode
from .urls import is_atlassian_cloud_url, project_key_from_issue_key

__all__ = [
    "getenv_first",
    "is_atlassian_cloud_url",
    "is_env_ssl_verify",
    "is_env_truthy",
    "is_read_only_mode",
    "project_key_from_issue_key",
]

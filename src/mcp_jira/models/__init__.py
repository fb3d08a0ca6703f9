"""
Pydantic models for Jira API payloads used by MCP Jira.
"""

from .base import ApiModel
from .jira import (
    JiraAttachment,
    JiraComment,
    JiraField,
    JiraIssue,
    JiraIssueReference,
    JiraMention,
    JiraSearchResult,
    JiraTransition,
)

__all__ = [
    "ApiModel",
    "JiraAttachment",
    "JiraComment",
    "JiraField",
    "JiraIssue",
    "JiraIssueReference",
    "JiraMention",
    "JiraSearchResult",
    "JiraTransition",
]

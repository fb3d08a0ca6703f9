"""
Jira data models for the MCP Jira integration.

This package provides Pydantic models for Jira API data structures,
organized by entity type.
"""

from .adf import extract_mentions, extract_text, text_to_adf
from .attachment import JiraAttachment
from .comment import JiraComment
from .field import JiraField
from .issue import JiraIssue, JiraIssueReference
from .mention import JiraMention, MentionIndex
from .search import JiraSearchResult
from .workflow import JiraTransition

__all__ = [
    "JiraAttachment",
    "JiraComment",
    "JiraField",
    "JiraIssue",
    "JiraIssueReference",
    "JiraMention",
    "JiraSearchResult",
    "JiraTransition",
    "MentionIndex",
    "extract_mentions",
    "extract_text",
    "text_to_adf",
]

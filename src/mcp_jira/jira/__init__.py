"""Jira API module for mcp_jira.

This module provides various Jira API client implementations.
"""

from .attachments import AttachmentsMixin
from .client import JiraClient
from .comments import CommentsMixin
from .config import JiraConfig
from .epics import EpicsMixin
from .fields import FieldsMixin
from .issues import IssuesMixin
from .search import SearchMixin
from .transitions import TransitionsMixin


class JiraFetcher(
    FieldsMixin,
    EpicsMixin,
    IssuesMixin,
    CommentsMixin,
    SearchMixin,
    TransitionsMixin,
    AttachmentsMixin,
):
    """
    The main Jira client class providing access to all Jira operations.

    This class inherits from multiple mixins that provide specific functionality:
    - FieldsMixin: Field listing, metadata and story points discovery
    - EpicsMixin: Epic children with their comments
    - IssuesMixin: Issue aggregate, create and update
    - CommentsMixin: Comment retrieval and creation
    - SearchMixin: JQL search
    - TransitionsMixin: Workflow transitions
    - AttachmentsMixin: File uploads

    The fetcher owns one HTTP client; use it as an async context manager or
    call ``aclose()`` when done.
    """

    pass


__all__ = ["JiraClient", "JiraConfig", "JiraFetcher"]

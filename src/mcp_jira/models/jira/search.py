"""
Jira search result models.
"""

import logging
from typing import Any

from pydantic import Field

from ..base import ApiModel
from .issue import JiraIssue

logger = logging.getLogger(__name__)


class JiraSearchResult(ApiModel):
    """
    Model representing the result of a JQL search.
    """

    total: int = 0
    issues: list[JiraIssue] = Field(default_factory=list)

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraSearchResult":
        """
        Create a JiraSearchResult from a Jira API response.

        Args:
            data: The search result data from the Jira API
            **kwargs: Forwarded to ``JiraIssue.from_api_response``

        Returns:
            A JiraSearchResult instance
        """
        if not data or not isinstance(data, dict):
            return cls()

        issues = [
            JiraIssue.from_api_response(issue, **kwargs)
            for issue in data.get("issues") or []
            if isinstance(issue, dict)
        ]
        total = data.get("total")
        if not isinstance(total, int):
            total = len(issues)

        return cls(total=total, issues=issues)

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        return {
            "total": self.total,
            "issues": [issue.to_simplified_dict() for issue in self.issues],
        }

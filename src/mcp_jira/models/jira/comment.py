"""
Jira comment models.

This module provides Pydantic models for Jira comments.
"""

import logging
from typing import Any

from pydantic import Field

from ..base import ApiModel
from ..constants import EMPTY_STRING, JIRA_DEFAULT_ID
from .adf import extract_mentions, extract_text
from .mention import JiraMention

logger = logging.getLogger(__name__)


class JiraComment(ApiModel):
    """
    Model representing a Jira issue comment, with its body flattened to text.
    """

    id: str = JIRA_DEFAULT_ID
    body: str = EMPTY_STRING
    author: str | None = None
    created: str = EMPTY_STRING
    updated: str = EMPTY_STRING
    mentions: list[JiraMention] = Field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "JiraComment":
        """
        Create a JiraComment from a Jira API response.

        Args:
            data: The comment data from the Jira API

        Returns:
            A JiraComment instance
        """
        if not data or not isinstance(data, dict):
            logger.debug("Received empty or non-dictionary comment data")
            return cls()

        comment_id = str(data.get("id", JIRA_DEFAULT_ID))

        body = data.get("body")
        content = body.get("content") if isinstance(body, dict) else None

        author_data = data.get("author")
        author = author_data.get("displayName") if isinstance(author_data, dict) else None

        return cls(
            id=comment_id,
            body=extract_text(content) if content else EMPTY_STRING,
            author=author,
            created=str(data.get("created") or EMPTY_STRING),
            updated=str(data.get("updated") or EMPTY_STRING),
            mentions=(
                extract_mentions(content, "comment", comment_id) if content else []
            ),
        )

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        result: dict[str, Any] = {
            "id": self.id,
            "body": self.body,
        }

        if self.author is not None:
            result["author"] = self.author

        result["created"] = self.created
        result["updated"] = self.updated
        result["mentions"] = [mention.to_simplified_dict() for mention in self.mentions]

        return result

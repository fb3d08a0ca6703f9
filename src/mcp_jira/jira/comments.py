"""Module for Jira comment operations."""

import logging

from ..models.jira import JiraComment, text_to_adf
from .client import JiraClient

logger = logging.getLogger("mcp-jira.comments")


class CommentsMixin(JiraClient):
    """Mixin for Jira comment operations."""

    async def get_issue_comments(self, issue_key: str) -> list[JiraComment]:
        """
        Get the comments of an issue, normalized.

        Args:
            issue_key: The issue key (e.g. 'PROJ-123')

        Returns:
            Comments in the order Jira returns them

        Raises:
            JiraApiError: If the comments cannot be fetched
        """
        data = await self.get(f"issue/{issue_key}/comment")
        raw_comments = data.get("comments") if isinstance(data, dict) else None
        if not isinstance(raw_comments, list):
            logger.debug(f"No comment list in response for {issue_key}")
            return []
        return [
            JiraComment.from_api_response(comment)
            for comment in raw_comments
            if isinstance(comment, dict)
        ]

    async def add_comment(self, issue_key: str, comment: str) -> JiraComment:
        """
        Add a plain-text comment to an issue.

        Args:
            issue_key: The issue key (e.g. 'PROJ-123')
            comment: Comment text, sent as a one-paragraph ADF document

        Returns:
            The created comment, normalized
        """
        result = await self.post(
            f"issue/{issue_key}/comment", {"body": text_to_adf(comment)}
        )
        logger.info(f"Added comment to {issue_key}")
        return JiraComment.from_api_response(result or {})

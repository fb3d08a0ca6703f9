"""Attachment operations for Jira API."""

import logging

from ..models.jira import JiraAttachment
from .client import JiraClient

logger = logging.getLogger("mcp-jira.attachments")


class AttachmentsMixin(JiraClient):
    """Mixin for Jira attachment operations."""

    async def add_attachment(
        self, issue_key: str, content: bytes, filename: str
    ) -> JiraAttachment:
        """
        Upload a file to an issue.

        Args:
            issue_key: The issue key (e.g. 'PROJ-123')
            content: Raw file content
            filename: Name the attachment gets in Jira

        Returns:
            The created attachment

        Raises:
            ValueError: If Jira reports no created attachment
        """
        result = await self.post(
            f"issue/{issue_key}/attachments",
            files={"file": (filename, content)},
            headers={"X-Atlassian-Token": "no-check"},
        )
        if not isinstance(result, list) or not result:
            raise ValueError(f"No attachment returned when uploading {filename}")

        attachment = JiraAttachment.from_api_response(result[0])
        logger.info(f"Attached {attachment.filename} to {issue_key}")
        return attachment

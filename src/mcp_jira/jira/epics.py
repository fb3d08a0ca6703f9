"""Module for Jira epic operations."""

import asyncio
import logging

from ..logging_config import log_operation
from ..models.jira import JiraIssue
from .comments import CommentsMixin
from .constants import EPIC_CHILDREN_MAX_RESULTS
from .search import SearchMixin

logger = logging.getLogger("mcp-jira.epics")


class EpicsMixin(CommentsMixin, SearchMixin):
    """Mixin for Jira epic operations."""

    async def get_epic_children(self, epic_key: str) -> list[JiraIssue]:
        """
        Get all issues linked to an epic, each with its comments merged in.

        The comments of every child are fetched concurrently; the first failing
        fetch fails the whole call.

        Args:
            epic_key: The key of the epic (e.g. 'PROJ-123')

        Returns:
            The epic's children in search order

        Raises:
            JiraApiError: If the search or any comment fetch fails
        """
        with log_operation(logger, "get_epic_children", epic_key=epic_key):
            data = await self._search_raw(
                f'"Epic Link" = {epic_key}', EPIC_CHILDREN_MAX_RESULTS
            )
            children = [
                self._issue_from_payload(raw)
                for raw in data.get("issues") or []
                if isinstance(raw, dict)
            ]
            logger.debug(f"Found {len(children)} children for epic {epic_key}")

            comment_lists = await asyncio.gather(
                *(self.get_issue_comments(child.key) for child in children)
            )
            for child, comments in zip(children, comment_lists, strict=True):
                child.attach_comments(comments)
            return children

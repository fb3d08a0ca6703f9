"""Module for Jira search operations."""

import logging
from typing import Any

from ..models.jira import JiraSearchResult
from .client import JiraClient
from .constants import SEARCH_MAX_RESULTS

logger = logging.getLogger("mcp-jira.search")


class SearchMixin(JiraClient):
    """Mixin for Jira search operations."""

    async def _search_raw(self, jql: str, max_results: int) -> dict[str, Any]:
        """Run a JQL search requesting the fields the issue normalizer reads."""
        params: dict[str, Any] = {"jql": jql, "maxResults": max_results}
        params.update(self._issue_params())
        data = await self.get("search", params=params)
        if not isinstance(data, dict):
            msg = f"Unexpected return value type from search: {type(data)}"
            logger.error(msg)
            raise TypeError(msg)
        return data

    async def search_issues(
        self, jql: str, max_results: int = SEARCH_MAX_RESULTS
    ) -> JiraSearchResult:
        """
        Search for issues using JQL (Jira Query Language).

        Args:
            jql: JQL query string
            max_results: Maximum number of issues to return

        Returns:
            JiraSearchResult with the normalized issues (without comments)

        Raises:
            JiraApiError: If the search request fails
        """
        data = await self._search_raw(jql, max_results)
        result = JiraSearchResult.from_api_response(
            data,
            story_points_field=self.config.story_points_field,
            epic_link_field=self.config.epic_link_field,
        )
        logger.debug(f"Search '{jql}' returned {len(result.issues)} issues")
        return result

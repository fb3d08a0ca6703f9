"""Module for Jira workflow transition operations."""

import logging
from typing import Any

from ..models.jira import JiraTransition, text_to_adf
from .client import JiraClient

logger = logging.getLogger("mcp-jira.transitions")


class TransitionsMixin(JiraClient):
    """Mixin for Jira transition operations."""

    async def get_transitions(self, issue_key: str) -> list[JiraTransition]:
        """
        Get the transitions currently available on an issue.

        Args:
            issue_key: The issue key (e.g. 'PROJ-123')

        Returns:
            Available transitions
        """
        data = await self.get(f"issue/{issue_key}/transitions")
        transitions = data.get("transitions") if isinstance(data, dict) else None
        return [
            JiraTransition.from_api_response(t)
            for t in transitions or []
            if isinstance(t, dict)
        ]

    async def transition_issue(
        self, issue_key: str, transition_id: str, comment: str | None = None
    ) -> None:
        """
        Move an issue through a workflow transition.

        Args:
            issue_key: The issue key (e.g. 'PROJ-123')
            transition_id: Id of one of the issue's available transitions
            comment: Optional comment added as part of the transition
        """
        payload: dict[str, Any] = {"transition": {"id": str(transition_id)}}
        if comment:
            payload["update"] = {"comment": [{"add": {"body": text_to_adf(comment)}}]}

        await self.post(f"issue/{issue_key}/transitions", payload)
        logger.info(f"Transitioned {issue_key} with transition {transition_id}")

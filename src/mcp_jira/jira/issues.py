"""Module for Jira issue operations."""

import asyncio
import logging
from typing import Any

from ..exceptions import IssueNotFoundError, JiraApiError
from ..logging_config import log_operation
from ..models.jira import JiraIssue, text_to_adf
from .comments import CommentsMixin

logger = logging.getLogger("mcp-jira.issues")


class IssuesMixin(CommentsMixin):
    """Mixin for Jira issue operations."""

    async def get_issue(self, issue_key: str) -> JiraIssue:
        """
        Get one issue with its comments and every issue it references.

        The issue and its comments are fetched concurrently. Once both are in,
        the epic summary is looked up when the issue has an epic link; that
        lookup is best-effort and its failure only leaves the summary unset.

        Args:
            issue_key: The issue key (e.g. 'PROJ-123')

        Returns:
            The normalized issue, comments and comment mentions merged in

        Raises:
            IssueNotFoundError: If Jira answers 404 for the issue
            JiraApiError: If either fetch fails otherwise
        """
        with log_operation(logger, "get_issue", issue_key=issue_key):
            issue_result, comments_result = await asyncio.gather(
                self.get(f"issue/{issue_key}", params=self._issue_params()),
                self.get_issue_comments(issue_key),
                return_exceptions=True,
            )

            # The issue outcome decides first so a 404 always reads as not found
            if isinstance(issue_result, BaseException):
                if isinstance(issue_result, JiraApiError) and issue_result.is_not_found:
                    raise IssueNotFoundError(issue_key) from issue_result
                raise issue_result
            if isinstance(comments_result, BaseException):
                raise comments_result

            issue = self._issue_from_payload(issue_result)
            issue.attach_comments(comments_result)

            if issue.epic_link:
                issue.epic_link.summary = await self._fetch_epic_summary(
                    issue.epic_link.key
                )
            return issue

    async def _fetch_epic_summary(self, epic_key: str) -> str | None:
        """Look up an epic's summary, returning None if the lookup fails."""
        try:
            epic = await self.get(f"issue/{epic_key}", params={"fields": "summary"})
        except JiraApiError as e:
            logger.warning(f"Failed to fetch epic details for {epic_key}: {e}")
            return None

        fields = epic.get("fields") if isinstance(epic, dict) else None
        if not isinstance(fields, dict):
            return None
        return fields.get("summary")

    async def create_issue(
        self,
        project_key: str,
        issue_type: str,
        summary: str,
        description: str | None = None,
        fields: dict[str, Any] | None = None,
    ) -> dict[str, str]:
        """
        Create a new issue.

        Args:
            project_key: The key of the project
            issue_type: The issue type name (e.g. 'Task', 'Story', 'Bug')
            summary: The issue summary
            description: Plain-text description, converted to ADF
            fields: Extra fields merged over the generated ones

        Returns:
            The created issue's id and key
        """
        issue_fields: dict[str, Any] = {
            "project": {"key": project_key},
            "issuetype": {"name": issue_type},
            "summary": summary,
        }
        if description:
            issue_fields["description"] = text_to_adf(description)
        if fields:
            issue_fields.update(fields)

        result = await self.post("issue", {"fields": issue_fields})
        if not isinstance(result, dict):
            msg = f"Unexpected return value type from issue creation: {type(result)}"
            logger.error(msg)
            raise TypeError(msg)

        created = {"id": str(result.get("id", "")), "key": str(result.get("key", ""))}
        logger.info(f"Created issue {created['key']} in project {project_key}")
        return created

    async def update_issue(self, issue_key: str, fields: dict[str, Any]) -> None:
        """
        Update fields of an existing issue.

        Args:
            issue_key: The issue key (e.g. 'PROJ-123')
            fields: Field ids mapped to their new values
        """
        await self.put(f"issue/{issue_key}", {"fields": fields})
        logger.info(f"Updated issue {issue_key}: {', '.join(fields)}")

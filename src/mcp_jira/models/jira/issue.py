"""
Jira issue models.

This module provides the normalized issue model: ADF description flattened to
text, references to other issues collected from the description, issue links
and (after ``attach_comments``) comments, plus the hierarchy fields.
"""

import logging
from typing import Any

from pydantic import Field

from ..base import ApiModel
from ..constants import EMPTY_STRING, JIRA_DEFAULT_ID, JIRA_DEFAULT_KEY
from .adf import extract_mentions, extract_text
from .comment import JiraComment
from .mention import JiraMention

logger = logging.getLogger(__name__)

DEFAULT_STORY_POINTS_FIELD = "customfield_10016"
DEFAULT_EPIC_LINK_FIELD = "customfield_10014"


class JiraIssueReference(ApiModel):
    """
    Lightweight reference to a related issue (parent, epic, subtask).
    """

    id: str
    key: str
    summary: str | None = None

    @classmethod
    def from_api_response(
        cls, data: dict[str, Any], **kwargs: Any
    ) -> "JiraIssueReference":
        fields = data.get("fields") or {}
        return cls(
            id=str(data.get("id", JIRA_DEFAULT_ID)),
            key=str(data.get("key", JIRA_DEFAULT_KEY)),
            summary=fields.get("summary"),
        )


class JiraIssue(ApiModel):
    """
    Model representing a normalized Jira issue.

    Optional attributes stay ``None`` when the source payload did not carry
    them and are left out of ``to_simplified_dict``. ``story_points`` is the
    exception: it is emitted whenever the designated field was present in the
    payload, even with a null value.
    """

    id: str = JIRA_DEFAULT_ID
    key: str = JIRA_DEFAULT_KEY
    summary: str | None = None
    status: str | None = None
    created: str | None = None
    updated: str | None = None
    description: str = EMPTY_STRING
    related_issues: list[JiraMention] = Field(default_factory=list)
    story_points: Any = None
    parent: JiraIssueReference | None = None
    epic_link: JiraIssueReference | None = None
    children: list[JiraIssueReference] | None = None
    comments: list[JiraComment] | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "JiraIssue":
        """
        Create a JiraIssue from a Jira API response.

        Args:
            data: The issue data from the Jira API
            **kwargs: ``story_points_field`` and ``epic_link_field`` override the
                designated custom field ids

        Returns:
            A JiraIssue instance
        """
        if not data or not isinstance(data, dict):
            logger.debug("Received empty or non-dictionary issue data")
            return cls()

        story_points_field = kwargs.get("story_points_field") or DEFAULT_STORY_POINTS_FIELD
        epic_link_field = kwargs.get("epic_link_field") or DEFAULT_EPIC_LINK_FIELD

        fields = data.get("fields") or {}
        if not isinstance(fields, dict):
            fields = {}

        values: dict[str, Any] = {
            "id": str(data.get("id", JIRA_DEFAULT_ID)),
            "key": str(data.get("key", JIRA_DEFAULT_KEY)),
            "summary": fields.get("summary"),
            "created": fields.get("created"),
            "updated": fields.get("updated"),
        }

        status = fields.get("status")
        if isinstance(status, dict):
            values["status"] = status.get("name")

        description = fields.get("description")
        content = description.get("content") if isinstance(description, dict) else None

        related_issues: list[JiraMention] = []
        if content:
            values["description"] = extract_text(content)
            related_issues = extract_mentions(content, "description")

        # Pass through verbatim, null included
        if story_points_field in fields:
            values["story_points"] = fields[story_points_field]

        for link in fields.get("issuelinks") or []:
            mention = JiraMention.from_issue_link(link)
            if mention:
                related_issues.append(mention)
        values["related_issues"] = related_issues

        parent = fields.get("parent")
        if isinstance(parent, dict) and parent:
            values["parent"] = JiraIssueReference.from_api_response(parent)

        epic_key = fields.get(epic_link_field)
        if epic_key:
            values["epic_link"] = JiraIssueReference(
                id=str(epic_key), key=str(epic_key), summary=None
            )

        subtasks = fields.get("subtasks")
        if isinstance(subtasks, list) and subtasks:
            values["children"] = [
                JiraIssueReference.from_api_response(subtask)
                for subtask in subtasks
                if isinstance(subtask, dict)
            ]

        return cls(**values)

    def attach_comments(self, comments: list[JiraComment]) -> None:
        """
        Attach normalized comments and merge their mentions into the issue.

        Comment mentions are appended after the existing references in comment
        order. Nothing is deduplicated, so a key referenced in the description
        and again in a comment appears twice.
        """
        self.comments = list(comments)
        self.related_issues.extend(
            mention for comment in self.comments for mention in comment.mentions
        )

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        result: dict[str, Any] = {"id": self.id, "key": self.key}

        for name in ("summary", "status", "created", "updated"):
            value = getattr(self, name)
            if value is not None:
                result[name] = value

        result["description"] = self.description
        result["related_issues"] = [
            mention.to_simplified_dict() for mention in self.related_issues
        ]

        if "story_points" in self.model_fields_set:
            result["story_points"] = self.story_points

        if self.parent:
            result["parent"] = self.parent.to_simplified_dict()

        if self.epic_link:
            result["epic_link"] = self.epic_link.to_simplified_dict()

        if self.children is not None:
            result["children"] = [child.to_simplified_dict() for child in self.children]

        if self.comments is not None:
            result["comments"] = [comment.to_simplified_dict() for comment in self.comments]

        return result

"""
Jira issue reference models.

A mention is a cross-reference to another issue, found either in rich text
(``kind="mention"``) or in a structured issue link (``kind="link"``).
"""

from typing import Any, Literal

from ..base import ApiModel

MentionKind = Literal["mention", "link"]
MentionOrigin = Literal["description", "comment"]


class JiraMention(ApiModel):
    """
    Model representing a reference from one issue to another.
    """

    key: str
    kind: MentionKind = "mention"
    origin: MentionOrigin = "description"
    comment_id: str | None = None
    summary: str | None = None
    relationship: str | None = None

    @classmethod
    def from_issue_link(cls, link: dict[str, Any]) -> "JiraMention | None":
        """
        Create a link-kind mention from one entry of ``fields.issuelinks``.

        The inward side wins over the outward side for both the linked issue
        and the relationship verb.

        Args:
            link: A raw issue link object

        Returns:
            A JiraMention, or None when the link carries no linked issue key
        """
        if not isinstance(link, dict):
            return None

        linked_issue = link.get("inwardIssue") or link.get("outwardIssue") or {}
        key = linked_issue.get("key") if isinstance(linked_issue, dict) else None
        if not key:
            return None

        link_type = link.get("type") or {}
        relationship = link_type.get("inward") or link_type.get("outward")
        linked_fields = linked_issue.get("fields") or {}

        return cls(
            key=str(key),
            kind="link",
            origin="description",
            summary=linked_fields.get("summary"),
            relationship=relationship,
        )

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        result: dict[str, Any] = {
            "key": self.key,
            "kind": self.kind,
            "origin": self.origin,
        }
        if self.comment_id is not None:
            result["comment_id"] = self.comment_id
        if self.summary is not None:
            result["summary"] = self.summary
        if self.relationship is not None:
            result["relationship"] = self.relationship
        return result


class MentionIndex:
    """
    Ordered map of mentions keyed by issue key.

    Adding a key that is already present replaces the stored mention but keeps
    the key at its original position, so iteration yields keys in order of
    first appearance carrying the fields of their last appearance.
    """

    def __init__(self) -> None:
        self._mentions: dict[str, JiraMention] = {}

    def add(self, mention: JiraMention) -> None:
        self._mentions[mention.key] = mention

    def __contains__(self, key: object) -> bool:
        return key in self._mentions

    def __len__(self) -> int:
        return len(self._mentions)

    def values(self) -> list[JiraMention]:
        return list(self._mentions.values())

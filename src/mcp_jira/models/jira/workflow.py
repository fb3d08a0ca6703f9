"""
Jira workflow models.
"""

from typing import Any

from ..base import ApiModel


class JiraTransition(ApiModel):
    """
    Model representing a workflow transition available on an issue.
    """

    id: str
    name: str = ""
    to_status: str | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "JiraTransition":
        target = data.get("to")
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name") or ""),
            to_status=target.get("name") if isinstance(target, dict) else None,
        )

    def to_simplified_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"id": self.id, "name": self.name}
        if self.to_status is not None:
            result["to_status"] = self.to_status
        return result

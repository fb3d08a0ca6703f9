"""
Jira field models.
"""

from typing import Any

from ..base import ApiModel


class JiraField(ApiModel):
    """
    Model representing a Jira field definition from ``/rest/api/3/field``.

    Ids are stable within an instance, but the same semantic field can carry
    a different id (and name) on another instance or project.
    """

    id: str
    name: str = ""
    custom: bool = False
    field_schema: dict[str, Any] | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "JiraField":
        field_id = str(data.get("id", ""))
        return cls(
            id=field_id,
            name=str(data.get("name") or ""),
            custom=bool(data.get("custom", field_id.startswith("customfield_"))),
            field_schema=data.get("schema"),
        )

    def to_simplified_dict(self) -> dict[str, Any]:
        """Convert to simplified dictionary for API response."""
        result: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "custom": self.custom,
        }
        if self.field_schema is not None:
            result["schema"] = self.field_schema
        return result

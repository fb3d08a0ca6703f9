"""
Jira attachment models.
"""

from typing import Any

from ..base import ApiModel


class JiraAttachment(ApiModel):
    """
    Model representing an uploaded Jira attachment.
    """

    id: str
    filename: str

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "JiraAttachment":
        return cls(id=str(data.get("id", "")), filename=str(data.get("filename", "")))

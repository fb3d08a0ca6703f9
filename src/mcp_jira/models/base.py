"""
Base models and shared behaviour for Jira API payloads.
"""

from typing import Any, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound="ApiModel")


class ApiModel(BaseModel):
    """
    Base model for objects built from Jira API responses.

    Subclasses implement ``from_api_response`` to read a raw JSON payload and
    ``to_simplified_dict`` to produce the tool result shape.
    """

    @classmethod
    def from_api_response(cls: type[T], data: dict[str, Any], **kwargs: Any) -> T:
        raise NotImplementedError("Subclasses must implement from_api_response")

    def to_simplified_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)

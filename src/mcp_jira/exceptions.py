from typing import Any

# Status code -> coarse category attached to API errors.
ERROR_CATEGORIES: dict[int, str] = {
    400: "VALIDATION_ERROR",
    401: "AUTHENTICATION_ERROR",
    403: "PERMISSION_ERROR",
    404: "NOT_FOUND_ERROR",
}


def categorize_status(status_code: int | None) -> str | None:
    """Map an HTTP status code to an error category, if one applies."""
    if status_code is None:
        return None
    if status_code >= 500:
        return "SERVER_ERROR"
    return ERROR_CATEGORIES.get(status_code)


class MCPJiraError(Exception):
    """Base exception for MCP-Jira errors."""

    pass


class JiraApiError(MCPJiraError):
    """Raised when a Jira REST call fails or returns a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        self.status_code = status_code
        self.category = categorize_status(status_code)
        self.details = details
        self.reason = message

        category = f" [{self.category}]" if self.category else ""
        reason = f": {message}" if message else ""
        status = f" (Status: {status_code})" if status_code is not None else ""
        super().__init__(f"Jira API Error{category}{reason}{status}")

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class MCPJiraAuthenticationError(JiraApiError):
    """Raised when Jira API authentication or authorization fails (401/403)."""

    pass


class IssueNotFoundError(MCPJiraError):
    """Raised when the requested issue does not exist or is not visible."""

    def __init__(self, issue_key: str) -> None:
        self.issue_key = issue_key
        super().__init__(f"Issue not found: {issue_key}")


class StoryPointsFieldNotFoundError(MCPJiraError):
    """Raised when no story points field can be resolved for a project."""

    def __init__(self, project_key: str) -> None:
        self.project_key = project_key
        super().__init__(
            f"Story points field not found for project {project_key}. "
            "Please check if story points are configured for this project "
            "and issue type."
        )

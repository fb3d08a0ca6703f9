import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

from fastmcp import Context
from fastmcp.exceptions import ToolError

from mcp_jira.exceptions import JiraApiError, MCPJiraError

logger = logging.getLogger("mcp-jira.utils.decorators")


F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

# Hint appended to API errors, keyed by error category.
ERROR_GUIDANCE: dict[str, str] = {
    "AUTHENTICATION_ERROR": (
        "Check JIRA_USERNAME and JIRA_API_TOKEN (or JIRA_PERSONAL_TOKEN); "
        "the credentials were rejected."
    ),
    "PERMISSION_ERROR": (
        "The account is authenticated but lacks permission for this project "
        "or operation."
    ),
    "NOT_FOUND_ERROR": (
        "The requested resource does not exist or is not visible to this account."
    ),
    "VALIDATION_ERROR": (
        "Jira rejected the request. Check field ids and values with "
        "get_fields, get_create_meta or get_edit_meta."
    ),
    "SERVER_ERROR": "Jira reported a server-side problem. Try again later.",
}
DEFAULT_GUIDANCE = "Check JIRA_URL and the network connection to Jira."


def format_api_error(error: JiraApiError) -> str:
    """Render an API error together with a hint on how to resolve it."""
    guidance = ERROR_GUIDANCE.get(error.category or "", DEFAULT_GUIDANCE)
    return f"{error}\n\n{guidance}"


def check_write_access(func: F) -> F:
    """
    Decorator for FastMCP tools to check if the application is in read-only mode.
    If in read-only mode, it raises a ToolError.
    Assumes the decorated function is async and has `ctx: Context` as its first argument.
    """

    @wraps(func)
    async def wrapper(ctx: Context, *args: Any, **kwargs: Any) -> Any:
        lifespan_ctx_dict = ctx.request_context.lifespan_context
        app_lifespan_ctx = (
            lifespan_ctx_dict.get("app_lifespan_context")
            if isinstance(lifespan_ctx_dict, dict)
            else None
        )

        if app_lifespan_ctx is not None and app_lifespan_ctx.read_only:
            tool_name = func.__name__
            action_description = tool_name.replace("_", " ")
            logger.warning(f"Attempted to call tool '{tool_name}' in read-only mode.")
            raise ToolError(f"Cannot {action_description} in read-only mode.")

        return await func(ctx, *args, **kwargs)

    return wrapper  # type: ignore


def handle_tool_errors(func: F) -> F:
    """
    Decorator that turns domain errors raised by a tool into ``ToolError``.

    API errors carry a hint matching their category; other domain errors and
    ``ValueError`` keep their own message. Anything else propagates untouched.
    """

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except ToolError:
            raise
        except JiraApiError as e:
            logger.error(f"Tool '{func.__name__}' failed: {e}")
            raise ToolError(format_api_error(e)) from e
        except (MCPJiraError, ValueError) as e:
            logger.warning(f"Tool '{func.__name__}' failed: {e}")
            raise ToolError(str(e)) from e

    return wrapper  # type: ignore

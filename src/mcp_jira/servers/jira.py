"""Jira FastMCP server instance and tool definitions."""

import base64
import binascii
import json
import logging
from typing import Annotated, Any

from fastmcp import Context, FastMCP
from pydantic import Field

from mcp_jira.jira.constants import DEFAULT_STORY_ISSUE_TYPE, SEARCH_MAX_RESULTS
from mcp_jira.servers.dependencies import get_jira_fetcher
from mcp_jira.utils.decorators import check_write_access, handle_tool_errors

logger = logging.getLogger("mcp-jira.servers.jira")

ISSUE_KEY_PATTERN = r"^[A-Z][A-Z0-9]+-\d+$"
PROJECT_KEY_PATTERN = r"^[A-Z][A-Z0-9]+$"

jira_mcp = FastMCP(
    name="Jira MCP Service",
    instructions=(
        "Provides tools for reading and updating Jira Cloud issues. Issue reads "
        "return the issue's comments and every issue it references."
    ),
)


def _dumps(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _parse_fields(fields: dict[str, Any] | str | None, name: str) -> dict[str, Any]:
    """Parse a fields argument given as a dict or a JSON object string.

    Raises:
        ValueError: If the input is not valid JSON or not a dict.
    """
    if fields is None:
        return {}
    if isinstance(fields, dict):
        return fields
    if isinstance(fields, str):
        try:
            parsed = json.loads(fields)
        except json.JSONDecodeError as e:
            raise ValueError(f"{name} is not valid JSON: {e}") from e
        if not isinstance(parsed, dict):
            raise ValueError(f"{name} must be a JSON object.")
        return parsed
    raise ValueError(f"{name} must be a dictionary or JSON string.")


@jira_mcp.tool(
    tags={"jira", "read"},
    annotations={"title": "Search Issues", "readOnlyHint": True},
)
@handle_tool_errors
async def search_issues(
    ctx: Context,
    jql: Annotated[
        str,
        Field(
            description=(
                "JQL query string (e.g. 'project = PROJ AND status = \"In Progress\"')"
            )
        ),
    ],
    max_results: Annotated[
        int,
        Field(description="Maximum number of issues to return", ge=1, le=100),
    ] = SEARCH_MAX_RESULTS,
) -> str:
    """Search Jira issues using JQL.

    Args:
        ctx: The FastMCP context.
        jql: JQL query string.
        max_results: Maximum number of results.

    Returns:
        JSON string with the total count and the normalized issues.
    """
    jira = await get_jira_fetcher(ctx)
    result = await jira.search_issues(jql, max_results=max_results)
    return _dumps(result.to_simplified_dict())


@jira_mcp.tool(
    tags={"jira", "read"},
    annotations={"title": "Get Epic Children", "readOnlyHint": True},
)
@handle_tool_errors
async def get_epic_children(
    ctx: Context,
    epic_key: Annotated[
        str,
        Field(description="The key of the epic (e.g. 'PROJ-123')"),
    ],
) -> str:
    """Get all issues linked to an epic, each with its comments and related issues.

    Args:
        ctx: The FastMCP context.
        epic_key: The epic key.

    Returns:
        JSON string with the epic key and its child issues.
    """
    jira = await get_jira_fetcher(ctx)
    children = await jira.get_epic_children(epic_key)
    return _dumps(
        {
            "epic_key": epic_key,
            "total": len(children),
            "issues": [child.to_simplified_dict() for child in children],
        }
    )


@jira_mcp.tool(
    tags={"jira", "read"},
    annotations={"title": "Get Issue", "readOnlyHint": True},
)
@handle_tool_errors
async def get_issue(
    ctx: Context,
    issue_key: Annotated[
        str,
        Field(description="Jira issue key or id (e.g. 'PROJ-123', '10001')"),
    ],
) -> str:
    """Get one issue with its comments, epic link and every issue it references.

    Args:
        ctx: The FastMCP context.
        issue_key: Jira issue key or id.

    Returns:
        JSON string representing the issue.
    """
    jira = await get_jira_fetcher(ctx)
    issue = await jira.get_issue(issue_key)
    return _dumps(issue.to_simplified_dict())


@jira_mcp.tool(
    tags={"jira", "write"},
    annotations={"title": "Create Issue", "destructiveHint": True},
)
@check_write_access
@handle_tool_errors
async def create_issue(
    ctx: Context,
    project_key: Annotated[
        str,
        Field(
            description="The project key where the issue is created (e.g. 'PROJ')",
            pattern=PROJECT_KEY_PATTERN,
        ),
    ],
    issue_type: Annotated[
        str,
        Field(description="Issue type name (e.g. 'Task', 'Story', 'Bug', 'Epic')"),
    ],
    summary: Annotated[str, Field(description="Summary (title) of the issue")],
    description: Annotated[
        str | None,
        Field(description="(Optional) Plain-text description of the issue"),
    ] = None,
    additional_fields: Annotated[
        dict[str, Any] | str | None,
        Field(
            description=(
                "(Optional) Extra fields as a JSON object, keyed by field id "
                "(e.g. '{\"priority\": {\"name\": \"High\"}}')"
            )
        ),
    ] = None,
) -> str:
    """Create a new Jira issue.

    Args:
        ctx: The FastMCP context.
        project_key: The project key.
        issue_type: The issue type name.
        summary: The issue summary.
        description: Plain-text description.
        additional_fields: Extra fields, merged over the generated ones.

    Returns:
        JSON string with the id and key of the created issue.
    """
    extra_fields = _parse_fields(additional_fields, "additional_fields")
    jira = await get_jira_fetcher(ctx)
    created = await jira.create_issue(
        project_key,
        issue_type,
        summary,
        description=description,
        fields=extra_fields or None,
    )
    return _dumps(created)


@jira_mcp.tool(
    tags={"jira", "write"},
    annotations={"title": "Update Issue", "destructiveHint": True},
)
@check_write_access
@handle_tool_errors
async def update_issue(
    ctx: Context,
    issue_key: Annotated[
        str,
        Field(description="Jira issue key (e.g. 'PROJ-123')"),
    ],
    fields: Annotated[
        dict[str, Any] | str,
        Field(
            description=(
                "Fields to update as a JSON object keyed by field id "
                "(e.g. '{\"summary\": \"New title\"}')"
            )
        ),
    ],
) -> str:
    """Update fields of an existing Jira issue.

    Args:
        ctx: The FastMCP context.
        issue_key: Jira issue key.
        fields: Field ids mapped to their new values.

    Returns:
        JSON string confirming the update.
    """
    update_fields = _parse_fields(fields, "fields")
    if not update_fields:
        raise ValueError("fields must contain at least one field to update.")
    jira = await get_jira_fetcher(ctx)
    await jira.update_issue(issue_key, update_fields)
    return _dumps(
        {
            "message": f"Issue {issue_key} updated successfully",
            "issue_key": issue_key,
            "updated_fields": list(update_fields),
        }
    )


@jira_mcp.tool(
    tags={"jira", "read"},
    annotations={"title": "Get Transitions", "readOnlyHint": True},
)
@handle_tool_errors
async def get_transitions(
    ctx: Context,
    issue_key: Annotated[
        str,
        Field(description="Jira issue key (e.g. 'PROJ-123')"),
    ],
) -> str:
    """Get the workflow transitions currently available on an issue.

    Args:
        ctx: The FastMCP context.
        issue_key: Jira issue key.

    Returns:
        JSON string representing a list of transitions.
    """
    jira = await get_jira_fetcher(ctx)
    transitions = await jira.get_transitions(issue_key)
    return _dumps([transition.to_simplified_dict() for transition in transitions])


@jira_mcp.tool(
    tags={"jira", "write"},
    annotations={"title": "Transition Issue", "destructiveHint": True},
)
@check_write_access
@handle_tool_errors
async def transition_issue(
    ctx: Context,
    issue_key: Annotated[
        str,
        Field(description="Jira issue key (e.g. 'PROJ-123')"),
    ],
    transition_id: Annotated[
        str,
        Field(description="Id of the transition to perform (see get_transitions)"),
    ],
    comment: Annotated[
        str | None,
        Field(description="(Optional) Comment to add with the transition"),
    ] = None,
) -> str:
    """Move an issue to another status by performing a workflow transition.

    Args:
        ctx: The FastMCP context.
        issue_key: Jira issue key.
        transition_id: The transition id.
        comment: Optional comment.

    Returns:
        JSON string confirming the transition.
    """
    jira = await get_jira_fetcher(ctx)
    await jira.transition_issue(issue_key, transition_id, comment=comment)
    suffix = " with comment" if comment else ""
    return _dumps(
        {
            "message": f"Issue {issue_key} transitioned successfully{suffix}",
            "issue_key": issue_key,
            "transition_id": transition_id,
        }
    )


@jira_mcp.tool(
    tags={"jira", "write"},
    annotations={"title": "Add Attachment", "destructiveHint": True},
)
@check_write_access
@handle_tool_errors
async def add_attachment(
    ctx: Context,
    issue_key: Annotated[
        str,
        Field(description="Jira issue key (e.g. 'PROJ-123')"),
    ],
    file_content: Annotated[
        str,
        Field(description="Base64 encoded content of the file"),
    ],
    filename: Annotated[
        str,
        Field(description="Name of the file to attach", min_length=1),
    ],
) -> str:
    """Attach a file to a Jira issue.

    Args:
        ctx: The FastMCP context.
        issue_key: Jira issue key.
        file_content: Base64 encoded file content.
        filename: Attachment file name.

    Returns:
        JSON string with the created attachment.
    """
    try:
        content = base64.b64decode(file_content, validate=True)
    except binascii.Error as e:
        raise ValueError(f"file_content is not valid base64: {e}") from e

    jira = await get_jira_fetcher(ctx)
    attachment = await jira.add_attachment(issue_key, content, filename)
    return _dumps(
        {
            "message": f"File {attachment.filename} attached successfully to issue {issue_key}",
            "attachment_id": attachment.id,
            "filename": attachment.filename,
        }
    )


@jira_mcp.tool(
    tags={"jira", "write"},
    annotations={"title": "Add Comment", "destructiveHint": True},
)
@check_write_access
@handle_tool_errors
async def add_comment(
    ctx: Context,
    issue_key: Annotated[
        str,
        Field(description="Jira issue key or id (e.g. 'PROJ-123')"),
    ],
    comment: Annotated[str, Field(description="Comment text (plain text)")],
) -> str:
    """Add a comment to a Jira issue.

    Args:
        ctx: The FastMCP context.
        issue_key: Jira issue key or id.
        comment: Comment text.

    Returns:
        JSON string representing the added comment.
    """
    jira = await get_jira_fetcher(ctx)
    created = await jira.add_comment(issue_key, comment)
    return _dumps(created.to_simplified_dict())


@jira_mcp.tool(
    tags={"jira", "read"},
    annotations={"title": "Get Fields", "readOnlyHint": True},
)
@handle_tool_errors
async def get_fields(ctx: Context) -> str:
    """Get all fields available in the Jira instance, custom fields included.

    Args:
        ctx: The FastMCP context.

    Returns:
        JSON string representing a list of field definitions.
    """
    jira = await get_jira_fetcher(ctx)
    fields = await jira.get_fields()
    return _dumps([field.to_simplified_dict() for field in fields])


@jira_mcp.tool(
    tags={"jira", "read"},
    annotations={"title": "Get Create Metadata", "readOnlyHint": True},
)
@handle_tool_errors
async def get_create_meta(
    ctx: Context,
    project_key: Annotated[
        str,
        Field(description="The project key (e.g. 'PROJ')", pattern=PROJECT_KEY_PATTERN),
    ],
    issue_type: Annotated[
        str | None,
        Field(description="(Optional) Restrict the metadata to this issue type"),
    ] = None,
) -> str:
    """Get the fields available when creating issues in a project.

    Args:
        ctx: The FastMCP context.
        project_key: The project key.
        issue_type: Optional issue type name.

    Returns:
        JSON string with the raw create metadata.
    """
    jira = await get_jira_fetcher(ctx)
    return _dumps(await jira.get_create_meta(project_key, issue_type))


@jira_mcp.tool(
    tags={"jira", "read"},
    annotations={"title": "Get Edit Metadata", "readOnlyHint": True},
)
@handle_tool_errors
async def get_edit_meta(
    ctx: Context,
    issue_key: Annotated[
        str,
        Field(description="Jira issue key (e.g. 'PROJ-123')"),
    ],
) -> str:
    """Get the fields that can be edited on an issue.

    Args:
        ctx: The FastMCP context.
        issue_key: Jira issue key.

    Returns:
        JSON string with the raw edit metadata.
    """
    jira = await get_jira_fetcher(ctx)
    return _dumps(await jira.get_edit_meta(issue_key))


@jira_mcp.tool(
    tags={"jira", "read"},
    annotations={"title": "Find Story Points Field", "readOnlyHint": True},
)
@handle_tool_errors
async def find_story_points_field(
    ctx: Context,
    project_key: Annotated[
        str,
        Field(description="The project key (e.g. 'PROJ')", pattern=PROJECT_KEY_PATTERN),
    ],
    issue_type: Annotated[
        str,
        Field(description="The issue type whose fields are searched"),
    ] = DEFAULT_STORY_ISSUE_TYPE,
) -> str:
    """Find the id of the story points field for a project and issue type.

    Args:
        ctx: The FastMCP context.
        project_key: The project key.
        issue_type: The issue type name.

    Returns:
        JSON string with the field id, or null when none was found.
    """
    jira = await get_jira_fetcher(ctx)
    field_id = await jira.find_story_points_field(project_key, issue_type)
    return _dumps(
        {
            "project_key": project_key,
            "issue_type": issue_type,
            "story_points_field_id": field_id,
            "found": field_id is not None,
        }
    )


@jira_mcp.tool(
    tags={"jira", "write"},
    annotations={"title": "Update Story Points", "destructiveHint": True},
)
@check_write_access
@handle_tool_errors
async def update_story_points(
    ctx: Context,
    issue_key: Annotated[
        str,
        Field(description="Jira issue key (e.g. 'PROJ-123')", pattern=ISSUE_KEY_PATTERN),
    ],
    story_points: Annotated[
        float,
        Field(description="The story points value to set", ge=0),
    ],
) -> str:
    """Set the story points of an issue; the field is discovered automatically.

    Args:
        ctx: The FastMCP context.
        issue_key: Jira issue key.
        story_points: The estimate.

    Returns:
        JSON string confirming the update.
    """
    jira = await get_jira_fetcher(ctx)
    field_id = await jira.update_story_points(issue_key, story_points)
    return _dumps(
        {
            "message": f"Story points updated successfully for issue {issue_key}",
            "issue_key": issue_key,
            "story_points": story_points,
            "field_id": field_id,
        }
    )

"""Unit tests for the Jira FastMCP server tools."""

import base64
import json
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastmcp import Client, FastMCP
from fastmcp.client import FastMCPTransport
from fastmcp.exceptions import ToolError

from mcp_jira.exceptions import (
    IssueNotFoundError,
    JiraApiError,
    StoryPointsFieldNotFoundError,
)
from mcp_jira.jira import JiraFetcher
from mcp_jira.models.jira import (
    JiraAttachment,
    JiraComment,
    JiraField,
    JiraIssue,
    JiraSearchResult,
    JiraTransition,
)
from mcp_jira.servers.context import MainAppContext
from mcp_jira.servers.jira import jira_mcp
from mcp_jira.servers.main import JiraMCP
from tests.utils.factories import AdfFactory, JiraIssueFactory

logger = logging.getLogger(__name__)

WRITE_TOOLS = {
    "jira_create_issue",
    "jira_update_issue",
    "jira_transition_issue",
    "jira_add_attachment",
    "jira_add_comment",
    "jira_update_story_points",
}
READ_TOOLS = {
    "jira_search_issues",
    "jira_get_epic_children",
    "jira_get_issue",
    "jira_get_transitions",
    "jira_get_fields",
    "jira_get_create_meta",
    "jira_get_edit_meta",
    "jira_find_story_points_field",
}


@pytest.fixture
def sample_issue() -> JiraIssue:
    return JiraIssue.from_api_response(
        JiraIssueFactory.create(
            "TEST-123",
            fields={
                "description": AdfFactory.doc_from_text("Relates to TEST-7, ünïcode"),
                "customfield_10016": 5,
            },
        )
    )


@pytest.fixture
def mock_jira_fetcher(sample_issue):
    """Create a mock JiraFetcher with canned async results."""
    mock_fetcher = MagicMock(spec=JiraFetcher)
    mock_fetcher.get_issue = AsyncMock(return_value=sample_issue)
    mock_fetcher.search_issues = AsyncMock(
        return_value=JiraSearchResult(total=1, issues=[sample_issue])
    )
    mock_fetcher.get_epic_children = AsyncMock(return_value=[sample_issue])
    mock_fetcher.create_issue = AsyncMock(return_value={"id": "1", "key": "TEST-124"})
    mock_fetcher.update_issue = AsyncMock(return_value=None)
    mock_fetcher.get_transitions = AsyncMock(
        return_value=[JiraTransition(id="31", name="Done", to_status="Done")]
    )
    mock_fetcher.transition_issue = AsyncMock(return_value=None)
    mock_fetcher.add_attachment = AsyncMock(
        return_value=JiraAttachment(id="900", filename="log.txt")
    )
    mock_fetcher.add_comment = AsyncMock(
        return_value=JiraComment(id="77", body="Hi", author="Test User")
    )
    mock_fetcher.get_fields = AsyncMock(
        return_value=[JiraField(id="customfield_10016", name="Story Points", custom=True)]
    )
    mock_fetcher.get_create_meta = AsyncMock(return_value={"projects": []})
    mock_fetcher.get_edit_meta = AsyncMock(return_value={"fields": {}})
    mock_fetcher.find_story_points_field = AsyncMock(return_value="customfield_10016")
    mock_fetcher.update_story_points = AsyncMock(return_value="customfield_10016")
    return mock_fetcher


def make_test_server(fetcher, read_only: bool = False) -> JiraMCP:
    @asynccontextmanager
    async def test_lifespan(app: FastMCP) -> AsyncGenerator[dict, None]:
        yield {
            "app_lifespan_context": MainAppContext(
                jira_fetcher=fetcher, read_only=read_only
            )
        }

    test_mcp = JiraMCP("TestJira", instructions="Test Jira MCP Server", lifespan=test_lifespan)
    test_mcp.mount(jira_mcp, prefix="jira")
    return test_mcp


@pytest.fixture
async def jira_client(mock_jira_fetcher):
    async with Client(
        transport=FastMCPTransport(make_test_server(mock_jira_fetcher))
    ) as client_instance:
        yield client_instance


@pytest.fixture
async def read_only_client(mock_jira_fetcher):
    async with Client(
        transport=FastMCPTransport(make_test_server(mock_jira_fetcher, read_only=True))
    ) as client_instance:
        yield client_instance


@pytest.fixture
async def no_fetcher_client():
    async with Client(transport=FastMCPTransport(make_test_server(None))) as client_instance:
        yield client_instance


def tool_json(response):
    assert len(response.content) > 0
    text_content = response.content[0]
    assert text_content.type == "text"
    return json.loads(text_content.text)


@pytest.mark.anyio
async def test_list_tools(jira_client):
    tools = await jira_client.list_tools()

    assert {tool.name for tool in tools} == READ_TOOLS | WRITE_TOOLS


@pytest.mark.anyio
async def test_list_tools_read_only_hides_write_tools(read_only_client):
    tools = await read_only_client.list_tools()

    assert {tool.name for tool in tools} == READ_TOOLS


@pytest.mark.anyio
async def test_get_issue(jira_client, mock_jira_fetcher):
    response = await jira_client.call_tool("jira_get_issue", {"issue_key": "TEST-123"})

    content = tool_json(response)
    assert content["key"] == "TEST-123"
    assert content["story_points"] == 5
    assert content["related_issues"][0]["key"] == "TEST-7"
    mock_jira_fetcher.get_issue.assert_awaited_once_with("TEST-123")


@pytest.mark.anyio
async def test_get_issue_keeps_non_ascii(jira_client):
    response = await jira_client.call_tool("jira_get_issue", {"issue_key": "TEST-123"})

    text = response.content[0].text
    assert "ünïcode" in text
    assert text.startswith("{\n  ")


@pytest.mark.anyio
async def test_get_issue_not_found(jira_client, mock_jira_fetcher):
    mock_jira_fetcher.get_issue.side_effect = IssueNotFoundError("TEST-999")

    with pytest.raises(ToolError) as excinfo:
        await jira_client.call_tool("jira_get_issue", {"issue_key": "TEST-999"})
    assert "Issue not found: TEST-999" in str(excinfo.value)


@pytest.mark.anyio
async def test_api_error_carries_guidance(jira_client, mock_jira_fetcher):
    mock_jira_fetcher.get_issue.side_effect = JiraApiError("Unauthorized", 401)

    with pytest.raises(ToolError) as excinfo:
        await jira_client.call_tool("jira_get_issue", {"issue_key": "TEST-1"})
    message = str(excinfo.value)
    assert "AUTHENTICATION_ERROR" in message
    assert "JIRA_API_TOKEN" in message


@pytest.mark.anyio
async def test_search_issues(jira_client, mock_jira_fetcher):
    response = await jira_client.call_tool(
        "jira_search_issues", {"jql": "project = TEST", "max_results": 5}
    )

    content = tool_json(response)
    assert content["total"] == 1
    assert content["issues"][0]["key"] == "TEST-123"
    mock_jira_fetcher.search_issues.assert_awaited_once_with(
        "project = TEST", max_results=5
    )


@pytest.mark.anyio
async def test_get_epic_children(jira_client, mock_jira_fetcher):
    response = await jira_client.call_tool(
        "jira_get_epic_children", {"epic_key": "TEST-1"}
    )

    content = tool_json(response)
    assert content["epic_key"] == "TEST-1"
    assert content["total"] == 1
    assert content["issues"][0]["key"] == "TEST-123"


@pytest.mark.anyio
async def test_create_issue(jira_client, mock_jira_fetcher):
    response = await jira_client.call_tool(
        "jira_create_issue",
        {
            "project_key": "TEST",
            "issue_type": "Task",
            "summary": "New",
            "description": "Body",
            "additional_fields": '{"priority": {"name": "High"}}',
        },
    )

    assert tool_json(response) == {"id": "1", "key": "TEST-124"}
    mock_jira_fetcher.create_issue.assert_awaited_once_with(
        "TEST",
        "Task",
        "New",
        description="Body",
        fields={"priority": {"name": "High"}},
    )


@pytest.mark.anyio
async def test_create_issue_invalid_additional_fields(jira_client, mock_jira_fetcher):
    with pytest.raises(ToolError) as excinfo:
        await jira_client.call_tool(
            "jira_create_issue",
            {
                "project_key": "TEST",
                "issue_type": "Task",
                "summary": "New",
                "additional_fields": "{invalid json",
            },
        )
    assert "not valid JSON" in str(excinfo.value)
    mock_jira_fetcher.create_issue.assert_not_awaited()


@pytest.mark.anyio
async def test_update_issue(jira_client, mock_jira_fetcher):
    response = await jira_client.call_tool(
        "jira_update_issue",
        {"issue_key": "TEST-123", "fields": {"summary": "Renamed"}},
    )

    content = tool_json(response)
    assert content["message"] == "Issue TEST-123 updated successfully"
    mock_jira_fetcher.update_issue.assert_awaited_once_with(
        "TEST-123", {"summary": "Renamed"}
    )


@pytest.mark.anyio
async def test_get_transitions(jira_client):
    response = await jira_client.call_tool(
        "jira_get_transitions", {"issue_key": "TEST-123"}
    )

    assert tool_json(response) == [{"id": "31", "name": "Done", "to_status": "Done"}]


@pytest.mark.anyio
async def test_transition_issue(jira_client, mock_jira_fetcher):
    response = await jira_client.call_tool(
        "jira_transition_issue",
        {"issue_key": "TEST-123", "transition_id": "31", "comment": "Done!"},
    )

    content = tool_json(response)
    assert content["message"] == "Issue TEST-123 transitioned successfully with comment"
    mock_jira_fetcher.transition_issue.assert_awaited_once_with(
        "TEST-123", "31", comment="Done!"
    )


@pytest.mark.anyio
async def test_add_attachment(jira_client, mock_jira_fetcher):
    response = await jira_client.call_tool(
        "jira_add_attachment",
        {
            "issue_key": "TEST-123",
            "file_content": base64.b64encode(b"log line").decode(),
            "filename": "log.txt",
        },
    )

    content = tool_json(response)
    assert content["attachment_id"] == "900"
    mock_jira_fetcher.add_attachment.assert_awaited_once_with(
        "TEST-123", b"log line", "log.txt"
    )


@pytest.mark.anyio
async def test_add_attachment_invalid_base64(jira_client, mock_jira_fetcher):
    with pytest.raises(ToolError) as excinfo:
        await jira_client.call_tool(
            "jira_add_attachment",
            {"issue_key": "TEST-123", "file_content": "***", "filename": "x.bin"},
        )
    assert "not valid base64" in str(excinfo.value)
    mock_jira_fetcher.add_attachment.assert_not_awaited()


@pytest.mark.anyio
async def test_add_comment(jira_client, mock_jira_fetcher):
    response = await jira_client.call_tool(
        "jira_add_comment", {"issue_key": "TEST-123", "comment": "Hi"}
    )

    content = tool_json(response)
    assert content["id"] == "77"
    mock_jira_fetcher.add_comment.assert_awaited_once_with("TEST-123", "Hi")


@pytest.mark.anyio
async def test_get_fields(jira_client):
    response = await jira_client.call_tool("jira_get_fields", {})

    assert tool_json(response) == [
        {"id": "customfield_10016", "name": "Story Points", "custom": True}
    ]


@pytest.mark.anyio
async def test_get_create_meta_and_edit_meta(jira_client, mock_jira_fetcher):
    create = await jira_client.call_tool(
        "jira_get_create_meta", {"project_key": "TEST", "issue_type": "Story"}
    )
    edit = await jira_client.call_tool("jira_get_edit_meta", {"issue_key": "TEST-1"})

    assert tool_json(create) == {"projects": []}
    assert tool_json(edit) == {"fields": {}}
    mock_jira_fetcher.get_create_meta.assert_awaited_once_with("TEST", "Story")


@pytest.mark.anyio
async def test_find_story_points_field(jira_client, mock_jira_fetcher):
    response = await jira_client.call_tool(
        "jira_find_story_points_field", {"project_key": "TEST"}
    )

    assert tool_json(response) == {
        "project_key": "TEST",
        "issue_type": "Story",
        "story_points_field_id": "customfield_10016",
        "found": True,
    }


@pytest.mark.anyio
async def test_find_story_points_field_not_found(jira_client, mock_jira_fetcher):
    mock_jira_fetcher.find_story_points_field.return_value = None

    response = await jira_client.call_tool(
        "jira_find_story_points_field", {"project_key": "TEST", "issue_type": "Task"}
    )

    content = tool_json(response)
    assert content["story_points_field_id"] is None
    assert content["found"] is False


@pytest.mark.anyio
async def test_update_story_points(jira_client, mock_jira_fetcher):
    response = await jira_client.call_tool(
        "jira_update_story_points", {"issue_key": "TEST-123", "story_points": 8}
    )

    content = tool_json(response)
    assert content["field_id"] == "customfield_10016"
    assert content["story_points"] == 8


@pytest.mark.anyio
async def test_update_story_points_field_missing(jira_client, mock_jira_fetcher):
    mock_jira_fetcher.update_story_points.side_effect = StoryPointsFieldNotFoundError(
        "TEST"
    )

    with pytest.raises(ToolError) as excinfo:
        await jira_client.call_tool(
            "jira_update_story_points", {"issue_key": "TEST-123", "story_points": 8}
        )
    assert "Story points field not found for project TEST" in str(excinfo.value)


@pytest.mark.anyio
async def test_write_tool_rejected_in_read_only_mode(read_only_client, mock_jira_fetcher):
    with pytest.raises(ToolError) as excinfo:
        await read_only_client.call_tool(
            "jira_add_comment", {"issue_key": "TEST-123", "comment": "Hi"}
        )
    assert "read-only mode" in str(excinfo.value)
    mock_jira_fetcher.add_comment.assert_not_awaited()


@pytest.mark.anyio
async def test_read_tool_allowed_in_read_only_mode(read_only_client):
    response = await read_only_client.call_tool(
        "jira_get_issue", {"issue_key": "TEST-123"}
    )

    assert tool_json(response)["key"] == "TEST-123"


@pytest.mark.anyio
async def test_missing_fetcher(no_fetcher_client):
    with pytest.raises(ToolError) as excinfo:
        await no_fetcher_client.call_tool("jira_get_issue", {"issue_key": "TEST-1"})
    assert "Jira client (fetcher) not available" in str(excinfo.value)

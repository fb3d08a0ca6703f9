"""Tests for the Jira base client."""

import base64

import httpx
import pytest

from mcp_jira.exceptions import JiraApiError, MCPJiraAuthenticationError
from mcp_jira.jira.client import JiraClient
from mcp_jira.jira.config import JiraConfig
from tests.unit.jira.conftest import MockJiraApi


def make_client(config: JiraConfig, handler) -> JiraClient:
    return JiraClient(config=config, transport=httpx.MockTransport(handler))


class TestAuthentication:
    @pytest.mark.anyio
    async def test_basic_auth(self, jira_config: JiraConfig, mock_api: MockJiraApi):
        mock_api.add("GET", "myself", {"accountId": "abc"})
        client = make_client(jira_config, mock_api.handler)

        await client.get("myself")

        request = mock_api.requests[0]
        expected = base64.b64encode(b"test@example.com:test-token").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"
        assert str(request.url) == "https://test.atlassian.net/rest/api/3/myself"

    @pytest.mark.anyio
    async def test_personal_token_auth(self, mock_api: MockJiraApi):
        config = JiraConfig(
            url="https://jira.example.com/",
            auth_type="token",
            personal_token="pat-123",
        )
        mock_api.add("GET", "myself", {"name": "admin"})
        client = make_client(config, mock_api.handler)

        await client.get("myself")

        request = mock_api.requests[0]
        assert request.headers["Authorization"] == "Bearer pat-123"
        assert request.url.host == "jira.example.com"

    @pytest.mark.anyio
    async def test_async_context_manager_closes_client(self, jira_config: JiraConfig):
        async with make_client(jira_config, lambda r: httpx.Response(200)) as client:
            assert not client.client.is_closed
        assert client.client.is_closed


class TestErrorTranslation:
    @pytest.mark.parametrize(
        ("status_code", "body", "category", "message"),
        [
            (400, {"errorMessages": ["first", "second"]}, "VALIDATION_ERROR", "first; second"),
            (401, {"message": "Client must be authenticated"}, "AUTHENTICATION_ERROR", "Client must be authenticated"),
            (403, {"errorMessage": "No permission"}, "PERMISSION_ERROR", "No permission"),
            (404, {"errorMessages": ["Issue does not exist"]}, "NOT_FOUND_ERROR", "Issue does not exist"),
            (502, {}, "SERVER_ERROR", "Bad Gateway"),
        ],
    )
    @pytest.mark.anyio
    async def test_error_categories(
        self, jira_config: JiraConfig, status_code, body, category, message
    ):
        client = make_client(
            jira_config, lambda r: httpx.Response(status_code, json=body)
        )

        with pytest.raises(JiraApiError) as exc_info:
            await client.get("issue/PROJ-1")

        error = exc_info.value
        assert error.status_code == status_code
        assert error.category == category
        assert error.reason == message
        assert str(error) == (
            f"Jira API Error [{category}]: {message} (Status: {status_code})"
        )

    @pytest.mark.parametrize("status_code", [401, 403])
    @pytest.mark.anyio
    async def test_auth_errors_use_auth_subclass(self, jira_config, status_code):
        client = make_client(jira_config, lambda r: httpx.Response(status_code))

        with pytest.raises(MCPJiraAuthenticationError):
            await client.get("myself")

    @pytest.mark.anyio
    async def test_non_json_error_body_uses_reason_phrase(self, jira_config):
        client = make_client(
            jira_config, lambda r: httpx.Response(503, text="<html>down</html>")
        )

        with pytest.raises(JiraApiError) as exc_info:
            await client.get("issue/PROJ-1")
        assert exc_info.value.reason == "Service Unavailable"

    @pytest.mark.anyio
    async def test_uncategorized_status(self, jira_config):
        client = make_client(jira_config, lambda r: httpx.Response(409, json={}))

        with pytest.raises(JiraApiError) as exc_info:
            await client.get("issue/PROJ-1")
        assert exc_info.value.category is None
        assert str(exc_info.value) == "Jira API Error: Conflict (Status: 409)"

    @pytest.mark.anyio
    async def test_network_error(self, jira_config):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(jira_config, handler)

        with pytest.raises(JiraApiError) as exc_info:
            await client.get("issue/PROJ-1")
        assert exc_info.value.status_code is None
        assert "connection refused" in str(exc_info.value)

    @pytest.mark.anyio
    async def test_non_json_success_body(self, jira_config):
        client = make_client(
            jira_config, lambda r: httpx.Response(200, text="<html>gateway</html>")
        )

        with pytest.raises(JiraApiError) as exc_info:
            await client.get("issue/EPIC-1")
        assert exc_info.value.status_code == 200
        assert "Invalid JSON response" in str(exc_info.value)

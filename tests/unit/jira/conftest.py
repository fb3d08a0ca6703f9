"""
Test fixtures for Jira unit tests.

The fetcher under test talks to an in-process fake of the REST API through
``httpx.MockTransport``; every request it sends is recorded for assertions.
"""

import json
from typing import Any

import httpx
import pytest

from mcp_jira.jira import JiraFetcher
from mcp_jira.jira.config import JiraConfig

API_PREFIX = "/rest/api/3/"


class MockJiraApi:
    """Canned responses keyed by (method, path relative to ``/rest/api/3/``)."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], tuple[int, Any]] = {}
        self.text_routes: dict[tuple[str, str], tuple[int, str]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self, method: str, path: str, json_body: Any = None, status_code: int = 200
    ) -> None:
        self.routes[(method, path)] = (status_code, json_body)

    def fail(self, method: str, path: str, status_code: int, **body: Any) -> None:
        self.add(method, path, body or None, status_code)

    def add_text(
        self, method: str, path: str, text: str, status_code: int = 200
    ) -> None:
        """Answer a route with a non-JSON body, like a proxy error page."""
        self.text_routes[(method, path)] = (status_code, text)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix(API_PREFIX)
        if (request.method, path) in self.text_routes:
            status_code, text = self.text_routes[(request.method, path)]
            return httpx.Response(
                status_code, text=text, headers={"Content-Type": "text/html"}
            )
        status_code, body = self.routes.get(
            (request.method, path),
            (404, {"errorMessages": ["Issue does not exist or you do not have permission to see it."]}),
        )
        if body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=body)

    def requests_to(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == method and r.url.path.removeprefix(API_PREFIX) == path
        ]

    def json_sent_to(self, method: str, path: str) -> Any:
        """Decoded body of the last request sent to a route."""
        return json.loads(self.requests_to(method, path)[-1].content)


@pytest.fixture
def jira_config() -> JiraConfig:
    """Cloud configuration using basic auth."""
    return JiraConfig(
        url="https://test.atlassian.net",
        auth_type="basic",
        username="test@example.com",
        api_token="test-token",
    )


@pytest.fixture
def mock_api() -> MockJiraApi:
    return MockJiraApi()


@pytest.fixture
def jira_fetcher(jira_config: JiraConfig, mock_api: MockJiraApi) -> JiraFetcher:
    """JiraFetcher wired to the fake REST API."""
    return JiraFetcher(
        config=jira_config, transport=httpx.MockTransport(mock_api.handler)
    )

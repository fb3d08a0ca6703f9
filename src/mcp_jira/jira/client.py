"""Base client module for Jira API interactions."""

import json
import logging
from types import TracebackType
from typing import Any

import httpx

from ..exceptions import JiraApiError, MCPJiraAuthenticationError
from ..models.jira import JiraIssue
from .config import JiraConfig
from .constants import DEFAULT_ISSUE_EXPAND, REST_API_PATH

logger = logging.getLogger("mcp-jira.client")


class JiraClient:
    """Base client for Jira REST API v3 interactions.

    Every call is a single request attempt on one shared ``httpx.AsyncClient``;
    nothing is cached or retried.
    """

    def __init__(
        self,
        config: JiraConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Jira client with a given configuration.

        Args:
            config: Jira configuration object. If None, will be loaded from environment variables.
            transport: Optional httpx transport, used to plug in a mock API.

        Raises:
            ValueError: If configuration is missing or invalid.
        """
        self.config = config if config is not None else JiraConfig.from_env()
        self.base_url = f"{self.config.url.rstrip('/')}{REST_API_PATH}"
        self.client = self._create_client(transport)

    def _create_client(
        self, transport: httpx.AsyncBaseTransport | None
    ) -> httpx.AsyncClient:
        """Create the HTTP client with authentication.

        Returns:
            Authenticated async HTTP client
        """
        headers = {"Accept": "application/json"}
        auth: httpx.Auth | None = None

        if self.config.auth_type == "token":
            headers["Authorization"] = f"Bearer {self.config.personal_token}"
        else:
            auth = httpx.BasicAuth(
                self.config.username or "", self.config.api_token or ""
            )

        return httpx.AsyncClient(
            base_url=f"{self.base_url}/",
            auth=auth,
            headers=headers,
            verify=self.config.ssl_verify,
            timeout=httpx.Timeout(self.config.timeout),
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "JiraClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_data: Any = None,
        files: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send one request to the Jira REST API.

        Args:
            method: HTTP method
            path: API path relative to ``/rest/api/3/``
            params: Query parameters
            json_data: JSON request body
            files: Multipart files
            headers: Extra request headers

        Returns:
            The successful response

        Raises:
            JiraApiError: If the request fails or Jira answers with an error status
        """
        logger.debug(f"Sending {method} request to {path}")
        try:
            response = await self.client.request(
                method,
                path.lstrip("/"),
                params=params,
                json=json_data,
                files=files,
                headers=headers,
            )
        except httpx.RequestError as e:
            logger.error(f"Request error for {method} {path}: {e}")
            raise JiraApiError(f"Request error: {e}") from e

        if response.is_error:
            raise self._build_api_error(response, path)
        return response

    def _build_api_error(self, response: httpx.Response, path: str) -> JiraApiError:
        """Turn an error response into a categorized JiraApiError."""
        message = response.reason_phrase
        error_data: Any = {}
        try:
            error_data = response.json()
        except ValueError:
            logger.warning("Could not parse Jira error response body as JSON.")

        if isinstance(error_data, dict):
            error_messages = error_data.get("errorMessages")
            if isinstance(error_messages, list) and error_messages:
                message = "; ".join(str(m) for m in error_messages)
            elif error_data.get("message"):
                message = str(error_data["message"])
            elif error_data.get("errorMessage"):
                message = str(error_data["errorMessage"])

        details = json.dumps(error_data, indent=2)
        logger.error(
            f"HTTP error {response.status_code} for {path}: {message}\nDetails: {details}"
        )

        if response.status_code in (401, 403):
            return MCPJiraAuthenticationError(message, response.status_code, error_data)
        return JiraApiError(message, response.status_code, error_data)

    @staticmethod
    def _decode_json(response: httpx.Response, path: str) -> Any:
        """Decode a successful response body, which must be JSON."""
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Response from {path} is not valid JSON: {e}")
            raise JiraApiError(
                f"Invalid JSON response: {e}", response.status_code
            ) from e

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Send GET request and return the decoded JSON body."""
        response = await self._request("GET", path, params=params)
        return self._decode_json(response, path)

    async def post(
        self,
        path: str,
        json_data: Any = None,
        *,
        files: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send POST request and return the decoded JSON body, if any."""
        response = await self._request(
            "POST", path, json_data=json_data, files=files, headers=headers
        )
        if not response.content:
            return None
        return self._decode_json(response, path)

    async def put(self, path: str, json_data: Any = None) -> None:
        """Send PUT request; Jira answers updates with 204 and no body."""
        await self._request("PUT", path, json_data=json_data)

    def _issue_params(self) -> dict[str, str]:
        """Query parameters for fetching issues in normalizable shape."""
        return {
            "fields": ",".join(self.config.issue_fields),
            "expand": DEFAULT_ISSUE_EXPAND,
        }

    def _issue_from_payload(self, data: dict[str, Any]) -> JiraIssue:
        """Normalize a raw issue payload using the configured designated fields."""
        return JiraIssue.from_api_response(
            data,
            story_points_field=self.config.story_points_field,
            epic_link_field=self.config.epic_link_field,
        )

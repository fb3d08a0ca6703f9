"""Main FastMCP server setup for the Jira integration."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastmcp import FastMCP
from fastmcp.tools import Tool as FastMCPTool
from mcp.types import Tool as MCPTool
from starlette.requests import Request
from starlette.responses import JSONResponse

from mcp_jira.jira import JiraFetcher
from mcp_jira.jira.config import JiraConfig
from mcp_jira.utils import getenv_first, is_read_only_mode

from .context import MainAppContext
from .jira import jira_mcp

logger = logging.getLogger("mcp-jira.server.main")


async def health_check(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


@asynccontextmanager
async def main_lifespan(app: FastMCP[MainAppContext]) -> AsyncIterator[dict]:
    logger.info("Main Jira MCP server lifespan starting...")
    read_only = is_read_only_mode()

    jira_config: JiraConfig | None = None
    jira_fetcher: JiraFetcher | None = None

    if getenv_first("JIRA_URL", "JIRA_BASE_URL"):
        try:
            jira_config = JiraConfig.from_env()
            jira_fetcher = JiraFetcher(config=jira_config)
            logger.info(
                f"Jira configuration loaded (URL: {jira_config.url}, auth: {jira_config.auth_type})."
            )
        except ValueError as e:
            logger.error(f"Failed to load Jira configuration: {e}")
    else:
        logger.warning("JIRA_URL is not set; Jira tools will be unavailable.")

    app_context = MainAppContext(
        jira_config=jira_config,
        jira_fetcher=jira_fetcher,
        read_only=read_only,
    )
    logger.info(f"Read-only mode: {'ENABLED' if read_only else 'DISABLED'}")

    try:
        yield {"app_lifespan_context": app_context}
    finally:
        if jira_fetcher is not None:
            logger.debug("Closing Jira HTTP client...")
            await jira_fetcher.aclose()
        logger.info("Main Jira MCP server lifespan shutdown complete.")


class JiraMCP(FastMCP[MainAppContext]):
    """Custom FastMCP server class for the Jira integration with tool filtering."""

    async def _mcp_list_tools(self) -> list[MCPTool]:
        # Hide write tools when the lifespan context says read-only.
        req_context = self._mcp_server.request_context
        if req_context is None or req_context.lifespan_context is None:
            logger.warning("Lifespan context not available during tool listing.")
            return []

        lifespan_ctx_dict = req_context.lifespan_context
        app_lifespan_state: MainAppContext | None = (
            lifespan_ctx_dict.get("app_lifespan_context")
            if isinstance(lifespan_ctx_dict, dict)
            else None
        )
        read_only = app_lifespan_state.read_only if app_lifespan_state else False

        all_tools: dict[str, FastMCPTool] = await self.get_tools()
        logger.debug(
            f"Aggregated {len(all_tools)} tools before filtering: {list(all_tools.keys())}"
        )

        filtered_tools: list[MCPTool] = []
        for registered_name, tool_obj in all_tools.items():
            if read_only and "write" in tool_obj.tags:
                logger.debug(
                    f"Excluding tool '{registered_name}' due to read-only mode and 'write' tag"
                )
                continue
            filtered_tools.append(tool_obj.to_mcp_tool(name=registered_name))

        logger.debug(f"Listing {len(filtered_tools)} tools (read_only={read_only})")
        return filtered_tools


main_mcp = JiraMCP(name="Jira MCP", lifespan=main_lifespan)
main_mcp.mount(jira_mcp, prefix="jira")


@main_mcp.custom_route("/healthz", methods=["GET"], include_in_schema=False)
async def _health_check_route(request: Request) -> JSONResponse:
    return await health_check(request)


logger.info("Added /healthz endpoint for Kubernetes probes")

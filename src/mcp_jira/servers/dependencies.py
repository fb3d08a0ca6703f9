"""Dependency provider for JiraFetcher.

Provides get_jira_fetcher for use in tool functions.
"""

from __future__ import annotations

import logging

from fastmcp import Context

from mcp_jira.jira import JiraFetcher
from mcp_jira.servers.context import MainAppContext

logger = logging.getLogger("mcp-jira.servers.dependencies")


def get_app_context(ctx: Context) -> MainAppContext | None:
    """Return the application context stored by the server lifespan, if any."""
    lifespan_ctx_dict = ctx.request_context.lifespan_context
    if not isinstance(lifespan_ctx_dict, dict):
        return None
    return lifespan_ctx_dict.get("app_lifespan_context")


async def get_jira_fetcher(ctx: Context) -> JiraFetcher:
    """Returns the JiraFetcher shared by all tool calls of this server.

    Raises:
        ValueError: If Jira is not configured
    """
    app_lifespan_ctx = get_app_context(ctx)
    if app_lifespan_ctx and app_lifespan_ctx.jira_fetcher:
        return app_lifespan_ctx.jira_fetcher
    logger.error("Jira configuration could not be resolved.")
    raise ValueError(
        "Jira client (fetcher) not available. Ensure JIRA_URL and credentials are configured."
    )

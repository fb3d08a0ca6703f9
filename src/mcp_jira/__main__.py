"""Entry point for running the MCP Jira server."""

from mcp_jira import main

main()

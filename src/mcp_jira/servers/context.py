from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mcp_jira.jira import JiraFetcher
    from mcp_jira.jira.config import JiraConfig


@dataclass(frozen=True)
class MainAppContext:
    """Context holding the loaded config, the shared fetcher and server settings."""

    jira_config: JiraConfig | None = None
    jira_fetcher: JiraFetcher | None = None
    read_only: bool = False

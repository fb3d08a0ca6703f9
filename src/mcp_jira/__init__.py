import asyncio
import os
from typing import Any

import click
from dotenv import load_dotenv

__version__ = "0.3.0"

from .logging_config import log_operation, setup_logger

logger = setup_logger()


@click.command()
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (can be used multiple times)",
)
@click.option(
    "--env-file", type=click.Path(exists=True, dir_okay=False), help="Path to .env file"
)
@click.option(
    "--transport",
    type=click.Choice(["stdio", "sse", "streamable-http"]),
    default="stdio",
    help="Transport type (stdio, sse or streamable-http)",
)
@click.option(
    "--port",
    default=8000,
    help="Port to listen on for HTTP transports",
)
@click.option(
    "--host",
    default="0.0.0.0",  # noqa: S104
    help="Host to bind to for HTTP transports",
)
@click.option(
    "--log-dir",
    help="Directory to store log files",
)
@click.option(
    "--log-to-file/--no-log-to-file",
    default=False,
    help="Enable/disable file logging",
)
@click.option(
    "--jira-url",
    help="Jira URL (e.g., https://your-domain.atlassian.net)",
)
@click.option("--jira-username", help="Jira username/email (for Jira Cloud)")
@click.option("--jira-token", help="Jira API token (for Jira Cloud)")
@click.option(
    "--jira-personal-token",
    help="Jira Personal Access Token (for Jira Server/Data Center)",
)
@click.option(
    "--jira-ssl-verify/--no-jira-ssl-verify",
    default=True,
    help="Verify SSL certificates for Jira (default: verify)",
)
@click.option(
    "--read-only",
    is_flag=True,
    default=False,
    help="Run in read-only mode (write tools are hidden and rejected)",
)
def main(
    verbose: int,
    env_file: str | None,
    transport: str,
    port: int,
    host: str,
    log_dir: str | None,
    log_to_file: bool,
    jira_url: str | None,
    jira_username: str | None,
    jira_token: str | None,
    jira_personal_token: str | None,
    jira_ssl_verify: bool,
    read_only: bool,
) -> None:
    """MCP Jira Server - Jira Cloud issues, comments and relationships for MCP

    Issue reads return each issue together with its comments and every issue it
    references, so an agent gets the surrounding context in one call.
    """
    logging_level = None
    if verbose == 1:
        logging_level = "INFO"
    elif verbose >= 2:
        logging_level = "DEBUG"

    setup_logger(
        name="mcp-jira",
        level=logging_level,
        log_to_file=log_to_file,
        log_dir=log_dir,
    )

    with log_operation(logger, "application_startup", app_version=__version__):
        # Load environment variables from file if specified, otherwise try default .env
        if env_file:
            logger.info(f"Loading environment from file: {env_file}")
            load_dotenv(env_file)
        else:
            logger.debug("Attempting to load environment from default .env file")
            load_dotenv()

        # Command line arguments override the environment
        if jira_url:
            os.environ["JIRA_URL"] = jira_url
        if jira_username:
            os.environ["JIRA_USERNAME"] = jira_username
        if jira_token:
            os.environ["JIRA_API_TOKEN"] = jira_token
        if jira_personal_token:
            os.environ["JIRA_PERSONAL_TOKEN"] = jira_personal_token
        if log_dir:
            os.environ["LOG_DIR"] = log_dir
        if read_only:
            os.environ["READ_ONLY_MODE"] = "true"
        if not jira_ssl_verify:
            os.environ["JIRA_SSL_VERIFY"] = "false"

        from mcp_jira.servers import main_mcp

        run_kwargs: dict[str, Any] = {"transport": transport}
        if transport != "stdio":
            run_kwargs.update(host=host, port=port)

        logger.info(f"Starting MCP Jira v{__version__} with {transport} transport")

    asyncio.run(main_mcp.run_async(**run_kwargs))


__all__ = ["main", "__version__", "setup_logger", "log_operation"]

if __name__ == "__main__":
    main()

"""Environment variable utility functions for MCP Jira."""

import os


def getenv_first(*names: str, default: str | None = None) -> str | None:
    """Return the first non-empty environment variable among ``names``.

    Args:
        *names: Variable names in priority order (canonical name first, aliases after)
        default: Value returned when none of the variables is set

    Returns:
        The variable's value or ``default``
    """
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


def is_env_truthy(env_var_name: str, default: str = "") -> bool:
    """Check if environment variable is set to a standard truthy value.

    Considers 'true', '1', 'yes', 'y', 'on' as truthy values (case-insensitive).

    Args:
        env_var_name: Name of the environment variable to check
        default: Default value if environment variable is not set

    Returns:
        True if the environment variable is set to a truthy value, False otherwise
    """
    return os.getenv(env_var_name, default).lower() in ("true", "1", "yes", "y", "on")


def is_env_ssl_verify(env_var_name: str, default: str = "true") -> bool:
    """Check SSL verification setting with secure defaults.

    Defaults to true unless explicitly set to a false value.
    """
    return os.getenv(env_var_name, default).lower() not in ("false", "0", "no")


def is_read_only_mode() -> bool:
    """Check if the server is running in read-only mode.

    Read-only mode rejects every write tool (create, update, transition,
    comment, attachment) while allowing all read tools.
    """
    return is_env_truthy("READ_ONLY_MODE", "false")

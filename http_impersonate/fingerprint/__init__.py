"""Browser impersonation profiles and header generation."""

from .profiles import (
    Browser,
    OperatingSystem,
    USER_AGENTS,
    get_user_agent,
    list_targets,
    profile_headers,
)

__all__ = [
    "Browser",
    "OperatingSystem",
    "USER_AGENTS",
    "get_user_agent",
    "list_targets",
    "profile_headers",
]

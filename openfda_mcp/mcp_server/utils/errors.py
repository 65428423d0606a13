"""
Error Handling Utilities

Sanitizes error messages before they are returned to the MCP host.
"""

import re
from pathlib import Path

MAX_ERROR_LENGTH = 600


def sanitize_error(error: Exception) -> str:
    """
    Sanitize error messages to prevent information disclosure.

    Replaces the home directory with ``~``, strips directory components from
    file paths and truncates overly long messages. URLs are left intact so
    upstream endpoints stay recognizable.

    Args:
        error: The exception to sanitize

    Returns:
        Sanitized error message string

    Example:
        >>> sanitize_error(FileNotFoundError("/home/user/secret/file.txt not found"))
        'file.txt not found'
    """
    try:
        error_str = str(error)

        sanitized = error_str.replace(str(Path.home()), "~")

        # Strip directories from absolute paths, but not from URLs
        sanitized = re.sub(r"(?<![:/\w.])/[a-zA-Z0-9_/.-]*/", "", sanitized)

        if len(sanitized) > MAX_ERROR_LENGTH:
            sanitized = sanitized[:MAX_ERROR_LENGTH] + "..."

        return sanitized

    except Exception:
        return "Internal server error occurred"

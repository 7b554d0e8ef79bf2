"""Safe error message formatting utilities.

Ensures exceptions always have useful display messages, even when
their str() representation is empty (e.g., TimeoutError, CancelledError),
and expands fallback failures so every candidate's reason is visible.
"""

from __future__ import annotations

import asyncio

from rich.markup import escape as _escape_markup

from ..errors import AllCandidatesFailedError
from ..errors import RequireIdResolutionError

# Friendly messages for specific exception types known to have empty str()
FRIENDLY_MESSAGES: dict[type, str] = {
    TimeoutError: "Operation timed out.",
    asyncio.CancelledError: "Operation was cancelled.",
    KeyboardInterrupt: "Operation interrupted by user.",
}


def format_error_message(e: BaseException, *, include_type: bool = True) -> str:
    """Format an exception into a useful display message.

    Args:
        e: The exception to format
        include_type: Whether to include the exception type name

    Returns:
        A non-empty, user-friendly error message

    Examples:
        >>> format_error_message(ValueError("invalid input"))
        'ValueError: invalid input'

        >>> format_error_message(ValueError("invalid input"), include_type=False)
        'invalid input'
    """
    error_str = str(e)
    error_type = type(e).__name__

    if error_str:
        if include_type and error_type not in error_str:
            return f"{error_type}: {error_str}"
        return error_str

    for exc_type, friendly_msg in FRIENDLY_MESSAGES.items():
        if isinstance(e, exc_type):
            return f"{error_type}: {friendly_msg}"

    return f"{error_type}: (no additional details)"


def format_error_details(e: BaseException) -> list[str]:
    """Format an exception plus the nested causes of batch failures.

    Returns one line for the error itself and one indented line per failed
    fallback candidate.
    """
    if isinstance(e, RequireIdResolutionError):
        return [format_error_message(e), *format_error_details(e.cause)[1:]]

    lines = [format_error_message(e)]
    if isinstance(e, AllCandidatesFailedError):
        for identifier, error in zip(e.identifiers, e.errors):
            lines.append(f"  {identifier}: {format_error_message(error, include_type=False)}")
    return lines


def escape_markup(value: object) -> str:
    """Escape a value for safe interpolation into Rich markup strings.

    Args:
        value: Any value to escape (will be converted to str)

    Returns:
        String safe for interpolation into Rich markup f-strings
    """
    return _escape_markup(str(value))

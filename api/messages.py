"""
Centralized error messages for consistent API responses.

This module provides a single source of truth for the error messages the
API writes itself. Campaign access errors carry their own messages.
"""


class ErrorMessages:
    """Centralized error messages for consistent API responses."""

    # Resource not found messages
    USER_NOT_FOUND = "User not found."

    # Permission messages
    OWNER_CANNOT_LEAVE = (
        "Campaign owners cannot leave their campaigns. "
        "Transfer ownership or delete the campaign instead."
    )
    USE_LEAVE_ENDPOINT = "Use the leave endpoint to leave the campaign."

    # Validation messages
    BAD_REQUEST = "Bad request."
    VALIDATION_ERROR = "Validation error."
    USER_OR_EMAIL_REQUIRED = "Either user_id or email is required."

    # Server errors
    INTERNAL_ERROR = "Internal server error."

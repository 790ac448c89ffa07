"""
Standardized error handling for the API.

Campaign access failures are raised as campaigns.exceptions errors anywhere
below the views; this module turns them into HTTP responses. The mapping is:

- Unauthorized  -> 401
- Forbidden     -> 403
- NotFound      -> 404
- Conflict      -> 409
- InternalError -> 500
- Django ValidationError -> 400

Every error body has the shape {"detail": <message>, "code": <reason>}.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from api.messages import ErrorMessages
from campaigns.exceptions import (
    CampaignAccessError,
    Conflict,
    Forbidden,
    InternalError,
    NotFound,
    Unauthorized,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    Unauthorized: status.HTTP_401_UNAUTHORIZED,
    Forbidden: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    Conflict: status.HTTP_409_CONFLICT,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class APIError:
    """Standard API error response builder."""

    @staticmethod
    def from_access_error(exc: CampaignAccessError) -> Response:
        """
        Return the response for a campaign access failure.

        Internal errors never expose the underlying store message.
        """
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        for error_class, error_status in STATUS_BY_ERROR.items():
            if isinstance(exc, error_class):
                status_code = error_status
                break

        detail = exc.message
        if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
            detail = ErrorMessages.INTERNAL_ERROR

        return Response({"detail": detail, "code": exc.code}, status=status_code)

    @staticmethod
    def create_bad_request_response(
        detail: Optional[str] = None, code: str = "bad_request"
    ) -> Response:
        """Return a standard 400 Bad Request response."""
        return Response(
            {"detail": detail or ErrorMessages.BAD_REQUEST, "code": code},
            status=status.HTTP_400_BAD_REQUEST,
        )

    @staticmethod
    def create_validation_error_response(
        errors: Union[Dict[str, List[str]], str, DjangoValidationError],
    ) -> Response:
        """
        Return a standardized validation error response.

        Args:
            errors: Validation errors in various formats:
                   - Dict mapping field names to error lists
                   - String for general validation error
                   - Django ValidationError instance
        """
        if isinstance(errors, DjangoValidationError):
            if hasattr(errors, "error_dict"):
                return Response(errors.message_dict, status=status.HTTP_400_BAD_REQUEST)
            messages = errors.messages
            return Response(
                {
                    "detail": messages[0] if messages else ErrorMessages.VALIDATION_ERROR,
                    "errors": messages,
                    "code": "invalid",
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        if isinstance(errors, dict):
            return Response(errors, status=status.HTTP_400_BAD_REQUEST)
        return Response(
            {"detail": errors or ErrorMessages.VALIDATION_ERROR, "code": "invalid"},
            status=status.HTTP_400_BAD_REQUEST,
        )


def campaign_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """
    DRF exception handler that understands campaign access errors.

    Configured as REST_FRAMEWORK["EXCEPTION_HANDLER"]. Anything that is not a
    campaign access error or a Django ValidationError falls through to DRF's
    default handler.
    """
    if isinstance(exc, CampaignAccessError):
        if isinstance(exc, InternalError):
            view = context.get("view")
            logger.error(
                "Internal error in %s",
                view.__class__.__name__ if view is not None else "unknown view",
                exc_info=exc,
            )
        return APIError.from_access_error(exc)

    if isinstance(exc, DjangoValidationError):
        return APIError.create_validation_error_response(exc)

    return exception_handler(exc, context)

"""Map domain and framework errors to ``{"error": message}`` responses.

Wired as REST_FRAMEWORK["EXCEPTION_HANDLER"]. Internal details never reach
the client.
"""

import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.views import set_rollback

from events.domain.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.REGISTRATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ALREADY_REGISTERED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.REGISTRATIONS_EXIST: status.HTTP_400_BAD_REQUEST,
    ErrorCode.REGISTRATION_NOT_ACTIVE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.SOLD_OUT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.UPSTREAM_UNAVAILABLE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.PROVIDER_NOT_CONFIGURED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _first_message(detail, path: str = "") -> str:
    if isinstance(detail, dict):
        for key, value in detail.items():
            if key in ("detail", "non_field_errors"):
                return _first_message(value, path)
            return _first_message(value, f"{path}.{key}" if path else str(key))
        return "Invalid request"
    if isinstance(detail, list):
        return _first_message(detail[0], path) if detail else "Invalid request"
    return f"{path}: {detail}" if path else str(detail)


def exception_handler(exc, context):
    if isinstance(exc, DomainError):
        set_rollback()
        return Response({"error": exc.message}, status=STATUS_BY_CODE[exc.code])

    if isinstance(exc, (exceptions.NotAuthenticated, exceptions.AuthenticationFailed)):
        return Response({"error": "Unauthorized"}, status=status.HTTP_401_UNAUTHORIZED)

    response = drf_exception_handler(exc, context)
    if response is not None:
        response.data = {"error": _first_message(response.data)}
        return response

    view = context.get("view")
    logger.exception(
        "Unhandled error in %s", type(view).__name__ if view else "request", exc_info=exc
    )
    set_rollback()
    return Response(
        {"error": "Internal server error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )

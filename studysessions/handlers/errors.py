"""Map domain errors to HTTP responses.

Registered as DRF's EXCEPTION_HANDLER. Only the error code and the
user-safe message leave the service; anything else falls through to
DRF's default handling.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from studysessions.domain.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

_STATUS_BY_CODE = {
    ErrorCode.SESSION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.TIME_SLOT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.NOT_A_MEMBER: status.HTTP_403_FORBIDDEN,
}


def domain_exception_handler(exc, context):
    if not isinstance(exc, DomainError):
        return exception_handler(exc, context)

    view = context.get("view")
    logger.warning(
        "Rejected %s: %s",
        view.__class__.__name__ if view is not None else "request",
        exc.code.value,
    )
    return Response(
        {"code": exc.code.value, "message": exc.message},
        status=_STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST),
    )

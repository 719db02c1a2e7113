"""DRF exception handler that maps domain errors to HTTP responses."""

from __future__ import annotations

import structlog
from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import (
    BookingNotFoundError,
    BookingStateError,
    InvalidArgumentError,
    PropertyNotFoundError,
)

logger = structlog.get_logger(__name__)


def domain_exception_handler(exc, context):
    """
    InvalidArgumentError -> 400
    PropertyNotFoundError, BookingNotFoundError -> 404
    BookingStateError -> 409
    BookingUnavailableError -> 409 with the availability result

    Anything else goes through DRF's default handler.
    """
    from apps.bookings.application.command_handlers import BookingUnavailableError

    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else None

    if isinstance(exc, BookingUnavailableError):
        logger.info("booking_unavailable", view=view_name, reason=exc.result.reason)
        return Response(
            {"detail": str(exc), "availability": exc.result.to_dict()},
            status=status.HTTP_409_CONFLICT,
        )
    if isinstance(exc, BookingStateError):
        logger.info("booking_state_rejected", view=view_name, error=str(exc))
        return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
    if isinstance(exc, (PropertyNotFoundError, BookingNotFoundError)):
        return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, InvalidArgumentError):
        logger.info("invalid_argument", view=view_name, error=str(exc))
        return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

    return drf_exception_handler(exc, context)

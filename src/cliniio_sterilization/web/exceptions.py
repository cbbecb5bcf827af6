"""Exception handling for sterilization web endpoints.

This module maps the package's exception hierarchy onto HTTP responses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from litestar import Response
from litestar.status_codes import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

from cliniio_sterilization.exceptions import BatchNotFoundError, NoActiveSessionError, SterilizationError

if TYPE_CHECKING:  # pragma: no cover
    from litestar import Request

__all__ = ["sterilization_error_handler"]

NOT_FOUND_ERRORS = (BatchNotFoundError, NoActiveSessionError)


def sterilization_error_handler(
    _request: Request,
    exc: SterilizationError,
) -> Response:
    """Exception handler for ``SterilizationError``.

    Lookups that found nothing become 404 Not Found; every other
    sterilization error is a 400 Bad Request.

    Args:
        request: The Litestar request object.
        exc: The raised exception.

    Returns:
        Response with the error type and message.
    """
    status_code = HTTP_404_NOT_FOUND if isinstance(exc, NOT_FOUND_ERRORS) else HTTP_400_BAD_REQUEST
    return Response(
        content={
            "error": type(exc).__name__,
            "message": str(exc),
        },
        status_code=status_code,
        media_type="application/json",
    )

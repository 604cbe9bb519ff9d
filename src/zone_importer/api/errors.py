"""Translate service exceptions into HTTP errors."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from ..services.backend import ZoneServiceError

logger = logging.getLogger(__name__)


def error_detail(code: str, message: str, **extra: str) -> dict[str, str]:
    return {"error": code, "message": message, **extra}


def backend_http_error(exc: ConnectionError) -> HTTPException:
    """Map a backend failure onto a status code the admin UI can act on."""
    if isinstance(exc, ZoneServiceError) and exc.status_code is not None:
        if 400 <= exc.status_code < 500:
            return HTTPException(
                status_code=exc.status_code,
                detail=error_detail("backend_rejected", exc.message),
            )
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=error_detail("backend_error", exc.message),
        )
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=error_detail(
            "backend_unavailable",
            f"Backend connection error: {exc}. Please check the backend service and try again.",
        ),
    )


def unexpected_error(exc: Exception, action: str) -> HTTPException:
    logger.exception(f"Error while trying to {action}: {exc}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=error_detail("internal_error", f"Failed to {action}: {exc}"),
    )

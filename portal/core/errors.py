from __future__ import annotations

import logging
from typing import Any, Mapping

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from portal.core.config import IS_DEV

logger = logging.getLogger(__name__)

GENERIC_INTERNAL_MESSAGE = "Terjadi kesalahan internal server"


class PortalError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = GENERIC_INTERNAL_MESSAGE

    def __init__(self, message: str | None = None, *, errors: Mapping[str, Any] | None = None) -> None:
        self.message = message or self.default_message
        self.errors = dict(errors) if errors else None
        super().__init__(self.message)

    def to_response(self) -> dict[str, Any]:
        body: dict[str, Any] = {"success": False, "message": self.message}
        if self.errors is not None:
            body["errors"] = self.errors
        return body


class ValidationError(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validasi gagal. Periksa isian Anda."

    def __init__(self, errors: Mapping[str, str], message: str | None = None) -> None:
        super().__init__(message, errors=errors)


class AuthError(PortalError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Username atau password salah"


class NotFoundError(PortalError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Data tidak ditemukan"


class ConflictError(PortalError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Kode pelacakan tidak dapat dibuat, silakan coba lagi"


class InternalError(PortalError):
    default_message = GENERIC_INTERNAL_MESSAGE

    def to_response(self) -> dict[str, Any]:
        body = super().to_response()
        cause = self.__cause__
        if IS_DEV and cause is not None:
            body["error"] = str(cause)
        return body


class DispatchError(RuntimeError):
    """Outbound channel failure. Always recovered by the dispatcher."""

    def __init__(self, message: str, *, status_code: int | None = None, body_text: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body_text = body_text


def _portal_error_handler(_request: Request, exc: PortalError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error("internal error: %s", exc.__cause__ or exc, exc_info=exc.__cause__ or exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


def _request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: dict[str, str] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location) or "body"
        errors.setdefault(field, error.get("msg", "Nilai tidak valid"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ValidationError(errors).to_response(),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PortalError, _portal_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

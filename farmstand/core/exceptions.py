# file: farmstand/core/exceptions.py
"""
Failure kinds raised by the vendor editors and the map projection,
plus the FastAPI handlers that turn them into one-shot user notices.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from farmstand.core.logger import log_to_cloud


class FarmStandError(Exception):
    """Base error. `message` is safe to show to the user as-is."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFound(FarmStandError):
    status_code = 404
    code = "NOT_FOUND"


class StoreUnavailable(FarmStandError):
    status_code = 503
    code = "STORE_UNAVAILABLE"


class ValidationFailed(FarmStandError):
    status_code = 422
    code = "VALIDATION_FAILED"


class RoutingFailed(FarmStandError):
    status_code = 502
    code = "ROUTING_FAILED"


class Unauthorized(FarmStandError):
    status_code = 401
    code = "UNAUTHORIZED"


class Forbidden(FarmStandError):
    status_code = 403
    code = "FORBIDDEN"


def notice_body(exc: FarmStandError) -> dict:
    return {"notice": exc.message, "error": exc.code}


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the notice handler to the app."""

    @app.exception_handler(FarmStandError)
    async def farmstand_error_handler(request: Request, exc: FarmStandError) -> JSONResponse:
        log_to_cloud(
            "editor",
            "ERROR" if exc.status_code >= 500 else "WARNING",
            f"{request.method} {request.url.path} -> {exc.code}: {exc.message}",
            {"code": exc.code, "path": request.url.path, "method": request.method},
        )
        return JSONResponse(status_code=exc.status_code, content=notice_body(exc))

    @app.exception_handler(RequestValidationError)
    async def form_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        where = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
        msg = str(first.get("msg", "invalid input")).removeprefix("Value error, ")
        return await farmstand_error_handler(
            request, ValidationFailed(f"Please check {where}: {msg}" if where else f"Please check the form: {msg}")
        )

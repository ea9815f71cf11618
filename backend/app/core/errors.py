import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Operational error that is safe to report to the client as-is."""

    def __init__(self, status_code: int, message: str, headers: dict[str, str] | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.headers = headers

    def payload(self) -> dict:
        return {"status": "error", "message": self.message}


class RateLimitExceeded(AppError):
    def __init__(self, retry_after: int, headers: dict[str, str] | None = None):
        super().__init__(429, "Too many requests, please try again later.", headers=headers)
        self.retry_after = retry_after

    def payload(self) -> dict:
        return {**super().payload(), "retryAfter": self.retry_after}


class InvalidRequestError(AppError):
    def __init__(self, errors: list[dict], message: str = "Validation failed"):
        super().__init__(400, message)
        self.errors = errors

    def payload(self) -> dict:
        return {**super().payload(), "errors": self.errors}


class ProjectNotReadyError(AppError):
    def __init__(self, message: str = "Project has not been generated yet"):
        super().__init__(409, message)


class GenerationInProgressError(AppError):
    def __init__(self, message: str = "A generation is already running for this project"):
        super().__init__(409, message)


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload(), headers=exc.headers)


async def http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
            "code": error["type"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({"status": "error", "message": "Validation failed", "errors": errors}),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"status": "error", "message": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

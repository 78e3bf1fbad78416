# app/core/exceptions.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class TreeFundError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    public_message = "Internal Server Error"

    def __init__(self, message: str = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message

    @property
    def detail(self) -> str:
        return self.message


class ValidationError(TreeFundError):
    """Bad or missing client input."""
    status_code = status.HTTP_400_BAD_REQUEST
    public_message = "Invalid request."


class NotFoundError(TreeFundError):
    status_code = status.HTTP_404_NOT_FOUND
    public_message = "Not found."


class BackendError(TreeFundError):
    """Store or storage failure. The client only ever sees a generic message."""

    @property
    def detail(self) -> str:
        return self.public_message


class StorageError(BackendError):
    pass


class InsertError(BackendError):
    pass


class UpdateError(BackendError):
    pass


async def treefund_error_handler(request: Request, exc: TreeFundError) -> JSONResponse:
    if isinstance(exc, BackendError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Missing or invalid fields.", "errors": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TreeFundError, treefund_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

"""
HTTP mapping of errors

Every error body is {'detail': ..., 'error': <kind>}; `detail` is a message, or the
list of field errors for request validation.
"""

from typing import Any, Callable, Coroutine

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.responses import Response

from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger


ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]


def _error_response(*, status_code: int, detail: Any, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'detail': detail, 'error': error})


async def custom_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, CustomBaseError) else CustomBaseError(str(exc))
    if error.status_code >= 500:
        Logger.base.warning(f'{type(error).__name__} on {request.method} {request.url.path}')
    return _error_response(
        status_code=error.status_code, detail=error.message, error=type(error).__name__
    )


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, RequestValidationError) else RequestValidationError([])
    # ctx may carry exception objects which are not JSON serializable
    errors = [{k: v for k, v in err.items() if k != 'ctx'} for err in error.errors()]
    return _error_response(
        status_code=status.HTTP_400_BAD_REQUEST, detail=errors, error='ValidationError'
    )


async def integrity_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Unique constraint lost to a concurrent write (ticket code, discount code)
    Logger.base.warning(f'Integrity error on {request.method} {request.url.path}: {exc}')
    return _error_response(
        status_code=status.HTTP_409_CONFLICT,
        detail='The resource was modified concurrently, please retry',
        error='ConflictError',
    )


async def general_500_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    Logger.base.error(f'Unhandled {type(exc).__name__} on {request.method} {request.url.path}')
    return _error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail='Internal server error',
        error='InternalError',
    )


EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    CustomBaseError: custom_error_handler,
    RequestValidationError: validation_error_handler,
    IntegrityError: integrity_error_handler,
    Exception: general_500_exception_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)

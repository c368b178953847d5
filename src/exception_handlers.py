from collections.abc import Awaitable, Callable

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response

from src.errors import AppError, UpstreamServiceError
from src.logger import logger
from src.models.response_models import ErrorResponse


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(error=message, code=code, message=message)
    return JSONResponse(status_code=status_code, content=payload.model_dump())


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Map domain errors onto their error code and HTTP status.

    Validation failures are the caller's fault and logged at info; upstream
    failures are logged as warnings with the underlying cause.
    """
    log = logger.warning if isinstance(exc, UpstreamServiceError) else logger.info
    log(
        f"Lookup request failed path={request.url.path} method={request.method} "
        f"code={exc.code} error={exc!r} cause={exc.__cause__!r}"
    )
    return _error_response(exc.status_code, exc.code, str(exc))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected errors to return a structured 500 response."""
    logger.exception(
        "Unhandled exception while processing request: "
        f"{repr(exc)} path={request.url.path} method={request.method}"
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An unexpected error occurred while processing the request.",
    )


async def unhandled_exception_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Turn unexpected errors into the structured 500 inside the middleware stack.

    A plain `Exception` handler is served by Starlette's outermost error
    middleware, so its responses would skip CORS headers.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        return await unhandled_exception_handler(request, exc)

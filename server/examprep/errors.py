"""
Error responses shared by all route handlers.

Every handler raises ``HTTPException``; ``http_exception_handler`` renders it as
``{"error": ...}`` (or the detail mapping itself when one is given).
"""
import logging
from typing import Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def unauthorized(message: str = "Unauthorized") -> HTTPException:
    return HTTPException(status_code=401, detail=message)


def forbidden(message: str = "Forbidden") -> HTTPException:
    return HTTPException(status_code=403, detail=message)


def not_found(message: str = "Not found", **extra) -> HTTPException:
    if extra:
        return HTTPException(status_code=404, detail={"error": message, **extra})
    return HTTPException(status_code=404, detail=message)


def bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=400, detail=message)


def internal_error(message: str, exc: Optional[BaseException] = None) -> HTTPException:
    """Log ``exc`` with its traceback and build the 500 response carrying its message."""
    if exc is None:
        logger.error(message)
        return HTTPException(status_code=500, detail=message)
    logger.error("%s: %s", message, exc, exc_info=exc)
    return HTTPException(status_code=500, detail={"error": message, "details": str(exc)})


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))

"""
Translate domain and storage errors into JSON responses.

Every body has the shape ``{"detail": ..., "code": ...}``.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from blogstore.exceptions import BlogStoreError

logger = logging.getLogger(__name__)


async def blogstore_error_handler(request: Request, exc: BlogStoreError) -> JSONResponse:
    logger.warning(
        "%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("%s %s -> integrity error: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=409,
        content={"detail": "Resource conflicts with existing data", "code": "CONFLICT"},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "code": "INTERNAL_ERROR"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BlogStoreError, blogstore_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

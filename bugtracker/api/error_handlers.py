"""
Exception Handlers
==================
Central failure rendering for the API. Every failure goes through the same
path: normalize(exc) → classify(failure) → failure envelope.

Two entry points share that path:
    EnvelopeRoute       — route class for API routers; converts any failure
                          raised while serving the route into a response,
                          so nothing reaches Starlette's ServerErrorMiddleware
    exception handlers  — app-level fallback for code outside those routers

Framework HTTP errors (unknown route, wrong method) keep their own status and
detail, only re-wrapped in the envelope.
"""
import logging
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from bugtracker.core.errors import BugStoreError, FailureTag, classify, normalize
from bugtracker.models.envelope import error_body

logger = logging.getLogger(__name__)


def failure_response(request: Request, exc: Exception) -> JSONResponse:
    failure = normalize(exc)
    status_code, message = classify(failure)
    if failure.tag is FailureTag.UNCLASSIFIED:
        logger.error(
            "Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc
        )
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, message)
    fields = failure.fields if failure.tag is FailureTag.VALIDATION else None
    return JSONResponse(status_code=status_code, content=error_body(message, fields))


class EnvelopeRoute(APIRoute):
    def get_route_handler(self) -> Callable:
        original_route_handler = super().get_route_handler()

        async def envelope_route_handler(request: Request) -> Response:
            try:
                return await original_route_handler(request)
            except StarletteHTTPException:
                raise
            except Exception as exc:
                return failure_response(request, exc)

        return envelope_route_handler


async def failure_handler(request: Request, exc: Exception) -> JSONResponse:
    return failure_response(request, exc)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BugStoreError, failure_handler)
    app.add_exception_handler(RequestValidationError, failure_handler)
    app.add_exception_handler(SQLAlchemyError, failure_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, failure_handler)

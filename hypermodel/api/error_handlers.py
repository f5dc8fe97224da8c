"""Error Handlers — terminal handlers rendering failures into the JSON:API error envelope.

Invariants:
    - HypermodelError → its own status, title and detail
    - Unmatched route (404/405 from routing) → generic NotFound for METHOD path
    - Exception (catch-all) → 500; stack trace attached under meta only outside production

Design Decisions:
    - Three-layer handler: domain (HypermodelError), routing (Starlette HTTPException),
      catch-all (Exception)
    - Extracted from main.py to keep the app factory small
"""

import logging
import traceback
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from starlette.exceptions import HTTPException as StarletteHTTPException

from hypermodel.api.responses import JsonApiResponse, render_error
from hypermodel.core.errors import ApiError, ErrorKind, HypermodelError

logger = logging.getLogger(__name__)

_ROUTING_MISSES = (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED)


def register_error_handlers(app: FastAPI, expose_stack: bool = False) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_hypermodel_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app, expose_stack)


def _register_hypermodel_error_handler(app: FastAPI) -> None:

    @app.exception_handler(HypermodelError)
    async def hypermodel_error_handler(request: Request, exc: HypermodelError):
        """Handle domain/infrastructure errors raised outside the core's return values."""
        logger.error(
            f"HypermodelError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return render_error(exc.to_api_error())


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Routing misses become the generic NotFound; other HTTP errors keep their status."""
        if exc.status_code in _ROUTING_MISSES:
            return render_error(ApiError(
                ErrorKind.NOT_FOUND,
                f"No resource available for {request.method} {request.url.path}",
            ))
        return JsonApiResponse(
            status_code=exc.status_code,
            content={"errors": [{
                "status": str(exc.status_code),
                "title": HTTPStatus(exc.status_code).phrase,
                "detail": str(exc.detail),
            }]},
        )


def _register_generic_error_handler(app: FastAPI, expose_stack: bool) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all for unclassified failures."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path, "method": request.method},
        )
        meta = None
        if expose_stack:
            meta = {"stack": "".join(traceback.format_exception(exc)).splitlines()}
        return render_error(ApiError(
            ErrorKind.INTERNAL,
            "An unknown, fatal error occurred!",
            title=type(exc).__name__,
            meta=meta,
        ))

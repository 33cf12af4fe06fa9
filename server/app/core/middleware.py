from __future__ import annotations
"""server/app/core/middleware.py
~~~~~~~~~~~~~~~~~~~~~~~~
Handlers globaux : erreurs métier -> réponses HTTP JSON.

- InvalidPayload      -> 400 (+ liste des erreurs de validation)
- InvalidInput        -> 422
- InsufficientSignal  -> 422
- NotFound            -> 404
- StoreUnavailable    -> 500 générique (aucun détail sur l'étape en échec)
- toute autre erreur -> 500 générique, loggée avec sa trace
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.domain.errors import InvalidPayload, StoreUnavailable, TelemetryError

logger = logging.getLogger(__name__)

GENERIC_500 = "Failed to process request"


async def _telemetry_error_handler(request: Request, exc: TelemetryError) -> JSONResponse:
    status_code = exc.status_code
    extra = {"path": request.url.path, "error": exc.message, "error_type": type(exc).__name__}

    if isinstance(exc, StoreUnavailable) or status_code >= 500:
        logger.error("request.failed", extra=extra)
        return JSONResponse({"detail": GENERIC_500}, status_code=500)

    logger.warning("request.rejected", extra=extra)
    body: dict = {"detail": exc.message}
    if isinstance(exc, InvalidPayload) and exc.errors:
        body["errors"] = exc.errors
    return JSONResponse(body, status_code=status_code)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "request.failed",
        extra={"path": request.url.path, "error": str(exc), "error_type": type(exc).__name__},
        exc_info=exc,
    )
    return JSONResponse({"detail": GENERIC_500}, status_code=500)


def install_global_middleware(app: FastAPI) -> None:
    app.add_exception_handler(TelemetryError, _telemetry_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

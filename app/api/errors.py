import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core import errors
from app.schemas.booking import BookingSlot

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(errors.ConflictError)
    async def conflict_handler(request: Request, exc: errors.ConflictError):
        logger.info("[Conflict] %s | Path=%s", exc.message, request.url.path)
        details = dict(exc.details)
        details["conflicting_bookings"] = [
            BookingSlot.model_validate(b).model_dump(mode="json") for b in exc.conflicts
        ]
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "details": details},
        )

    @app.exception_handler(errors.BookingEngineError)
    async def engine_error_handler(request: Request, exc: errors.BookingEngineError):
        if exc.status_code >= 500:
            logger.error("[%s] %s | Path=%s", type(exc).__name__, exc.message, request.url.path)
        else:
            logger.warning("[%s] %s | Path=%s", type(exc).__name__, exc.message, request.url.path)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "details": exc.details},
        )

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("[StorageError] Path=%s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "Storage failure", "details": {}},
        )

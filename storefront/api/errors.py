# storefront/api/errors.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.domain.errors import (
    Conflict,
    InsufficientInventory,
    InvalidState,
    NotFound,
    OutOfStock,
    PersistenceError,
    StorefrontError,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# first match wins, subclasses before their bases
_STATUS = (
    (OutOfStock, 400),
    (InsufficientInventory, 400),
    (NotFound, 404),
    (InvalidState, 400),
    (Conflict, 409),
)


def status_for(exc: StorefrontError) -> int:
    for cls, status in _STATUS:
        if isinstance(exc, cls):
            return status
    return 500


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error(f"{request.method} {request.url.path} failed: {exc!r} (cause: {exc.__cause__!r})")
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        return JSONResponse(status_code=status_for(exc), content={"detail": str(exc)})

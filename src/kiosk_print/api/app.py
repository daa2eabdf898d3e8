"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kiosk_print.api.accounts import router as accounts_router
from kiosk_print.api.files import router as files_router
from kiosk_print.api.printing import router as printing_router
from kiosk_print.api.realtime import router as realtime_router
from kiosk_print.api.wallet import router as wallet_router
from kiosk_print.app_logging import configure_logging
from kiosk_print.config import parse_origins
from kiosk_print.containers import AppContainer
from kiosk_print.services.errors import (
    InvalidCredentialsError,
    KioskOfflineError,
    KioskPrintError,
    NotFoundError,
    ValidationError,
)

_STATUS_BY_ERROR: dict[type[KioskPrintError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InvalidCredentialsError: status.HTTP_401_UNAUTHORIZED,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    KioskOfflineError: status.HTTP_410_GONE,
}
_REQUEST_LOCATIONS = {"body", "query", "path", "form", "header"}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        settings = app.state.container.settings
        logger.info(
            "Kiosk print relay starting",
            extra={
                "storage_backend": settings.storage_backend,
                "file_transport": settings.file_transport,
            },
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="kiosk-print", lifespan=lifespan)
    app.state.container = container

    origins = parse_origins(container.settings.frontend_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    app.include_router(accounts_router)
    app.include_router(files_router)
    app.include_router(printing_router)
    if container.settings.wallet_enabled:
        app.include_router(wallet_router)
    app.include_router(realtime_router)

    @app.exception_handler(KioskPrintError)
    async def service_error_handler(
        request: Request, exc: KioskPrintError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        logger.info(
            "Request rejected",
            extra={"path": request.url.path, "status_code": status_code},
        )
        return JSONResponse(
            status_code=status_code, content={"success": False, "error": str(exc)}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info("Invalid request", extra={"path": request.url.path})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": _validation_message(exc)},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        # The raw message reaches the client, matching the existing clients.
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": str(exc) or type(exc).__name__},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/")
    async def root() -> dict[str, object]:
        """Report that the relay is up and which kiosks are online."""
        return {
            "status": "Kiosk backend running",
            "onlineKiosks": app.state.container.registry.online_kiosks(),
        }

    return app


def _status_for(exc: KioskPrintError) -> int:
    for cls in type(exc).__mro__:
        if cls in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _validation_message(exc: RequestValidationError) -> str:
    """Build a field-specific message from the first validation error."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    path = [
        str(part) for part in first.get("loc", ()) if part not in _REQUEST_LOCATIONS
    ]
    field_name = path[-1] if path else "request body"
    if first.get("type") == "missing":
        return f"Missing {field_name}"
    return f"Invalid {field_name}: {first.get('msg', 'invalid value')}"

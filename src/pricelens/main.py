"""PriceLens - Main application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pricelens.api.dependencies import close_services
from pricelens.api.routes import health, price, search
from pricelens.config import get_settings
from pricelens.config.logging import configure_logging
from pricelens.core.exceptions import TokenNotFoundError, ValidationError

log = structlog.get_logger()

UNEXPECTED_ERROR_MESSAGE = "Unexpected server error."
INVALID_REQUEST_MESSAGE = "Invalid request."


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle.

    On startup: Configure logging.
    On shutdown: Close all provider clients.
    """
    configure_logging()
    log.info("application_started")

    yield

    await close_services()
    log.info("shutdown_complete")


async def _validation_error_handler(_request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def _request_validation_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    log.debug("request_validation_failed", errors=exc.errors())
    return JSONResponse(status_code=400, content={"error": INVALID_REQUEST_MESSAGE})


async def _not_found_handler(_request: Request, exc: TokenNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=404, content={"error": "No price data available for this token."}
    )


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unexpected_error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"error": UNEXPECTED_ERROR_MESSAGE})


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    application = FastAPI(
        title=settings.app_name,
        description="Token price aggregation across DEX and CEX venues",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    application.add_exception_handler(ValidationError, _validation_error_handler)
    application.add_exception_handler(RequestValidationError, _request_validation_handler)
    application.add_exception_handler(TokenNotFoundError, _not_found_handler)
    application.add_exception_handler(Exception, _unexpected_error_handler)

    # Register API routes
    application.include_router(health.router, prefix="/api")
    application.include_router(price.router, prefix="/api")
    application.include_router(search.router, prefix="/api")

    return application


# Create the app instance
app = create_app()


def main() -> None:
    """Run the application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "pricelens.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()

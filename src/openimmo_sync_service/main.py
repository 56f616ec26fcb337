"""
Main application entry point for the OpenImmo Sync Service.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from openimmo_sync_service import __version__
from openimmo_sync_service.config import settings
from openimmo_sync_service.exceptions import SyncServiceError
from openimmo_sync_service.routers.cron_router import router as cron_router
from openimmo_sync_service.routers.health_router import router as health_router
from openimmo_sync_service.utils.logging_config import (
    RequestIdMiddleware,
    configure_logging,
    logger,
)

# Configure logging using our custom configuration
configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle manager.
    """
    logger.info("Application startup sequence initiated.")
    if not settings.ftp_configured():
        logger.warning("FTP feed settings are incomplete; sync runs will fail to connect")
    if not settings.webflow_configured():
        logger.warning("Webflow settings are incomplete; CMS calls will fail")

    logger.info("Application startup complete.")

    yield

    logger.info("Application shutdown sequence initiated.")
    logger.info("Application shutdown complete.")


app = FastAPI(
    title="OpenImmo Sync Service",
    description=(
        "Service importing OpenImmo XML listings from an FTP feed into a "
        "Webflow CMS collection and publishing the site after changes."
    ),
    version=__version__,
    root_path=settings.ROOT_PATH,
    lifespan=lifespan,
)


# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIdMiddleware)


# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(cron_router, tags=["Sync"])


# Add exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Custom HTTP exception handler for consistent error responses."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_type": "HTTPException"},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Validation exception handler for consistent error responses."""
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "error_type": "ValidationError"},
    )


@app.exception_handler(SyncServiceError)
async def sync_exception_handler(request: Request, exc: SyncServiceError):
    """Sync failures are reported with 200 so the scheduler does not retry."""
    logger.error(f"Sync error: {str(exc)}")
    return JSONResponse(
        status_code=200,
        content={"success": False, "error": str(exc), "error_type": type(exc).__name__},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Global exception handler for consistent error responses."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_type": str(type(exc).__name__),
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "openimmo_sync_service.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development(),
        log_level=settings.LOGGING_LEVEL.lower(),
    )

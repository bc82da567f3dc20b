"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stockfolio.config.settings import get_settings
from stockfolio.config.logging_config import setup_logging
from stockfolio.app_context import get_app_context
from stockfolio.api.routers import (
    accounts_router,
    transactions_router,
    portfolio_router,
    market_router,
    backup_router,
    assistant_router,
)
from stockfolio.core.exceptions import AppError, NotFoundError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    ctx = get_app_context()
    if ctx.settings.auto_refresh:
        ctx.scheduler.start()
    yield
    # Shutdown
    await ctx.scheduler.stop()
    ctx.close()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Multi-account stock portfolio tracker",
    version=settings.app_version,
    lifespan=lifespan,
)

# Include routers
app.include_router(accounts_router)
app.include_router(transactions_router)
app.include_router(portfolio_router)
app.include_router(market_router)
app.include_router(backup_router)
app.include_router(assistant_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    status_code = 404 if isinstance(exc, NotFoundError) else 400
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }

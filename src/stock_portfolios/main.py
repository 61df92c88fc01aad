"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stock_portfolios.config.settings import get_settings
from stock_portfolios.config.logging_config import setup_logging
from stock_portfolios.repositories.sqlalchemy.database import init_db
from stock_portfolios.api.deps import uses_memory_repo
from stock_portfolios.api.routers import portfolios_router, transactions_router, analytics_router
from stock_portfolios.core.exceptions import (
    AppError,
    DependencyUnavailableError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    setup_logging()
    settings = get_settings()
    if uses_memory_repo():
        logger.info("Using in-memory repositories")
    else:
        init_db()
    logger.info(
        "Reference currency %s, price provider %s",
        settings.get_ref_currency(),
        settings.price_provider,
    )
    yield


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Multi-portfolio tracking with cash reconciliation, P/L analytics and backtests",
    version=settings.app_version,
    lifespan=lifespan,
)

app.include_router(portfolios_router)
app.include_router(transactions_router)
app.include_router(analytics_router)


def status_for(exc: AppError) -> int:
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, DependencyUnavailableError):
        return 503
    return 400


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    status = status_for(exc)
    if status >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status,
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

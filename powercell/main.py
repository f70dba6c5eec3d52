"""
Main FastAPI application for PowerCell.
"""
import logging
import sys
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import structlog

from powercell.core.config import settings
from powercell.core.database import init_db, check_db_connection
from powercell.core.exceptions import ShopError
from powercell.core.redis_client import check_redis_connection
from powercell.api.v1.api import api_router

# Route stdlib logging (used by the services) through the same level
logging.basicConfig(format="%(message)s", stream=sys.stdout, level=settings.log_level.upper())

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer() if settings.log_format == "json" else structlog.dev.ConsoleRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting PowerCell application...")

    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise

    if not check_db_connection():
        logger.error("Database connection check failed")
        raise RuntimeError("Database connection failed")

    # The cache is optional; run degraded rather than refuse to start
    if settings.cache_enabled and not check_redis_connection():
        logger.warning("Redis unavailable, serving without cache")

    logger.info("PowerCell application started successfully")

    yield

    logger.info("Shutting down PowerCell application...")


app = FastAPI(
    title=settings.app_name,
    description="Battery shop billing, stock, exchange and UPI checkout",
    version="1.0.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)

app.include_router(api_router, prefix=settings.api_v1_str)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to PowerCell",
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    health_status = {
        "status": "healthy",
        "database": "connected" if check_db_connection() else "disconnected",
        "cache": "disabled"
    }
    if settings.cache_enabled:
        health_status["cache"] = "connected" if check_redis_connection() else "disconnected"

    if health_status["database"] == "disconnected":
        health_status["status"] = "unhealthy"
        return JSONResponse(status_code=503, content=health_status)

    return health_status


@app.exception_handler(ShopError)
async def shop_error_handler(request: Request, exc: ShopError):
    """Business rule and lookup failures, reported with their own status code."""
    logger.info(f"{request.method} {request.url.path} rejected: {exc.message}", status_code=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "status": "error"}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "powercell.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )

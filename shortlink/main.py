"""Main application module.

This module initializes the FastAPI application, includes routes,
and configures middleware and exception handlers.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from shortlink.api import api_router
from shortlink.core.config import settings
from shortlink.core.logging import setup_logging
from shortlink.db.base import engine, init_db
from shortlink.middleware.logging import RequestLoggingMiddleware
from shortlink.services.exceptions import StorageFailureError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and the schema on startup, release the engine on shutdown."""
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT.value}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    if settings.DB_CREATE_TABLES:
        await init_db()

    yield

    logger.info(f"Shutting down {settings.APP_NAME}")
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.REQUEST_LOGGING_ENABLED:
    app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router)


def _error_response(request: Request, exc: Exception, message: str) -> JSONResponse:
    error_id = f"error-{time.time()}"
    logger.opt(exception=exc).error(
        f"{message} in {request.method} {request.url.path}",
        error_id=error_id,
        path_params=request.path_params,
        client_host=request.client.host if request.client else None,
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error occurred",
            "error_id": error_id,
            "message": str(exc) if settings.DEBUG else "Internal server error",
        }
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail}
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Bad input is a 400 with the validation details."""
    logger.warning(f"Request validation error: {exc}")
    return JSONResponse(
        status_code=400,
        content={"detail": "Validation error", "errors": jsonable_encoder(exc.errors())}
    )


@app.exception_handler(StorageFailureError)
async def storage_failure_handler(request: Request, exc: StorageFailureError):
    return _error_response(request, exc, "Storage failure")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to catch and log all unhandled exceptions."""
    return _error_response(request, exc, "Unhandled exception")


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    uvicorn.run(
        "shortlink.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()

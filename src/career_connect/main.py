# src/career_connect/main.py
"""Main entry point for the Career Connect application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from career_connect.api.v1 import (
    messages_router,
    notifications_router,
    realtime_router,
    system_router,
)
from career_connect.core.errors import CareerConnectError
from career_connect.core.settings import settings
from career_connect.db.session import SessionLocal
from career_connect.realtime.gateway import RealtimeGateway

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own the realtime gateway for the lifetime of the process."""
    app.state.gateway = RealtimeGateway(SessionLocal)
    logger.info("%s %s started; realtime gateway ready", settings.app_name, settings.app_version)
    try:
        yield
    finally:
        app.state.gateway.shutdown()


# Initialize FastAPI app
app = FastAPI(
    title=f"{settings.app_name} API",
    description="Career networking backend: messaging, notifications and presence",
    version=settings.app_version,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)


@app.exception_handler(CareerConnectError)
async def career_connect_error_handler(request: Request, exc: CareerConnectError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    missing = any(error.get("type") == "missing" for error in errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": "Missing required fields" if missing else "Invalid request",
            "errors": jsonable_encoder(errors),
        },
    )


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Internal server error", "error": str(exc)},
    )


# Include API routers
app.include_router(messages_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(realtime_router)
app.include_router(system_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("career_connect.main:app", host="0.0.0.0", port=8000, reload=settings.debug)

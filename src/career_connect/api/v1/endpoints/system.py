# src/career_connect/api/v1/endpoints/system.py
"""Service information and health endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from career_connect.api.v1.dependencies import GatewayDep, SessionDep
from career_connect.core.settings import settings
from career_connect.db.time import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])


@router.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with basic information about the API."""
    return {
        "message": f"{settings.app_name} server is running",
        "version": settings.app_version,
        "timestamp": utcnow().isoformat(),
        "docs": "/docs",
    }


@router.get("/health", response_model=None)
async def health_check(db: SessionDep, gateway: GatewayDep) -> dict[str, Any] | JSONResponse:
    """Verify the database answers and report how many users are online."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Health check failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "status": "Error",
                "database": "Disconnected",
                "error": str(exc),
            },
        )
    return {
        "status": "OK",
        "database": "Connected",
        "onlineUsers": len(gateway.presence),
        "timestamp": utcnow().isoformat(),
    }

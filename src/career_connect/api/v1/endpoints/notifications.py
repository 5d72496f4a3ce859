# src/career_connect/api/v1/endpoints/notifications.py
"""Notification endpoints for the Career Connect API."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, status

from career_connect.api.v1.dependencies import GatewayDep, SessionDep
from career_connect.core.errors import NotFoundError
from career_connect.schemas.notification import (
    NotificationCreate,
    NotificationOwnerRequest,
    NotificationRead,
)
from career_connect.services.notifications import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/user/{user_id}")
async def list_notifications(
    user_id: str,
    db: SessionDep,
    limit: int | None = Query(None, ge=1, le=100),
    offset: int = Query(0, ge=0),
    unread_only: bool = Query(False, alias="unreadOnly"),
) -> dict[str, Any]:
    """Return a page of a user's notifications, newest first."""
    items, total, unread = NotificationService(db).list_for_user(
        user_id, unread_only=unread_only, limit=limit, offset=offset
    )
    return {
        "success": True,
        "notifications": [NotificationRead.model_validate(item).to_wire() for item in items],
        "total": total,
        "unreadCount": unread,
        "hasMore": total > offset + len(items),
    }


@router.get("/unread-count/{user_id}")
async def get_unread_count(user_id: str, db: SessionDep) -> dict[str, Any]:
    return {"success": True, "count": NotificationService(db).unread_count(user_id)}


@router.put("/mark-read/{notification_id}")
async def mark_notification_read(
    notification_id: int,
    request: NotificationOwnerRequest,
    db: SessionDep,
    gateway: GatewayDep,
) -> dict[str, Any]:
    """Mark one of the caller's notifications as read."""
    service = NotificationService(db)
    if service.mark_read(notification_id, request.user_id) == 0:
        raise NotFoundError("Notification not found")

    unread = service.unread_count(request.user_id)
    await gateway.deliver([gateway.count_emission(request.user_id, unread)])
    return {"success": True, "message": "Notification marked as read", "unreadCount": unread}


@router.put("/mark-all-read/{user_id}")
async def mark_all_notifications_read(
    user_id: str,
    db: SessionDep,
    gateway: GatewayDep,
) -> dict[str, Any]:
    modified = NotificationService(db).mark_all_read(user_id)
    await gateway.deliver([gateway.count_emission(user_id, 0)])
    return {
        "success": True,
        "message": "All notifications marked as read",
        "modifiedCount": modified,
    }


@router.delete("/clear-all/{user_id}")
async def clear_all_notifications(
    user_id: str,
    db: SessionDep,
    gateway: GatewayDep,
) -> dict[str, Any]:
    deleted = NotificationService(db).clear_all(user_id)
    await gateway.deliver([gateway.count_emission(user_id, 0)])
    return {"success": True, "message": "All notifications cleared", "deletedCount": deleted}


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: int,
    request: NotificationOwnerRequest,
    db: SessionDep,
    gateway: GatewayDep,
) -> dict[str, Any]:
    """Delete one of the caller's notifications."""
    service = NotificationService(db)
    if service.delete(notification_id, request.user_id) == 0:
        raise NotFoundError("Notification not found")

    unread = service.unread_count(request.user_id)
    await gateway.deliver([gateway.count_emission(request.user_id, unread)])
    return {"success": True, "message": "Notification deleted", "unreadCount": unread}


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_notification(
    request: NotificationCreate,
    db: SessionDep,
    gateway: GatewayDep,
) -> dict[str, Any]:
    """Create a notification directly (administrative and testing use)."""
    notification = NotificationService(db).create(request)
    payload = NotificationRead.model_validate(notification).to_wire()
    await gateway.deliver(await gateway.notification_emissions(payload))
    return {"success": True, "message": "Notification created", "notification": payload}

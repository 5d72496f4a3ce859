# src/career_connect/api/v1/endpoints/realtime.py
"""Websocket endpoint carrying the realtime messaging protocol."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from career_connect.api.v1.dependencies import GatewayDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def realtime_websocket(websocket: WebSocket, gateway: GatewayDep) -> None:
    """Accept a live connection and feed its frames to the gateway in arrival order."""
    await websocket.accept()
    connection = gateway.connect(websocket.send_json)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                frame = json.loads(raw)
            except json.JSONDecodeError:
                frame = None
            await gateway.receive_frame(connection, frame)
    except WebSocketDisconnect as exc:
        logger.debug("Websocket %s closed with code %s", connection.id, exc.code)
    finally:
        await gateway.disconnect(connection)

"""Shared API dependencies for database sessions and the realtime gateway."""

from typing import Annotated

from fastapi import Depends
from fastapi.requests import HTTPConnection
from sqlalchemy.orm import Session

from career_connect.db.session import get_db
from career_connect.realtime.gateway import RealtimeGateway

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_gateway(connection: HTTPConnection) -> RealtimeGateway:
    """Return the gateway created for this application at start-up.

    Works for both HTTP requests and websocket connections.
    """
    return connection.app.state.gateway


# Type alias for realtime gateway dependency
GatewayDep = Annotated[RealtimeGateway, Depends(get_gateway)]

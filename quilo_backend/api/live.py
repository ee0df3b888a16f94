"""
Live-update WebSocket endpoint
"""
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from sqlalchemy.ext.asyncio import async_sessionmaker

from quilo_backend.database import get_session_factory
from quilo_backend.services.notifier import Notifier, get_notifier

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def live_updates(
    websocket: WebSocket,
    notifier: Notifier = Depends(get_notifier),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    """
    Clients receive change events as {"event", "data"} messages and may send
    join_admin, join_voting or request_data (with data = resource name).
    """
    await notifier.connect(websocket)
    try:
        while True:
            raw = await websocket.receive_text()
            await notifier.handle_message(websocket, raw, session_factory)
    except WebSocketDisconnect as e:
        logger.debug(f"Live-update socket closed by client (code={e.code})")
    finally:
        notifier.disconnect(websocket)

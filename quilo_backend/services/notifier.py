"""
Live-update notifier.

Keeps the open WebSocket connections, turns the change events returned by
mutations into named socket events and fans them out. Delivery is
fire-and-forget: a connection that fails to receive is dropped and logged,
the HTTP request that triggered the broadcast never sees the error.

Messages in both directions are JSON objects: {"event": <name>, "data": <payload>}.
"""
import asyncio
import logging
from collections import defaultdict
from typing import Any, Iterable, Optional

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from quilo_backend.schemas import (
    DishResponse,
    JudgeResponse,
    RecipeResponse,
    RankingEntryResponse,
    serialize_evaluation,
)
from quilo_backend.services import contest_service, evaluation_service, ranking_service
from quilo_backend.services.events import ChangeEvent, ChangeKind, Resource, SINGULAR_NAMES
from quilo_backend.utils.helpers import isoformat_utc, safe_json_parse

logger = logging.getLogger(__name__)

GROUPS = {"join_admin": "admin", "join_voting": "voting"}

# Seconds a client may take to accept one message before it is dropped
SEND_TIMEOUT = 5.0


def serialize_record(resource: Resource, record) -> dict:
    if resource == Resource.DISHES:
        return DishResponse.model_validate(record).model_dump(mode="json")
    if resource == Resource.JUDGES:
        return JudgeResponse.model_validate(record).model_dump(mode="json")
    if resource == Resource.EVALUATIONS:
        return serialize_evaluation(record).model_dump(mode="json")
    if resource == Resource.RECIPES:
        return RecipeResponse.model_validate(record).model_dump(mode="json")
    raise ValueError(f"No serializer for {resource}")


async def load_snapshot(db: AsyncSession, resource: Resource) -> list[dict]:
    """Current contents of a resource, as sent in `<resource>_updated` events"""
    if resource == Resource.DISHES:
        records = await contest_service.list_dishes(db)
    elif resource == Resource.JUDGES:
        records = await contest_service.list_judges(db)
    elif resource == Resource.EVALUATIONS:
        records = await evaluation_service.list_evaluations(db)
    elif resource == Resource.RECIPES:
        records = await contest_service.list_recipes(db)
    elif resource == Resource.RANKING:
        ranking = await ranking_service.get_ranking(db)
        return [RankingEntryResponse.model_validate(entry).model_dump(mode="json") for entry in ranking]
    else:
        raise ValueError(f"Unknown resource {resource}")
    return [serialize_record(resource, record) for record in records]


def event_messages(events: Iterable[ChangeEvent]) -> tuple[list[tuple[str, Any]], list[Resource]]:
    """Split events into per-record messages and the resources needing a fresh snapshot.

    Snapshots are deduplicated and the ranking, if affected, always comes last.
    """
    messages = []
    snapshots: list[Resource] = []
    ranking = False
    for event in events:
        if event.kind == ChangeKind.RANKING_CHANGED:
            ranking = True
            continue
        name = f"{SINGULAR_NAMES[event.resource]}_{event.kind.value}"
        if event.kind == ChangeKind.DELETED:
            messages.append((name, dict(event.payload or {})))
        else:
            messages.append((name, serialize_record(event.resource, event.payload)))
        if event.resource not in snapshots:
            snapshots.append(event.resource)
    if ranking:
        snapshots.append(Resource.RANKING)
    return messages, snapshots


class Notifier:
    """WebSocket connection manager and change-event dispatcher"""

    def __init__(self):
        self.active_connections: set[WebSocket] = set()
        self.groups: dict[str, set[WebSocket]] = defaultdict(set)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.active_connections.add(websocket)
        logger.info(f"Client connected ({len(self.active_connections)} open)")
        await self.send(websocket, "connected", {
            "message": "Conectado ao servidor O Quilo é Nosso 2025",
            "timestamp": isoformat_utc(),
        })

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket not in self.active_connections:
            return
        self.active_connections.discard(websocket)
        for members in self.groups.values():
            members.discard(websocket)
        logger.info(f"Client disconnected ({len(self.active_connections)} open)")

    def join(self, websocket: WebSocket, group: str) -> None:
        self.groups[group].add(websocket)
        logger.info(f"Client joined group '{group}' ({len(self.groups[group])} members)")

    async def send(self, websocket: WebSocket, event: str, data: Any) -> bool:
        try:
            await asyncio.wait_for(
                websocket.send_json({"event": event, "data": jsonable_encoder(data)}),
                timeout=SEND_TIMEOUT,
            )
            return True
        except asyncio.TimeoutError:
            logger.warning(f"Dropping connection that did not accept '{event}' within {SEND_TIMEOUT}s")
            self.disconnect(websocket)
            return False
        except Exception as e:
            logger.warning(f"Dropping connection after failed send of '{event}': {e}")
            self.disconnect(websocket)
            return False

    async def broadcast(self, event: str, data: Any, group: Optional[str] = None) -> int:
        """Send to every connection (or one group) concurrently. Returns how many received it."""
        targets = self.groups.get(group, set()) if group else self.active_connections
        data = jsonable_encoder(data)
        results = await asyncio.gather(*(self.send(websocket, event, data) for websocket in list(targets)))
        return sum(results)

    async def dispatch(self, events: Iterable[ChangeEvent], db: AsyncSession) -> None:
        """Fan out the events of a committed mutation"""
        if not self.active_connections:
            return
        try:
            messages, snapshots = event_messages(events)
            for name, data in messages:
                await self.broadcast(name, data)
            for resource in snapshots:
                await self.broadcast(f"{resource.value}_updated", await load_snapshot(db, resource))
        except SQLAlchemyError as e:
            logger.error(f"Could not load live-update payload: {e}")

    async def handle_message(
        self, websocket: WebSocket, raw: str, session_factory: async_sessionmaker
    ) -> None:
        """React to a client message: group joins and snapshot requests"""
        message = safe_json_parse(raw)
        if not isinstance(message, dict) or "event" not in message:
            await self.send(websocket, "error", {"message": "Mensagem inválida"})
            return

        event = message["event"]
        if event in GROUPS:
            self.join(websocket, GROUPS[event])
        elif event == "request_data":
            await self._send_snapshot(websocket, message.get("data"), session_factory)
        else:
            await self.send(websocket, "error", {"message": f"Evento não reconhecido: {event}"})

    async def _send_snapshot(self, websocket: WebSocket, name, session_factory: async_sessionmaker) -> None:
        try:
            resource = Resource(name)
        except ValueError:
            await self.send(websocket, "error", {"message": "Tipo de dados não reconhecido"})
            return

        try:
            async with session_factory() as session:
                data = await load_snapshot(session, resource)
        except SQLAlchemyError as e:
            logger.error(f"Snapshot of {resource.value} failed: {e}")
            await self.send(websocket, "error", {"message": "Erro ao buscar dados"})
            return
        await self.send(websocket, f"{resource.value}_updated", data)


notifier = Notifier()


def get_notifier() -> Notifier:
    """Dependency for the process-wide notifier"""
    return notifier

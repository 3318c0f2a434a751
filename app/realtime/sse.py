import asyncio
import json
import logging
from typing import Any, Dict, Set

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sse_starlette.sse import EventSourceResponse

from app.api.deps import get_db, get_membership
from app.core.permissions import Membership
from app.realtime.outbox import Outbox

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["realtime"])


class GroupChannels:
    """Un canal por grupo: set de colas, una por cliente conectado."""

    def __init__(self) -> None:
        self._subscribers: Dict[int, Set[asyncio.Queue]] = {}

    def subscribe(self, group_id: int) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers.setdefault(group_id, set()).add(queue)
        return queue

    def unsubscribe(self, group_id: int, queue: asyncio.Queue) -> None:
        subs = self._subscribers.get(group_id)
        if not subs:
            return
        subs.discard(queue)
        if not subs:
            self._subscribers.pop(group_id, None)

    def subscriber_count(self, group_id: int) -> int:
        return len(self._subscribers.get(group_id, ()))

    async def broadcast(self, group_id: int, event_type: str, payload: Dict[str, Any]) -> int:
        delivered = 0
        dead = []
        for q in self._subscribers.get(group_id, set()):
            try:
                q.put_nowait({"event": event_type, "data": payload})
                delivered += 1
            except Exception:
                dead.append(q)

        for q in dead:
            self.unsubscribe(group_id, q)

        return delivered


channels = GroupChannels()


async def deliver(outbox: Outbox, target: GroupChannels = channels) -> None:
    # Corre como background task: si falla, el mensaje ya está guardado
    for item in outbox.drain():
        try:
            n = await target.broadcast(item.group_id, item.event, item.payload)
            logger.debug("Broadcast %s to group %s reached %d clients", item.event, item.group_id, n)
        except Exception:
            logger.exception("Broadcast %s to group %s failed", item.event, item.group_id)


async def event_stream(group_id: int, hub: GroupChannels = channels):
    """Cola propia mientras el cliente siga conectado; al cortar se desuscribe."""
    queue = hub.subscribe(group_id)
    try:
        while True:
            msg = await queue.get()
            yield {
                "event": msg["event"],
                "data": json.dumps(msg["data"], ensure_ascii=False),
            }
    except asyncio.CancelledError:
        pass
    finally:
        hub.unsubscribe(group_id, queue)


@router.get("/groups/{group_id}")
async def group_events(
    membership: Membership = Depends(get_membership),
    db: Session = Depends(get_db),
):
    group_id = membership.group_id
    # 🔴 el stream no termina nunca: soltar la conexión del pool antes de abrirlo
    db.close()
    return EventSourceResponse(event_stream(group_id))

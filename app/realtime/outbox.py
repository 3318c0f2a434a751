from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class PendingBroadcast:
    group_id: int
    event: str
    payload: Dict[str, Any]


@dataclass
class Outbox:
    """Broadcasts pendientes de una request. Se vacían después de responder."""

    pending: List[PendingBroadcast] = field(default_factory=list)

    def record(self, group_id: int, event: str, payload: Dict[str, Any]) -> None:
        self.pending.append(PendingBroadcast(group_id, event, payload))

    def drain(self) -> List[PendingBroadcast]:
        items, self.pending = self.pending, []
        return items


def get_outbox() -> Outbox:
    # FastAPI cachea la dependencia por request: ruta y servicio ven la misma
    return Outbox()

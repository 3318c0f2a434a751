import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import NotFound, ValidationFailed
from app.core.permissions import Membership, require
from app.models.message import Message
from app.models.user import User
from app.realtime.outbox import Outbox

logger = logging.getLogger(__name__)

MESSAGE_EVENT = "message"


def _utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso_z_from_utc_naive(dt: datetime) -> str:
    return dt.replace(tzinfo=timezone.utc).isoformat().replace("+00:00", "Z")


def _check_content(content: str | None) -> str:
    # se valida sin espacios, pero se guarda tal cual lo escribió el usuario
    if not (content or "").strip():
        raise ValidationFailed("El mensaje no puede estar vacío")
    return content


class MessageService:
    def __init__(self, db: Session, outbox: Outbox | None = None):
        self.db = db
        self.outbox = outbox if outbox is not None else Outbox()

    def _get_in_group(self, membership: Membership, message_id: int) -> Message:
        message = self.db.execute(
            select(Message).where(
                Message.id == message_id,
                Message.group_id == membership.group_id,
            )
        ).scalar_one_or_none()
        if not message:
            raise NotFound("Mensaje no encontrado")
        return message

    def list_messages(self, membership: Membership) -> List[Message]:
        require(membership, "message", "read")
        stmt = (
            select(Message)
            .where(Message.group_id == membership.group_id)
            .order_by(Message.sent_at.asc(), Message.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_message(self, membership: Membership, message_id: int) -> Message:
        require(membership, "message", "read")
        return self._get_in_group(membership, message_id)

    def create_message(self, membership: Membership, content: str) -> Message:
        require(membership, "message", "create")
        message = Message(
            group_id=membership.group_id,
            sender_id=membership.user_id,
            content=_check_content(content),
            sent_at=_utc_now_naive(),
            edited=False,
        )
        self.db.add(message)
        self.db.commit()
        self.db.refresh(message)

        sender = self.db.get(User, membership.user_id)
        self.outbox.record(
            membership.group_id,
            MESSAGE_EVENT,
            {
                "id": message.id,
                "group_id": message.group_id,
                "content": message.content,
                "sender": sender.display_name if sender else None,
                "sender_id": message.sender_id,
                "date": _iso_z_from_utc_naive(message.sent_at),
            },
        )

        logger.info("Message %s created in group %s by user %s", message.id, message.group_id, message.sender_id)
        return message

    def update_message(self, membership: Membership, message_id: int, content: str) -> Message:
        message = self._get_in_group(membership, message_id)
        # solo el autor edita; el admin NO se salta esto (borrar sí puede)
        require(membership, "message", "update", owner_id=message.sender_id)

        message.content = _check_content(content)
        message.edited = True
        self.db.commit()
        self.db.refresh(message)
        return message

    def delete_message(self, membership: Membership, message_id: int) -> None:
        message = self._get_in_group(membership, message_id)
        require(membership, "message", "delete", owner_id=message.sender_id)

        self.db.delete(message)
        self.db.commit()
        logger.info("Message %s deleted from group %s by user %s", message_id, membership.group_id, membership.user_id)

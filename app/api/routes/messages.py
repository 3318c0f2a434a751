from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Response
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_membership
from app.core.permissions import Membership
from app.realtime.outbox import Outbox, get_outbox
from app.realtime.sse import deliver
from app.schemas.common import Envelope
from app.schemas.message import MessageCreate, MessagePublic, MessageUpdate
from app.services.messages import MessageService

router = APIRouter(prefix="/messages", tags=["messages"])


def get_message_service(
    db: Session = Depends(get_db),
    outbox: Outbox = Depends(get_outbox),
) -> MessageService:
    return MessageService(db, outbox)


@router.get("/{group_id}", response_model=Envelope[List[MessagePublic]])
def list_messages(
    membership: Membership = Depends(get_membership),
    service: MessageService = Depends(get_message_service),
):
    messages = service.list_messages(membership)
    return Envelope(data=[MessagePublic.model_validate(m) for m in messages])


@router.get("/{group_id}/{message_id}", response_model=Envelope[MessagePublic])
def get_message(
    message_id: int,
    membership: Membership = Depends(get_membership),
    service: MessageService = Depends(get_message_service),
):
    message = service.get_message(membership, message_id)
    return Envelope(data=MessagePublic.model_validate(message))


@router.post("/{group_id}", response_model=Envelope[MessagePublic], status_code=201)
def create_message(
    payload: MessageCreate,
    background_tasks: BackgroundTasks,
    membership: Membership = Depends(get_membership),
    service: MessageService = Depends(get_message_service),
    outbox: Outbox = Depends(get_outbox),
):
    message = service.create_message(membership, payload.content)

    # 🔴 realtime: se emite después de responder, nunca bloquea el guardado
    background_tasks.add_task(deliver, outbox)

    return Envelope(data=MessagePublic.model_validate(message))


@router.patch("/{group_id}/{message_id}", response_model=Envelope[MessagePublic])
def update_message(
    message_id: int,
    payload: MessageUpdate,
    membership: Membership = Depends(get_membership),
    service: MessageService = Depends(get_message_service),
):
    message = service.update_message(membership, message_id, payload.content)
    return Envelope(data=MessagePublic.model_validate(message))


@router.delete("/{group_id}/{message_id}", status_code=204)
def delete_message(
    message_id: int,
    membership: Membership = Depends(get_membership),
    service: MessageService = Depends(get_message_service),
):
    service.delete_message(membership, message_id)
    return Response(status_code=204)

from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_membership
from app.core.auth import get_current_user
from app.core.permissions import Membership
from app.models.user import User
from app.schemas.common import Envelope
from app.schemas.group import GroupCreate, GroupPublic
from app.schemas.invite import InviteCreateRequest, InvitePublic
from app.services.groups import GroupService


router = APIRouter(prefix="/groups", tags=["groups"])


def get_group_service(db: Session = Depends(get_db)) -> GroupService:
    return GroupService(db)


@router.post("", response_model=Envelope[GroupPublic], status_code=201)
def create_group(
    payload: GroupCreate,
    current_user: User = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    group = service.create_group(current_user, payload.name)
    return Envelope(data=service.to_public(group))


@router.get("", response_model=Envelope[List[GroupPublic]])
def list_my_groups(
    current_user: User = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    groups = service.list_groups_for(current_user.id)
    return Envelope(data=[service.to_public(g) for g in groups])


# ✅ IMPORTANTE: antes que /{group_id}
@router.get("/invitations", response_model=Envelope[List[GroupPublic]])
def list_my_invitations(
    current_user: User = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    groups = service.list_invitations_for(current_user.id)
    return Envelope(data=[service.to_public(g) for g in groups])


@router.get("/{group_id}", response_model=Envelope[GroupPublic])
def get_group(
    membership: Membership = Depends(get_membership),
    service: GroupService = Depends(get_group_service),
):
    return Envelope(data=service.to_public(service.get_group(membership)))


@router.post("/{group_id}/invites", response_model=Envelope[InvitePublic], status_code=201)
def create_invite(
    payload: InviteCreateRequest,
    membership: Membership = Depends(get_membership),
    service: GroupService = Depends(get_group_service),
):
    invite = service.invite(membership, payload.user_id)
    return Envelope(data=InvitePublic.model_validate(invite))


@router.post("/{group_id}/join", response_model=Envelope[GroupPublic])
def accept_invite(
    group_id: int,
    current_user: User = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
):
    group = service.accept_invite(current_user, group_id)
    return Envelope(data=service.to_public(group))


@router.delete("/{group_id}/members/{user_id}", status_code=204)
def remove_member(
    user_id: int,
    membership: Membership = Depends(get_membership),
    service: GroupService = Depends(get_group_service),
):
    service.remove_member(membership, user_id)
    return Response(status_code=204)

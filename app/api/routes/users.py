from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.auth import get_current_user
from app.core.errors import NotFound
from app.models.user import User
from app.schemas.common import Envelope
from app.schemas.user import UserPublic


router = APIRouter(prefix="/users", tags=["users"])

@router.get("", response_model=Envelope[UserPublic])
def me(user: User = Depends(get_current_user)):
    return Envelope(data=UserPublic.model_validate(user))

@router.get("/all", response_model=Envelope[List[UserPublic]])
def list_users(
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    users = db.execute(select(User).order_by(User.username.asc())).scalars().all()
    return Envelope(data=[UserPublic.model_validate(u) for u in users])

@router.get("/{user_id}", response_model=Envelope[UserPublic])
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_user),
):
    user = db.get(User, user_id)
    if not user:
        raise NotFound("Usuario no encontrado")
    return Envelope(data=UserPublic.model_validate(user))

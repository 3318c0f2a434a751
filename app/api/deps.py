from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.auth import get_current_user
from app.core.database import get_db
from app.core.permissions import Membership, authorize
from app.models.user import User

__all__ = ["get_db", "get_membership"]


# ✅ Se evalúa en cada request: la pertenencia al grupo nunca se cachea
def get_membership(
    group_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Membership:
    return authorize(db, current_user.id, group_id)

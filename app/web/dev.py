import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import select

from app.api.deps import get_db
from app.core.config import settings
from app.core.errors import NotFound, ValidationFailed
from app.core.security import create_access_token
from app.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dev", tags=["dev"])


def _only_dev():
    # Activa DEV=true en .env
    if getattr(settings, "DEV", False) is not True:
        raise NotFound("Not found")


@router.get("/login")
def dev_login(
    username: str,
    display_name: str | None = None,
    db: Session = Depends(get_db),
    _=Depends(_only_dev),
):
    # Sustituye al proveedor OAuth: crea o reutiliza el usuario y abre sesión
    username = username.strip()
    if not username:
        raise ValidationFailed("username vacío")

    user = db.execute(select(User).where(User.username == username)).scalar_one_or_none()
    if not user:
        user = User(username=username, display_name=(display_name or username).strip())
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Dev user %s created (id=%s)", username, user.id)

    token = create_access_token(str(user.id))
    resp = JSONResponse({"success": True, "data": {"access_token": token, "user_id": user.id}})
    resp.set_cookie("access_token", token, httponly=True, samesite="lax")
    return resp


@router.get("/logout")
def dev_logout(_=Depends(_only_dev)):
    resp = JSONResponse({"success": True})
    resp.delete_cookie("access_token")
    return resp

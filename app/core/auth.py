from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import Unauthorized
from app.core.security import decode_access_token
from app.models.user import User

security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    # Bearer primero; si no hay, cookie de sesión (la pone /dev/login)
    token = creds.credentials if creds is not None else request.cookies.get("access_token")
    if not token:
        raise Unauthorized("Falta token de sesión")

    user_id = decode_access_token(token)
    if user_id is None:
        raise Unauthorized("Token inválido o expirado")

    user = db.get(User, user_id)
    if not user:
        raise Unauthorized("Usuario no existe")

    return user

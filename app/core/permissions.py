import logging
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, NotFound
from app.models.group import Group
from app.models.membership import GroupMember

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Membership:
    """
    Prueba de que user_id es miembro de group en ESTA request.
    Los servicios la reciben ya verificada y no vuelven a consultar.
    """

    group: Group
    user_id: int

    @property
    def group_id(self) -> int:
        return self.group.id

    @property
    def is_admin(self) -> bool:
        return self.group.admin_id == self.user_id


class Relationship(str, Enum):
    MEMBER = "member"
    AUTHOR = "author"
    AUTHOR_OR_ADMIN = "author_or_admin"


# (recurso, acción) -> relación que necesita el caller con el recurso
POLICY: dict[tuple[str, str], Relationship] = {
    ("message", "read"): Relationship.MEMBER,
    ("message", "create"): Relationship.MEMBER,
    ("message", "update"): Relationship.AUTHOR,
    ("message", "delete"): Relationship.AUTHOR_OR_ADMIN,
    ("task", "read"): Relationship.MEMBER,
    ("task", "create"): Relationship.MEMBER,
    ("task", "update"): Relationship.MEMBER,
    ("task", "delete"): Relationship.MEMBER,
    ("group", "read"): Relationship.MEMBER,
    ("group", "invite"): Relationship.MEMBER,
    # "autor" aquí es el propio usuario a expulsar (salirse uno mismo)
    ("group", "remove_member"): Relationship.AUTHOR_OR_ADMIN,
}


def is_member(db: Session, group_id: int, user_id: int) -> bool:
    m = db.execute(
        select(GroupMember.id).where(
            GroupMember.group_id == group_id,
            GroupMember.user_id == user_id,
        )
    ).first()
    return m is not None


def authorize(db: Session, caller_id: int, group_id: int) -> Membership:
    group = db.get(Group, group_id)
    if not group:
        raise NotFound("Grupo no encontrado")

    if not is_member(db, group_id, caller_id):
        logger.warning("User %s is not a member of group %s", caller_id, group_id)
        raise Forbidden("Debes ser miembro del grupo")

    return Membership(group=group, user_id=caller_id)


def is_admin_or_owner(membership: Membership, resource_owner_id: int | None) -> bool:
    return membership.is_admin or resource_owner_id == membership.user_id


def require(
    membership: Membership,
    resource: str,
    action: str,
    owner_id: int | None = None,
) -> None:
    relationship = POLICY[(resource, action)]

    if relationship is Relationship.MEMBER:
        allowed = True
    elif relationship is Relationship.AUTHOR:
        allowed = owner_id is not None and owner_id == membership.user_id
    else:
        allowed = is_admin_or_owner(membership, owner_id)

    if not allowed:
        logger.warning(
            "Denied %s:%s for user %s in group %s",
            resource, action, membership.user_id, membership.group_id,
        )
        raise Forbidden("No autorizado")

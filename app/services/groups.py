import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, NotFound, ValidationFailed
from app.core.permissions import Membership, is_member, require
from app.models.group import Group
from app.models.invite import GroupInvite
from app.models.membership import GroupMember
from app.models.user import User
from app.schemas.group import GroupPublic

logger = logging.getLogger(__name__)


class GroupService:
    def __init__(self, db: Session):
        self.db = db

    def to_public(self, group: Group) -> GroupPublic:
        members = self.db.execute(
            select(GroupMember.user_id)
            .where(GroupMember.group_id == group.id)
            .order_by(GroupMember.user_id.asc())
        ).scalars().all()
        invitees = self.db.execute(
            select(GroupInvite.user_id)
            .where(GroupInvite.group_id == group.id)
            .order_by(GroupInvite.user_id.asc())
        ).scalars().all()
        return GroupPublic(
            id=group.id,
            name=group.name,
            admin_id=group.admin_id,
            members=list(members),
            invitees=list(invitees),
        )

    def create_group(self, user: User, name: str) -> Group:
        name = (name or "").strip()
        if not name:
            raise ValidationFailed("El grupo necesita nombre")

        group = Group(name=name, admin_id=user.id)
        self.db.add(group)
        self.db.flush()

        # el admin entra como miembro en la misma transacción
        self.db.add(GroupMember(group_id=group.id, user_id=user.id))
        self.db.commit()
        self.db.refresh(group)

        logger.info("Group %s created by user %s", group.id, user.id)
        return group

    def list_groups_for(self, user_id: int) -> List[Group]:
        return list(self.db.execute(
            select(Group)
            .join(GroupMember, GroupMember.group_id == Group.id)
            .where(GroupMember.user_id == user_id)
            .order_by(Group.name.asc())
        ).scalars().all())

    def list_invitations_for(self, user_id: int) -> List[Group]:
        return list(self.db.execute(
            select(Group)
            .join(GroupInvite, GroupInvite.group_id == Group.id)
            .where(GroupInvite.user_id == user_id)
            .order_by(Group.name.asc())
        ).scalars().all())

    def get_group(self, membership: Membership) -> Group:
        require(membership, "group", "read")
        return membership.group

    def invite(self, membership: Membership, user_id: int) -> GroupInvite:
        require(membership, "group", "invite")

        if not self.db.get(User, user_id):
            raise NotFound("Usuario no encontrado")

        if is_member(self.db, membership.group_id, user_id):
            raise ValidationFailed("Ya es miembro del grupo")

        existing = self.db.execute(
            select(GroupInvite).where(
                GroupInvite.group_id == membership.group_id,
                GroupInvite.user_id == user_id,
            )
        ).scalar_one_or_none()
        if existing:
            raise ValidationFailed("Ya está invitado")

        invite = GroupInvite(
            group_id=membership.group_id,
            user_id=user_id,
            invited_by=membership.user_id,
        )
        self.db.add(invite)
        self.db.commit()
        self.db.refresh(invite)
        return invite

    def accept_invite(self, user: User, group_id: int) -> Group:
        group = self.db.get(Group, group_id)
        if not group:
            raise NotFound("Grupo no encontrado")

        invite = self.db.execute(
            select(GroupInvite).where(
                GroupInvite.group_id == group_id,
                GroupInvite.user_id == user.id,
            )
        ).scalar_one_or_none()
        if not invite:
            raise Forbidden("No tienes invitación para este grupo")

        self.db.delete(invite)
        if not is_member(self.db, group_id, user.id):
            self.db.add(GroupMember(group_id=group_id, user_id=user.id))
        self.db.commit()

        logger.info("User %s joined group %s", user.id, group_id)
        return group

    def remove_member(self, membership: Membership, user_id: int) -> None:
        # admin expulsa a cualquiera; un miembro solo puede salirse él mismo
        require(membership, "group", "remove_member", owner_id=user_id)

        if user_id == membership.group.admin_id:
            raise ValidationFailed("No se puede quitar al admin del grupo")

        target = self.db.execute(
            select(GroupMember).where(
                GroupMember.group_id == membership.group_id,
                GroupMember.user_id == user_id,
            )
        ).scalar_one_or_none()
        if not target:
            raise NotFound("Usuario no es miembro")

        self.db.delete(target)
        self.db.commit()
        logger.info("User %s removed from group %s by user %s", user_id, membership.group_id, membership.user_id)

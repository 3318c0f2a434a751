import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import NotFound, ValidationFailed
from app.core.permissions import Membership, is_member, require
from app.models.task import Task

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"name", "description", "column_name", "assignee_id", "tags", "due_date"}
NOT_NULL_FIELDS = {"name", "description", "column_name", "tags"}


class TaskService:
    def __init__(self, db: Session):
        self.db = db

    def _get_in_group(self, membership: Membership, task_id: int) -> Task:
        task = self.db.execute(
            select(Task).where(
                Task.id == task_id,
                Task.group_id == membership.group_id,
            )
        ).scalar_one_or_none()
        if not task:
            raise NotFound("Tarea no encontrada")
        return task

    def _validate(self, membership: Membership, fields: Dict[str, Any]) -> None:
        for key in NOT_NULL_FIELDS & fields.keys():
            if fields[key] is None:
                raise ValidationFailed(f"'{key}' no puede ser null")

        if "name" in fields:
            fields["name"] = fields["name"].strip()
            if not fields["name"]:
                raise ValidationFailed("La tarea necesita nombre")

        if "column_name" in fields:
            col = fields["column_name"]
            if isinstance(col, bool) or not isinstance(col, int) or col < 1:
                raise ValidationFailed("column_name debe ser un entero >= 1")

        assignee_id = fields.get("assignee_id")
        if assignee_id is not None and not is_member(self.db, membership.group_id, assignee_id):
            raise ValidationFailed("El asignado debe ser miembro del grupo")

    def list_tasks(self, membership: Membership) -> List[Task]:
        require(membership, "task", "read")
        stmt = select(Task).where(Task.group_id == membership.group_id).order_by(Task.id.asc())
        return list(self.db.execute(stmt).scalars().all())

    def get_task(self, membership: Membership, task_id: int) -> Task:
        require(membership, "task", "read")
        return self._get_in_group(membership, task_id)

    def create_task(
        self,
        membership: Membership,
        name: str,
        description: str = "",
        column_name: int = 1,
        assignee_id: Optional[int] = None,
        tags: Optional[List[str]] = None,
        due_date: Optional[date] = None,
    ) -> Task:
        require(membership, "task", "create")
        fields = {
            "name": name,
            "description": description,
            "column_name": column_name,
            "assignee_id": assignee_id,
            "tags": list(tags or []),
            "due_date": due_date,
        }
        self._validate(membership, fields)

        task = Task(group_id=membership.group_id, **fields)
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)

        logger.info("Task %s created in group %s (column %s)", task.id, task.group_id, task.column_name)
        return task

    def update_task(self, membership: Membership, task_id: int, fields: Dict[str, Any]) -> Task:
        require(membership, "task", "update")
        task = self._get_in_group(membership, task_id)

        unknown = fields.keys() - UPDATABLE_FIELDS
        if unknown:
            raise ValidationFailed(f"Campos no editables: {', '.join(sorted(unknown))}")

        fields = dict(fields)
        self._validate(membership, fields)
        for key, value in fields.items():
            setattr(task, key, list(value) if key == "tags" else value)

        self.db.commit()
        self.db.refresh(task)
        return task

    def delete_task(self, membership: Membership, task_id: int) -> None:
        require(membership, "task", "delete")
        task = self._get_in_group(membership, task_id)

        self.db.delete(task)
        self.db.commit()
        logger.info("Task %s deleted from group %s by user %s", task_id, membership.group_id, membership.user_id)

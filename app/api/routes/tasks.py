from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_membership
from app.core.permissions import Membership
from app.schemas.common import Envelope
from app.schemas.task import TaskCreate, TaskPublic, TaskUpdate
from app.services.tasks import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


def get_task_service(db: Session = Depends(get_db)) -> TaskService:
    return TaskService(db)


@router.get("/{group_id}", response_model=Envelope[List[TaskPublic]])
def list_tasks(
    membership: Membership = Depends(get_membership),
    service: TaskService = Depends(get_task_service),
):
    tasks = service.list_tasks(membership)
    return Envelope(data=[TaskPublic.model_validate(t) for t in tasks])


@router.get("/{group_id}/{task_id}", response_model=Envelope[TaskPublic])
def get_task(
    task_id: int,
    membership: Membership = Depends(get_membership),
    service: TaskService = Depends(get_task_service),
):
    return Envelope(data=TaskPublic.model_validate(service.get_task(membership, task_id)))


@router.post("/{group_id}", response_model=Envelope[TaskPublic], status_code=201)
def create_task(
    payload: TaskCreate,
    membership: Membership = Depends(get_membership),
    service: TaskService = Depends(get_task_service),
):
    task = service.create_task(
        membership,
        name=payload.name,
        description=payload.description,
        column_name=payload.column_name,
        assignee_id=payload.assignee_id,
        tags=payload.tags,
        due_date=payload.due_date,
    )
    return Envelope(data=TaskPublic.model_validate(task))


@router.patch("/{group_id}/{task_id}", response_model=Envelope[TaskPublic])
def update_task(
    task_id: int,
    payload: TaskUpdate,
    membership: Membership = Depends(get_membership),
    service: TaskService = Depends(get_task_service),
):
    # solo los campos que mandó el cliente (mover de columna = {"column_name": 2})
    task = service.update_task(membership, task_id, payload.model_dump(exclude_unset=True))
    return Envelope(data=TaskPublic.model_validate(task))


@router.delete("/{group_id}/{task_id}", status_code=204)
def delete_task(
    task_id: int,
    membership: Membership = Depends(get_membership),
    service: TaskService = Depends(get_task_service),
):
    service.delete_task(membership, task_id)
    return Response(status_code=204)

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, field_validator


def _split_tags(value):
    # el tablero manda "bug, ui" como texto; también aceptamos lista
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    return value


class TaskCreate(BaseModel):
    name: str
    description: str = ""
    column_name: int = 1
    assignee_id: Optional[int] = None
    tags: List[str] = []
    due_date: Optional[date] = None

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value):
        return _split_tags(value)


class TaskUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    column_name: Optional[int] = None
    assignee_id: Optional[int] = None
    tags: Optional[List[str]] = None
    due_date: Optional[date] = None

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value):
        return _split_tags(value)


class TaskPublic(BaseModel):
    id: int
    group_id: int
    name: str
    description: str
    column_name: int
    assignee_id: Optional[int] = None
    tags: List[str] = []
    due_date: Optional[date] = None

    class Config:
        from_attributes = True

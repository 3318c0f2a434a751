from typing import List

from pydantic import BaseModel

class GroupCreate(BaseModel):
    name: str

class GroupPublic(BaseModel):
    id: int
    name: str
    admin_id: int

    members: List[int] = []
    invitees: List[int] = []

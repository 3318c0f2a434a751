from datetime import datetime
from pydantic import BaseModel

class InviteCreateRequest(BaseModel):
    user_id: int

class InvitePublic(BaseModel):
    group_id: int
    user_id: int
    invited_by: int
    created_at: datetime

    class Config:
        from_attributes = True

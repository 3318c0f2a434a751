from datetime import datetime

from pydantic import BaseModel


class MessageCreate(BaseModel):
    content: str


class MessageUpdate(BaseModel):
    content: str


class MessagePublic(BaseModel):
    id: int
    group_id: int
    sender_id: int
    content: str
    sent_at: datetime
    edited: bool

    class Config:
        from_attributes = True

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    data: T


class ErrorBody(BaseModel):
    kind: str
    detail: str


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: ErrorBody

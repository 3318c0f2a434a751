from pydantic import BaseModel

class UserPublic(BaseModel):
    id: int
    username: str
    display_name: str

    class Config:
        from_attributes = True

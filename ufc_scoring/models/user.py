from typing import Optional
from pydantic import BaseModel, Field


class User(BaseModel):
    id: str = Field(..., alias="_id")
    username: str
    email: Optional[str] = None

    is_active: bool = True
    is_admin: bool = False

    class Config:
        populate_by_name = True

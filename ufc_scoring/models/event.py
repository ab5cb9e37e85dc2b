from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class Event(BaseModel):
    id: int
    name: str

    date: datetime

    status: str = "upcoming"  # upcoming | live | completed

    # Soft delete: los eventos "borrados" quedan con is_active=False
    # y no cuentan para estadísticas ni leaderboards
    is_active: bool = True

    picks_deadline: Optional[datetime] = None

    class Config:
        populate_by_name = True

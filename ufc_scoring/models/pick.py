from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .fight import Corner, Method, normalize_method


class PickDetail(BaseModel):
    """Predicción de un usuario para una pelea (embebida en el Pick)"""

    fight_id: int

    predicted_winner: Corner
    predicted_method: Method
    predicted_round: Optional[int] = Field(default=None, ge=1, le=5)
    predicted_time: Optional[str] = None  # "M:SS"

    points_earned: int = 0
    is_correct: bool = False
    scored_at: Optional[datetime] = None

    @field_validator("predicted_method", mode="before")
    @classmethod
    def _normalize_method(cls, value):
        return normalize_method(value)

    class Config:
        populate_by_name = True


class Pick(BaseModel):
    """Envío completo de un usuario para un evento"""

    id: str  # user_id:event_id

    user_id: str
    event_id: int

    is_submitted: bool = False
    submitted_at: Optional[datetime] = None

    is_scored: bool = False
    scored_at: Optional[datetime] = None

    # Totales derivados de details (se reescriben en cada scoring)
    total_points: int = 0
    correct_picks: int = 0
    total_picks: int = 0
    accuracy: float = 0.0

    details: list[PickDetail] = []

    class Config:
        populate_by_name = True


def make_pick_id(user_id: str, event_id: int) -> str:
    return f"{user_id}:{event_id}"

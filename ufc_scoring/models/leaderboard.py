from typing import Optional
from pydantic import BaseModel


class LeaderboardEntry(BaseModel):
    """Entrada en una tabla de clasificación (resultado agregado)"""

    rank: int
    user_id: str
    username: str

    total_points: int
    correct_picks: int
    total_picks: int
    accuracy: float

    # Solo en el leaderboard global
    events_participated: Optional[int] = None
    best_event_score: Optional[int] = None
    current_streak: Optional[int] = None
    longest_streak: Optional[int] = None

    scope: str  # global | event

    class Config:
        populate_by_name = True


class Pagination(BaseModel):
    current: int
    total: int
    has_next: bool
    has_prev: bool


class LeaderboardPage(BaseModel):
    entries: list[LeaderboardEntry]
    pagination: Pagination

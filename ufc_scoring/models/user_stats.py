from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class UserStats(BaseModel):
    """
    Estadísticas acumuladas de un usuario.

    Se derivan 100% de sus picks: siempre se recalculan enteras,
    nunca se incrementan.
    """

    user_id: str

    total_picks: int = 0
    correct_picks: int = 0
    total_points: int = 0

    events_participated: int = 0
    best_event_score: int = 0

    current_streak: int = 0
    longest_streak: int = 0

    average_accuracy: float = 0.0  # porcentaje 0-100, 2 decimales

    last_updated: Optional[datetime] = None

    class Config:
        populate_by_name = True

    def numbers(self) -> dict:
        """Los campos calculados, sin timestamps (para comparar)"""
        return self.model_dump(exclude={"user_id", "last_updated"})

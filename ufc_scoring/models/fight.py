from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator

Corner = Literal["fighter1", "fighter2"]
Method = Literal["Decision", "KO/TKO", "Submission"]

DECISION = "Decision"


def normalize_method(method: Optional[str]) -> Optional[str]:
    """Normalizar método a formato estándar (KO/TKO, Submission, Decision)"""
    if method is None:
        return None

    method_upper = method.strip().upper()
    if method_upper in ["KO", "TKO", "KO/TKO"]:
        return "KO/TKO"
    elif method_upper in ["SUB", "SUBMISSION"]:
        return "Submission"
    elif method_upper in ["DEC", "DECISION"]:
        return DECISION
    else:
        return method


class FightResult(BaseModel):
    """Resultado oficial de una pelea, cargado por un admin"""

    winner: Corner
    method: Method
    round: Optional[int] = Field(default=None, ge=1, le=5)  # solo para KO/TKO y Submission
    time: Optional[str] = None  # "M:SS", solo para KO/TKO y Submission

    @field_validator("method", mode="before")
    @classmethod
    def _normalize_method(cls, value):
        return normalize_method(value)

    @property
    def is_decision(self) -> bool:
        return self.method == DECISION

    class Config:
        populate_by_name = True


class Fight(BaseModel):
    """Pelea individual dentro de la cartelera de un evento"""

    id: int
    event_id: int
    fight_number: int

    fighter1: str
    fighter2: str

    is_completed: bool = False
    result: Optional[FightResult] = None

    class Config:
        populate_by_name = True

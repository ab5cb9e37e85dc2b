"""
Scoring - Puntos de una predicción contra el resultado oficial

Sistema de puntos (por pelea):
- 3 puntos: acertar el ganador (sin ganador no hay puntos parciales)
- +1 punto: acertar el método (KO/TKO, Submission, Decision)
- +1 punto: acertar el round (solo si la pelea terminó antes de la decisión)
- +1 punto: acertar el tiempo (solo si la pelea terminó antes de la decisión)

Máximo: 4 puntos en una decisión, 6 en un finish.

Todo lo de este módulo es puro: no toca la base de datos.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Mapping, NamedTuple, Optional

from ufc_scoring.models.fight import FightResult, normalize_method
from ufc_scoring.models.pick import Pick, PickDetail

logger = logging.getLogger(__name__)

WINNER_POINTS = 3
METHOD_POINTS = 1
ROUND_POINTS = 1
TIME_POINTS = 1

_TIME_RE = re.compile(r"^\s*(\d{1,2}):([0-5]\d)\s*$")

__all__ = [
    "ScoringError",
    "FightResultMissingError",
    "PickScore",
    "normalize_method",
    "parse_fight_time",
    "max_points_for",
    "score_pick_detail",
    "result_for",
    "score_pick",
]


class ScoringError(Exception):
    """Base exception for scoring errors."""
    pass


class FightResultMissingError(ScoringError):
    """Raised when a pick detail refers to a fight without a result yet."""

    def __init__(self, fight_id: int):
        self.fight_id = fight_id
        super().__init__(f"Fight {fight_id} has no result")


class PickScore(NamedTuple):
    points: int
    is_correct: bool


def parse_fight_time(value: Optional[str]) -> Optional[int]:
    """
    "M:SS" -> segundos dentro del round

    Retorna None si el valor falta o no tiene formato válido.
    """
    if not value:
        return None

    match = _TIME_RE.match(value)
    if not match:
        return None

    minutes, seconds = match.groups()
    return int(minutes) * 60 + int(seconds)


def _times_match(predicted: Optional[str], actual: Optional[str], tolerance: int) -> bool:
    predicted_seconds = parse_fight_time(predicted)
    actual_seconds = parse_fight_time(actual)

    if predicted_seconds is None or actual_seconds is None:
        return False

    return abs(predicted_seconds - actual_seconds) <= tolerance


def max_points_for(result: FightResult) -> int:
    """Puntaje máximo posible para un resultado"""
    if result.is_decision:
        return WINNER_POINTS + METHOD_POINTS
    return WINNER_POINTS + METHOD_POINTS + ROUND_POINTS + TIME_POINTS


def score_pick_detail(
    detail: PickDetail,
    result: FightResult,
    time_tolerance_seconds: int = 0
) -> PickScore:
    """
    Calcular puntos de una predicción basado en el resultado.

    Args:
        detail: predicción (predicted_winner, predicted_method, predicted_round, predicted_time)
        result: resultado oficial (winner, method, round, time)
        time_tolerance_seconds: diferencia máxima aceptada en el tiempo

    Returns:
        PickScore(points, is_correct)
    """
    # El ganador es condición: sin ganador no hay nada más
    if detail.predicted_winner != result.winner:
        return PickScore(0, False)

    points = WINNER_POINTS

    if detail.predicted_method == result.method:
        points += METHOD_POINTS

    # En una decisión el round y el tiempo no aplican
    if not result.is_decision:
        if detail.predicted_round is not None and detail.predicted_round == result.round:
            points += ROUND_POINTS

        if _times_match(detail.predicted_time, result.time, time_tolerance_seconds):
            points += TIME_POINTS

    return PickScore(points, True)


def result_for(detail: PickDetail, results: Mapping[int, FightResult]) -> FightResult:
    """Resultado de la pelea del detail; FightResultMissingError si no hay"""
    result = results.get(detail.fight_id)
    if result is None:
        raise FightResultMissingError(detail.fight_id)
    return result


def score_pick(
    pick: Pick,
    results: Mapping[int, FightResult],
    time_tolerance_seconds: int = 0,
    scored_at: Optional[datetime] = None
) -> tuple[Pick, int]:
    """
    Puntúa todos los details de un pick y recalcula sus totales desde cero.

    Los details sin resultado se dejan en 0 y se cuentan como salteados;
    no cortan el resto del pick. Si se saltean todos, el pick queda sin
    puntuar (is_scored=False).

    Returns:
        (pick puntuado, cantidad de details salteados)
    """
    scored_at = scored_at or datetime.now(timezone.utc)
    skipped = 0
    details = []

    for detail in pick.details:
        try:
            result = result_for(detail, results)
        except FightResultMissingError as e:
            logger.warning(f"⚠️ Pick {pick.id}: {e}, skipping")
            skipped += 1
            details.append(detail.model_copy(update={
                "points_earned": 0,
                "is_correct": False,
                "scored_at": None
            }))
            continue

        score = score_pick_detail(detail, result, time_tolerance_seconds)
        details.append(detail.model_copy(update={
            "points_earned": score.points,
            "is_correct": score.is_correct,
            "scored_at": scored_at
        }))

    total_picks = len(details)
    correct_picks = sum(1 for d in details if d.is_correct)
    total_points = sum(d.points_earned for d in details)
    accuracy = round(correct_picks / total_picks * 100, 2) if total_picks > 0 else 0.0

    # Sin ningún resultado todavía el pick no cuenta como puntuado
    all_skipped = total_picks > 0 and skipped == total_picks

    scored = pick.model_copy(update={
        "details": details,
        "total_points": total_points,
        "correct_picks": correct_picks,
        "total_picks": total_picks,
        "accuracy": accuracy,
        "is_scored": not all_skipped,
        "scored_at": None if all_skipped else scored_at
    })
    return scored, skipped

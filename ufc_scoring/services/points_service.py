"""
Servicio de Puntos - Carga resultados y re-puntúa los picks de un evento
"""

import logging
from datetime import datetime, timezone
from typing import Mapping

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel, Field

from ufc_scoring.models.fight import FightResult
from ufc_scoring.repositories.event_repository import EventRepository
from ufc_scoring.repositories.fight_repository import FightRepository
from ufc_scoring.repositories.pick_repository import PickRepository
from ufc_scoring.services.scoring import max_points_for, score_pick
from ufc_scoring.services.stats_service import RecalculationSummary, UserStatsService

logger = logging.getLogger(__name__)


class PointsServiceError(Exception):
    """Base exception for points service errors."""
    pass


class EventNotFoundError(PointsServiceError):
    """Raised when event is not found."""
    pass


class FightNotFoundError(PointsServiceError):
    """Raised when fight is not found."""
    pass


class InvalidResultError(PointsServiceError):
    """Raised when a result refers to a fight outside the event."""
    pass


class EventScoringSummary(BaseModel):
    """Lo que devuelve un re-scoring de evento"""
    event_id: int
    picks_processed: int = 0
    points_distributed: int = 0
    details_scored: int = 0
    details_skipped: int = 0
    max_points: int = 0  # puntaje perfecto con los resultados cargados
    users: RecalculationSummary = Field(default_factory=RecalculationSummary)


class PointsService:
    """
    Servicio para cargar resultados y asignar puntos a los picks.

    Cada vez que cambian los resultados de un evento:
    1. Se re-puntúan TODOS los picks enviados del evento (desde cero)
    2. Se recalculan desde cero las stats de cada usuario afectado

    Nunca se suman puntos sobre lo que ya había: corregir un resultado
    deja las stats como si el resultado corregido hubiera sido el único.
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        time_tolerance_seconds: int = 0,
        batch_size: int = 100
    ):
        self.time_tolerance_seconds = time_tolerance_seconds
        self.event_repo = EventRepository(db)
        self.fight_repo = FightRepository(db)
        self.pick_repo = PickRepository(db)
        self.stats_service = UserStatsService(db, batch_size=batch_size)

    async def submit_event_results(
        self,
        event_id: int,
        results: Mapping[int, FightResult]
    ) -> EventScoringSummary:
        """
        Registrar resultados de un evento y re-puntuar.

        Args:
            event_id: evento
            results: {fight_id: FightResult}; reemplaza los resultados previos

        Valida todo antes de escribir: si alguna pelea no es del evento
        no se guarda ningún resultado.
        """
        event = await self.event_repo.get_by_id(event_id)
        if not event:
            raise EventNotFoundError(f"Event {event_id} not found")

        fights = await self.fight_repo.get_by_event(event_id)
        fight_ids = {fight.id for fight in fights}

        unknown = sorted(set(results) - fight_ids)
        if unknown:
            raise InvalidResultError(
                f"Fights {unknown} do not belong to event {event_id}"
            )

        for fight_id, result in results.items():
            await self.fight_repo.set_result(fight_id, result)

        await self.event_repo.update_status(event_id, "completed")
        logger.info(f"🥊 Stored {len(results)} results for event {event_id}")

        return await self.score_event(event_id)

    async def score_event(self, event_id: int) -> EventScoringSummary:
        """
        Re-puntuar todos los picks enviados de un evento.

        Los details sin resultado se saltean (quedan en 0) sin cortar el lote.
        Después recalcula las stats de los usuarios afectados.
        """
        event = await self.event_repo.get_by_id(event_id)
        if not event:
            raise EventNotFoundError(f"Event {event_id} not found")

        results = await self.fight_repo.get_results_for_event(event_id)
        picks = await self.pick_repo.get_submitted_for_event(event_id)

        summary = EventScoringSummary(
            event_id=event_id,
            max_points=sum(max_points_for(result) for result in results.values())
        )
        scored_at = datetime.now(timezone.utc)
        users_affected = set()

        for pick in picks:
            scored, skipped = score_pick(
                pick,
                results,
                time_tolerance_seconds=self.time_tolerance_seconds,
                scored_at=scored_at
            )
            await self.pick_repo.update_score(scored)

            summary.picks_processed += 1
            summary.points_distributed += scored.total_points
            summary.details_scored += len(scored.details) - skipped
            summary.details_skipped += skipped
            users_affected.add(scored.user_id)

        logger.info(
            f"🎯 Event {event_id}: {summary.picks_processed} picks scored, "
            f"{summary.points_distributed} points, {summary.details_skipped} details without result"
        )

        summary.users = await self.stats_service.recalculate_users(sorted(users_affected))
        return summary

    async def clear_fight_result(self, fight_id: int) -> EventScoringSummary:
        """
        Eliminar el resultado de una pelea y re-puntuar su evento.

        Los details de esa pelea vuelven a 0 y las stats se recalculan.
        """
        fight = await self.fight_repo.get_by_id(fight_id)
        if not fight:
            raise FightNotFoundError(f"Fight {fight_id} not found")

        await self.fight_repo.clear_result(fight_id)
        logger.info(f"↩️ Cleared result of fight {fight_id}")

        return await self.score_event(fight.event_id)

    async def deactivate_event(self, event_id: int) -> RecalculationSummary:
        """
        Soft delete de un evento.

        Sus picks dejan de contar, así que se recalculan los usuarios que
        participaron.
        """
        if not await self.event_repo.soft_delete(event_id):
            raise EventNotFoundError(f"Event {event_id} not found")

        logger.info(f"🗑️ Event {event_id} deactivated")
        return await self.stats_service.recalculate_event_user_stats(event_id)

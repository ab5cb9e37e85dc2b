"""
UserStatsService - Recalculates user statistics from their picks.

Stats are a pure function of the current pick data: every recalculation
reads all qualifying picks and replaces the user's stats document as a
whole. Nothing here ever increments a stored number, so running it twice
(or after a result correction) can't double count.

Qualifying picks: submitted picks that belong to an active event.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, Mapping, NamedTuple, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel

from ufc_scoring.models.event import Event
from ufc_scoring.models.pick import Pick
from ufc_scoring.models.user_stats import UserStats
from ufc_scoring.repositories.event_repository import EventRepository
from ufc_scoring.repositories.pick_repository import PickRepository
from ufc_scoring.repositories.user_repository import UserRepository
from ufc_scoring.repositories.user_stats_repository import UserStatsRepository

logger = logging.getLogger(__name__)

# Un evento cuenta como "ganado" para la racha con este % de aciertos
STREAK_WIN_ACCURACY = 50.0


class StatsServiceError(Exception):
    """Base exception for stats service errors."""
    pass


class UserNotFoundError(StatsServiceError):
    """Raised when stats are requested for a user that doesn't exist."""
    pass


class EventScore(NamedTuple):
    """Rendimiento de un usuario en un evento (para las rachas)"""
    event_id: int
    points: int
    accuracy: float
    correct_picks: int
    total_picks: int


class RecalculationError(BaseModel):
    user_id: str
    error: str


class RecalculationSummary(BaseModel):
    """Resultado de un recálculo masivo"""
    total_users: int = 0
    success_count: int = 0
    error_count: int = 0
    errors: list[RecalculationError] = []


class StatsInconsistency(BaseModel):
    user_id: str
    field: str
    stored: float
    actual: float


def calculate_streaks(event_scores: Iterable[EventScore]) -> tuple[int, int]:
    """
    Calculate (current_streak, longest_streak) from events in order.

    An event is a win if accuracy >= 50% or it earned any points.
    """
    longest_streak = 0
    streak = 0

    for event_score in event_scores:
        is_win = event_score.accuracy >= STREAK_WIN_ACCURACY or event_score.points > 0

        if is_win:
            streak += 1
            longest_streak = max(longest_streak, streak)
        else:
            streak = 0

    return streak, longest_streak


def compute_user_stats(
    user_id: str,
    picks: Iterable[Pick],
    events_by_id: Mapping[int, Event]
) -> UserStats:
    """
    Compute a user's stats from scratch.

    picks should already be the qualifying ones; picks whose event isn't in
    events_by_id are ignored. Events are walked in chronological order
    (date, then id) for the streaks.
    """
    qualifying = [p for p in picks if p.event_id in events_by_id]
    qualifying.sort(key=lambda p: (events_by_id[p.event_id].date, p.event_id))

    total_picks = 0
    correct_picks = 0
    total_points = 0
    best_event_score = 0
    event_scores = []

    for pick in qualifying:
        event_total = len(pick.details)
        event_correct = sum(1 for d in pick.details if d.is_correct)
        event_points = sum(d.points_earned for d in pick.details)

        total_picks += event_total
        correct_picks += event_correct
        total_points += event_points

        # Picks vacíos cuentan como participación pero no para rachas
        if event_total > 0:
            event_scores.append(EventScore(
                event_id=pick.event_id,
                points=event_points,
                accuracy=event_correct / event_total * 100,
                correct_picks=event_correct,
                total_picks=event_total
            ))
            best_event_score = max(best_event_score, event_points)

    current_streak, longest_streak = calculate_streaks(event_scores)

    average_accuracy = round(correct_picks / total_picks * 100, 2) if total_picks > 0 else 0.0

    return UserStats(
        user_id=user_id,
        total_picks=total_picks,
        correct_picks=correct_picks,
        total_points=total_points,
        events_participated=len(qualifying),
        best_event_score=best_event_score,
        current_streak=current_streak,
        longest_streak=longest_streak,
        average_accuracy=average_accuracy
    )


class UserStatsService:
    def __init__(self, db: AsyncIOMotorDatabase, batch_size: int = 100):
        self.batch_size = batch_size
        self.user_repo = UserRepository(db)
        self.event_repo = EventRepository(db)
        self.pick_repo = PickRepository(db)
        self.stats_repo = UserStatsRepository(db)

    async def _active_events_by_id(self) -> dict[int, Event]:
        events = await self.event_repo.get_active_events()
        return {event.id: event for event in events}

    async def _compute(
        self,
        user_id: str,
        events_by_id: Optional[Mapping[int, Event]] = None
    ) -> UserStats:
        if events_by_id is None:
            events_by_id = await self._active_events_by_id()

        picks = await self.pick_repo.get_user_picks(user_id, events_by_id.keys())
        return compute_user_stats(user_id, picks, events_by_id)

    async def recalculate_user_stats(self, user_id: str) -> UserStats:
        """
        Recalculate and replace the stats of one user.

        Raises UserNotFoundError if the user doesn't exist. Database errors
        propagate as-is; the stats document is only written once everything
        has been computed.
        """
        if not await self.user_repo.exists(user_id):
            raise UserNotFoundError(f"User {user_id} not found")

        stats = await self._compute(user_id)
        stats.last_updated = datetime.now(timezone.utc)

        await self.stats_repo.replace(stats)

        logger.info(
            f"✅ User {user_id} stats updated: points={stats.total_points} "
            f"picks={stats.correct_picks}/{stats.total_picks} "
            f"events={stats.events_participated} streak={stats.current_streak}/{stats.longest_streak}"
        )
        return stats

    async def recalculate_users(self, user_ids: Iterable[str]) -> RecalculationSummary:
        """
        Recalculate a set of users.

        A failure for one user is logged and reported in the summary;
        it doesn't stop the others.
        """
        user_ids = list(user_ids)
        summary = RecalculationSummary(total_users=len(user_ids))

        for user_id in user_ids:
            try:
                await self.recalculate_user_stats(user_id)
                summary.success_count += 1
            except Exception as e:
                logger.exception(f"❌ Failed to recalculate stats for user {user_id}")
                summary.error_count += 1
                summary.errors.append(RecalculationError(user_id=user_id, error=str(e)))

        return summary

    async def recalculate_all_user_stats(self) -> RecalculationSummary:
        """Recalculate every active user, in batches."""
        user_ids = await self.user_repo.get_active_user_ids()
        logger.info(f"🔄 Recalculating stats for {len(user_ids)} active users")

        summary = RecalculationSummary(total_users=len(user_ids))
        total_batches = (len(user_ids) + self.batch_size - 1) // self.batch_size

        for i in range(0, len(user_ids), self.batch_size):
            batch = user_ids[i:i + self.batch_size]
            logger.info(f"🔄 Processing batch {i // self.batch_size + 1}/{total_batches}")

            batch_summary = await self.recalculate_users(batch)
            summary.success_count += batch_summary.success_count
            summary.error_count += batch_summary.error_count
            summary.errors.extend(batch_summary.errors)

        logger.info(
            f"🎉 Bulk recalculation completed: {summary.success_count} ok, "
            f"{summary.error_count} failed"
        )
        return summary

    async def recalculate_event_user_stats(self, event_id: int) -> RecalculationSummary:
        """Recalculate every user that has a pick for an event."""
        user_ids = await self.pick_repo.get_user_ids_for_event(event_id)
        logger.info(f"🔄 Recalculating stats for {len(user_ids)} users of event {event_id}")
        return await self.recalculate_users(user_ids)

    async def get_user_stats(self, user_id: str) -> UserStats:
        """Stored stats of a user (zeroed if never calculated)."""
        if not await self.user_repo.exists(user_id):
            raise UserNotFoundError(f"User {user_id} not found")

        stats = await self.stats_repo.get_by_user(user_id)
        return stats or UserStats(user_id=user_id)

    async def validate_user_stats(self) -> list[StatsInconsistency]:
        """
        Compare every stored stats document against a fresh computation.

        Nothing is written; returns one entry per mismatching field.
        """
        events_by_id = await self._active_events_by_id()
        inconsistencies = []

        for stored in await self.stats_repo.get_all():
            actual = await self._compute(stored.user_id, events_by_id)
            stored_numbers = stored.numbers()

            for field, actual_value in actual.numbers().items():
                if stored_numbers[field] != actual_value:
                    inconsistencies.append(StatsInconsistency(
                        user_id=stored.user_id,
                        field=field,
                        stored=stored_numbers[field],
                        actual=actual_value
                    ))

        if inconsistencies:
            users = {i.user_id for i in inconsistencies}
            logger.warning(f"⚠️ Found {len(users)} users with inconsistent stats")
        else:
            logger.info("✅ All user stats are consistent with pick data")

        return inconsistencies

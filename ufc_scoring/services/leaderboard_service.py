"""
LeaderboardService - Serves leaderboard data from recalculated stats.

The global leaderboard reads the user_stats collection (already restricted
to active events by the recalculation); the event leaderboard reads the
scored picks of one active event.
"""

import math
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel

from ufc_scoring.models.leaderboard import LeaderboardEntry, LeaderboardPage, Pagination
from ufc_scoring.models.user_stats import UserStats
from ufc_scoring.repositories.event_repository import EventRepository
from ufc_scoring.repositories.pick_repository import PickRepository
from ufc_scoring.repositories.user_repository import UserRepository
from ufc_scoring.repositories.user_stats_repository import UserStatsRepository
from ufc_scoring.services.points_service import EventNotFoundError
from ufc_scoring.services.stats_service import UserNotFoundError

TOP_USERS = 3


class LeaderboardServiceError(Exception):
    """Base exception for leaderboard service errors."""
    pass


class InvalidPageError(LeaderboardServiceError):
    """Raised when limit or page are out of range."""
    pass


class UserRank(BaseModel):
    user_id: str
    username: str
    rank: Optional[int] = None  # None si todavía no tiene stats
    stats: UserStats


class LeaderboardSummary(BaseModel):
    total_users: int
    total_events: int
    total_picks: int
    avg_points: int
    top_users: list[LeaderboardEntry]


def _pagination(count: int, limit: int, page: int) -> Pagination:
    return Pagination(
        current=page,
        total=math.ceil(count / limit),
        has_next=page * limit < count,
        has_prev=page > 1
    )


def _check_page(limit: int, page: int) -> int:
    if limit < 1 or page < 1:
        raise InvalidPageError("limit and page must be >= 1")
    return (page - 1) * limit


class LeaderboardService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.user_repo = UserRepository(db)
        self.event_repo = EventRepository(db)
        self.pick_repo = PickRepository(db)
        self.stats_repo = UserStatsRepository(db)

    async def get_global_leaderboard(self, limit: int = 50, page: int = 1) -> LeaderboardPage:
        """
        Get global leaderboard (active users, all active events).

        Ordered by total points, then correct picks.
        """
        skip = _check_page(limit, page)

        active_ids = await self.user_repo.get_active_user_ids()
        count = await self.stats_repo.count_for_users(active_ids)
        ranked = await self.stats_repo.get_ranked(active_ids, limit=limit, skip=skip)
        users = await self.user_repo.get_by_ids(s.user_id for s in ranked)

        entries = [
            LeaderboardEntry(
                rank=skip + idx + 1,
                user_id=stats.user_id,
                username=users[stats.user_id].username,
                total_points=stats.total_points,
                correct_picks=stats.correct_picks,
                total_picks=stats.total_picks,
                accuracy=stats.average_accuracy,
                events_participated=stats.events_participated,
                best_event_score=stats.best_event_score,
                current_streak=stats.current_streak,
                longest_streak=stats.longest_streak,
                scope="global"
            )
            for idx, stats in enumerate(ranked)
        ]

        return LeaderboardPage(entries=entries, pagination=_pagination(count, limit, page))

    async def get_event_leaderboard(
        self,
        event_id: int,
        limit: int = 50,
        page: int = 1
    ) -> LeaderboardPage:
        """Get leaderboard for a specific (active) event."""
        skip = _check_page(limit, page)

        event = await self.event_repo.get_active_by_id(event_id)
        if not event:
            raise EventNotFoundError(f"Event {event_id} not found")

        count = await self.pick_repo.count_scored_for_event(event_id)
        picks = await self.pick_repo.get_scored_for_event(event_id, limit=limit, skip=skip)
        users = await self.user_repo.get_by_ids(p.user_id for p in picks)

        entries = []
        for idx, pick in enumerate(picks):
            user = users.get(pick.user_id)
            entries.append(LeaderboardEntry(
                rank=skip + idx + 1,
                user_id=pick.user_id,
                username=user.username if user else "Unknown",
                total_points=pick.total_points,
                correct_picks=pick.correct_picks,
                total_picks=pick.total_picks,
                accuracy=pick.accuracy,
                scope="event"
            ))

        return LeaderboardPage(entries=entries, pagination=_pagination(count, limit, page))

    async def get_user_rank(self, user_id: str) -> UserRank:
        """
        Get user's global rank and stats.

        Tie-breakers: total points, correct picks, total picks.
        """
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFoundError(f"User {user_id} not found")

        active_ids = set(await self.user_repo.get_active_user_ids())
        all_stats = [s for s in await self.stats_repo.get_all() if s.user_id in active_ids]
        all_stats.sort(
            key=lambda s: (s.total_points, s.correct_picks, s.total_picks),
            reverse=True
        )

        for idx, stats in enumerate(all_stats):
            if stats.user_id == user_id:
                return UserRank(user_id=user_id, username=user.username, rank=idx + 1, stats=stats)

        # Sin stats (o usuario inactivo): no rankea
        stats = await self.stats_repo.get_by_user(user_id)
        return UserRank(
            user_id=user_id,
            username=user.username,
            rank=None,
            stats=stats or UserStats(user_id=user_id)
        )

    async def get_summary(self) -> LeaderboardSummary:
        """Totals for the leaderboard header."""
        active_ids = await self.user_repo.get_active_user_ids()
        active_event_ids = await self.event_repo.get_active_event_ids()

        total_users = await self.user_repo.count_active()
        total_events = await self.event_repo.count_active()
        total_picks = await self.pick_repo.count_submitted(active_event_ids)

        active_set = set(active_ids)
        total_points = sum(
            s.total_points for s in await self.stats_repo.get_all()
            if s.user_id in active_set
        )
        avg_points = round(total_points / total_users) if total_users > 0 else 0

        top = await self.get_global_leaderboard(limit=TOP_USERS)

        return LeaderboardSummary(
            total_users=total_users,
            total_events=total_events,
            total_picks=total_picks,
            avg_points=avg_points,
            top_users=top.entries
        )

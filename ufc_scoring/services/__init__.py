from .scoring import score_pick, score_pick_detail
from .stats_service import UserStatsService
from .points_service import PointsService
from .leaderboard_service import LeaderboardService

__all__ = [
    "score_pick",
    "score_pick_detail",
    "UserStatsService",
    "PointsService",
    "LeaderboardService",
]

from .user import User
from .event import Event
from .fight import Fight, FightResult, normalize_method
from .pick import Pick, PickDetail, make_pick_id
from .user_stats import UserStats
from .leaderboard import LeaderboardEntry, LeaderboardPage, Pagination

__all__ = [
    "User",
    "Event",
    "Fight",
    "FightResult",
    "normalize_method",
    "Pick",
    "PickDetail",
    "make_pick_id",
    "UserStats",
    "LeaderboardEntry",
    "LeaderboardPage",
    "Pagination",
]

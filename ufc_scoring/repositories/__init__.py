from .event_repository import EventRepository, active_events_filter
from .fight_repository import FightRepository
from .pick_repository import PickRepository
from .user_repository import UserRepository
from .user_stats_repository import UserStatsRepository

__all__ = [
    "EventRepository",
    "active_events_filter",
    "FightRepository",
    "PickRepository",
    "UserRepository",
    "UserStatsRepository",
]

"""
📊 UserStatsRepository - Una fila de estadísticas por usuario

Las stats se escriben SIEMPRE con replace (documento completo), nunca
con $inc: así un lector ve las stats viejas o las nuevas, nunca una mezcla.
"""

from typing import Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from ufc_scoring.models.user_stats import UserStats

# Orden del leaderboard: puntos, después aciertos
LEADERBOARD_SORT = [("total_points", -1), ("correct_picks", -1), ("user_id", 1)]


class UserStatsRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["user_stats"]

    async def replace(self, stats: UserStats) -> UserStats:
        """Reemplaza (o crea) las stats del usuario en una sola escritura"""
        await self.collection.replace_one(
            {"user_id": stats.user_id},
            stats.model_dump(),
            upsert=True
        )
        return stats

    async def get_by_user(self, user_id: str) -> Optional[UserStats]:
        doc = await self.collection.find_one({"user_id": user_id})
        return UserStats(**doc) if doc else None

    async def get_all(self) -> list[UserStats]:
        cursor = self.collection.find({})
        docs = await cursor.to_list(length=None)
        return [UserStats(**doc) for doc in docs]

    async def get_ranked(
        self,
        user_ids: Iterable[str],
        limit: int = 50,
        skip: int = 0
    ) -> list[UserStats]:
        """Stats de user_ids ordenadas para el leaderboard (paginado)"""
        cursor = self.collection.find(
            {"user_id": {"$in": list(user_ids)}}
        ).sort(LEADERBOARD_SORT).skip(skip).limit(limit)

        docs = await cursor.to_list(length=None)
        return [UserStats(**doc) for doc in docs]

    async def count_for_users(self, user_ids: Iterable[str]) -> int:
        return await self.collection.count_documents({"user_id": {"$in": list(user_ids)}})

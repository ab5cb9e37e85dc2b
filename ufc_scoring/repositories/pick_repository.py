"""
🎯 PickRepository - Picks de usuarios (un documento por usuario y evento)

Las predicciones por pelea (PickDetail) viven embebidas en el pick:
scoring de un pick = un solo update del documento, detalles y totales juntos.
"""

from typing import Iterable, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from ufc_scoring.models.pick import Pick

# Orden del leaderboard de evento
EVENT_LEADERBOARD_SORT = [("total_points", -1), ("correct_picks", -1), ("user_id", 1)]


class PickRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["picks"]

    # ============================================
    # 📌 CREATE
    # ============================================

    async def create(self, pick: Pick) -> Pick:
        """
        Crea un pick

        ID compuesto: f"{user_id}:{event_id}"
        """
        pick_dict = pick.model_dump(by_alias=True)

        try:
            await self.collection.insert_one(pick_dict)
            return pick
        except DuplicateKeyError:
            raise ValueError(f"Pick {pick.id} already exists")

    # ============================================
    # 📌 READ
    # ============================================

    async def get_by_id(self, pick_id: str) -> Optional[Pick]:
        """Obtiene un pick por ID compuesto"""
        doc = await self.collection.find_one({"id": pick_id})
        return Pick(**doc) if doc else None

    async def get_submitted_for_event(self, event_id: int) -> list[Pick]:
        """🔥 Todos los picks enviados de un evento (los que se puntúan)"""
        cursor = self.collection.find({
            "event_id": event_id,
            "is_submitted": True
        }).sort("id", 1)

        docs = await cursor.to_list(length=None)
        return [Pick(**doc) for doc in docs]

    async def get_user_picks(
        self,
        user_id: str,
        event_ids: Iterable[int]
    ) -> list[Pick]:
        """
        Picks enviados de un usuario, restringidos a event_ids

        event_ids viene de EventRepository.get_active_event_ids()
        """
        cursor = self.collection.find({
            "user_id": user_id,
            "is_submitted": True,
            "event_id": {"$in": list(event_ids)}
        })

        docs = await cursor.to_list(length=None)
        return [Pick(**doc) for doc in docs]

    async def get_user_ids_for_event(self, event_id: int) -> list[str]:
        """Usuarios que tienen pick para un evento"""
        user_ids = await self.collection.distinct("user_id", {"event_id": event_id})
        return sorted(user_ids)

    async def get_scored_for_event(
        self,
        event_id: int,
        limit: int = 50,
        skip: int = 0
    ) -> list[Pick]:
        """Picks puntuados de un evento, ordenados para el leaderboard"""
        cursor = self.collection.find({
            "event_id": event_id,
            "is_submitted": True,
            "is_scored": True
        }).sort(EVENT_LEADERBOARD_SORT).skip(skip).limit(limit)

        docs = await cursor.to_list(length=None)
        return [Pick(**doc) for doc in docs]

    # ============================================
    # 📌 UPDATE
    # ============================================

    async def update_score(self, pick: Pick) -> bool:
        """
        Guarda el resultado del scoring de un pick

        Detalles y totales van en el mismo $set: nunca queda un pick
        con detalles nuevos y totales viejos.
        """
        result = await self.collection.update_one(
            {"id": pick.id},
            {
                "$set": {
                    "details": [detail.model_dump() for detail in pick.details],
                    "total_points": pick.total_points,
                    "correct_picks": pick.correct_picks,
                    "total_picks": pick.total_picks,
                    "accuracy": pick.accuracy,
                    "is_scored": pick.is_scored,
                    "scored_at": pick.scored_at
                }
            }
        )
        return result.matched_count > 0

    # ============================================
    # 📌 STATS
    # ============================================

    async def count_scored_for_event(self, event_id: int) -> int:
        return await self.collection.count_documents({
            "event_id": event_id,
            "is_submitted": True,
            "is_scored": True
        })

    async def count_submitted(self, event_ids: Iterable[int]) -> int:
        """Cuenta picks enviados en event_ids"""
        return await self.collection.count_documents({
            "is_submitted": True,
            "event_id": {"$in": list(event_ids)}
        })

"""
🥊 FightRepository - Peleas y sus resultados oficiales
"""

from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from ufc_scoring.models.fight import Fight, FightResult


class FightRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["fights"]

    # ============================================
    # 📌 CREATE
    # ============================================

    async def create(self, fight: Fight) -> Fight:
        """Crea una pelea"""
        fight_dict = fight.model_dump(by_alias=True)

        try:
            await self.collection.insert_one(fight_dict)
            return fight
        except DuplicateKeyError:
            raise ValueError(f"Fight with id {fight.id} already exists")

    # ============================================
    # 📌 READ
    # ============================================

    async def get_by_id(self, fight_id: int) -> Optional[Fight]:
        """Obtiene una pelea por ID"""
        doc = await self.collection.find_one({"id": fight_id})
        return Fight(**doc) if doc else None

    async def get_by_event(self, event_id: int) -> list[Fight]:
        """Peleas de un evento, en orden de cartelera"""
        cursor = self.collection.find({"event_id": event_id}).sort("fight_number", 1)
        docs = await cursor.to_list(length=None)
        return [Fight(**doc) for doc in docs]

    async def get_results_for_event(self, event_id: int) -> dict[int, FightResult]:
        """
        🔥 Resultados cargados de un evento: {fight_id: FightResult}

        Las peleas sin resultado no aparecen en el dict
        """
        cursor = self.collection.find({
            "event_id": event_id,
            "result": {"$ne": None}
        })
        docs = await cursor.to_list(length=None)
        return {doc["id"]: FightResult(**doc["result"]) for doc in docs}

    # ============================================
    # 📌 UPDATE
    # ============================================

    async def set_result(self, fight_id: int, result: FightResult) -> bool:
        """
        Guarda (o reemplaza) el resultado de una pelea

        El resultado anterior se pisa entero, nunca se mezcla
        """
        update = await self.collection.update_one(
            {"id": fight_id},
            {
                "$set": {
                    "result": result.model_dump(),
                    "is_completed": True
                }
            }
        )
        return update.matched_count > 0

    async def clear_result(self, fight_id: int) -> bool:
        """Elimina el resultado de una pelea"""
        update = await self.collection.update_one(
            {"id": fight_id},
            {
                "$set": {
                    "result": None,
                    "is_completed": False
                }
            }
        )
        return update.matched_count > 0

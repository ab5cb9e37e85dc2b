"""
📅 EventRepository - Acceso a eventos UFC

Además del CRUD básico, centraliza el filtro de "evento activo":
cualquier lectura que agregue picks (stats, leaderboards) pasa por acá
en vez de repetir el filtro.
"""

from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from ufc_scoring.models.event import Event


def active_events_filter() -> dict:
    """Predicado de Mongo para eventos activos (no borrados)"""
    return {"is_active": True}


class EventRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["events"]

    # ============================================
    # 📌 CREATE
    # ============================================

    async def create(self, event: Event) -> Event:
        """Crea un evento"""
        event_dict = event.model_dump(by_alias=True)

        try:
            await self.collection.insert_one(event_dict)
            return event
        except DuplicateKeyError:
            raise ValueError(f"Event with id {event.id} already exists")

    # ============================================
    # 📌 READ
    # ============================================

    async def get_by_id(self, event_id: int) -> Optional[Event]:
        """Obtiene un evento por ID (activo o no)"""
        doc = await self.collection.find_one({"id": event_id})
        return Event(**doc) if doc else None

    async def get_active_by_id(self, event_id: int) -> Optional[Event]:
        """Obtiene un evento solo si está activo"""
        doc = await self.collection.find_one({"id": event_id, **active_events_filter()})
        return Event(**doc) if doc else None

    async def get_active_events(self) -> list[Event]:
        """
        Todos los eventos activos, en orden cronológico

        Empates de fecha se ordenan por id
        """
        cursor = self.collection.find(active_events_filter())
        docs = await cursor.to_list(length=None)

        events = [Event(**doc) for doc in docs]
        events.sort(key=lambda e: (e.date, e.id))
        return events

    async def get_active_event_ids(self) -> set[int]:
        """IDs de eventos activos (para filtrar picks)"""
        cursor = self.collection.find(active_events_filter(), {"id": 1})
        docs = await cursor.to_list(length=None)
        return {doc["id"] for doc in docs}

    # ============================================
    # 📌 UPDATE
    # ============================================

    async def update_status(self, event_id: int, status: str) -> bool:
        """Cambia el estado de un evento"""
        result = await self.collection.update_one(
            {"id": event_id},
            {"$set": {"status": status}}
        )
        return result.matched_count > 0

    async def soft_delete(self, event_id: int) -> bool:
        """Marca el evento como inactivo (nunca se borra físicamente)"""
        result = await self.collection.update_one(
            {"id": event_id},
            {"$set": {"is_active": False}}
        )
        return result.matched_count > 0

    # ============================================
    # 📌 UTILITY
    # ============================================

    async def count_active(self) -> int:
        """Cuenta eventos activos"""
        return await self.collection.count_documents(active_events_filter())

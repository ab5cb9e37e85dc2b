"""
🔌 Database Connection Setup - MongoDB

Configuración centralizada para conectar a MongoDB
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from ufc_scoring.core.config import get_settings

logger = logging.getLogger(__name__)


class Database:
    """Singleton para la conexión a MongoDB"""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def connect(cls):
        """Conecta a MongoDB usando la configuración del entorno"""
        if cls.client is None:
            settings = get_settings()

            cls.client = AsyncIOMotorClient(
                settings.mongodb_uri,
                maxPoolSize=10,
                minPoolSize=2,
            )
            cls.db = cls.client[settings.mongodb_db_name]

            # Test de conexión
            await cls.client.admin.command("ping")
            logger.info(f"✅ Connected to MongoDB: {settings.mongodb_db_name}")

    @classmethod
    async def disconnect(cls):
        """Cierra la conexión"""
        if cls.client is not None:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("❌ Disconnected from MongoDB")

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        """Retorna la instancia de la base de datos"""
        if cls.db is None:
            raise RuntimeError("Database not connected. Call Database.connect() first.")
        return cls.db


# ============================================
# 🏗️ CREAR ÍNDICES (run once al deployment)
# ============================================

async def create_indexes(db: AsyncIOMotorDatabase):
    """
    Crea los índices que usan el scoring y los leaderboards

    Llamar una vez al hacer deploy (ver `ufc-scoring create-indexes`)
    """
    # Eventos: el filtro de eventos activos se usa en todas las lecturas
    await db.events.create_index("id", unique=True)
    await db.events.create_index("is_active")
    await db.events.create_index([("is_active", 1), ("date", 1)])

    # Peleas
    await db.fights.create_index("id", unique=True)
    await db.fights.create_index("event_id")
    await db.fights.create_index([("event_id", 1), ("fight_number", 1)], unique=True)

    # Picks (un pick por usuario y evento)
    await db.picks.create_index("id", unique=True)
    await db.picks.create_index([("user_id", 1), ("event_id", 1)], unique=True)
    await db.picks.create_index([("event_id", 1), ("is_submitted", 1)])
    await db.picks.create_index([("user_id", 1), ("is_submitted", 1)])

    # Usuarios
    await db.users.create_index("is_active")

    # Estadísticas (una fila por usuario)
    await db.user_stats.create_index("user_id", unique=True)
    await db.user_stats.create_index([("total_points", -1), ("correct_picks", -1)])

    logger.info("✅ Indexes created successfully")

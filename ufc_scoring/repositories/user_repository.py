"""
UserRepository - MongoDB access for users collection.
"""

from typing import Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from ufc_scoring.models.user import User


class UserRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["users"]

    async def create(self, user: User) -> User:
        """Create a new user."""
        await self.collection.insert_one(user.model_dump(by_alias=True))
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        doc = await self.collection.find_one({"_id": user_id})
        return User(**doc) if doc else None

    async def exists(self, user_id: str) -> bool:
        """Check if user exists."""
        count = await self.collection.count_documents({"_id": user_id}, limit=1)
        return count > 0

    async def get_active_user_ids(self) -> list[str]:
        """IDs of active users, in a stable order."""
        cursor = self.collection.find({"is_active": True}, {"_id": 1}).sort("_id", 1)
        docs = await cursor.to_list(length=None)
        return [doc["_id"] for doc in docs]

    async def get_by_ids(self, user_ids: Iterable[str]) -> dict[str, User]:
        """Users among user_ids, keyed by ID."""
        cursor = self.collection.find({"_id": {"$in": list(user_ids)}})
        docs = await cursor.to_list(length=None)
        return {doc["_id"]: User(**doc) for doc in docs}

    async def count_active(self) -> int:
        """Count active users."""
        return await self.collection.count_documents({"is_active": True})

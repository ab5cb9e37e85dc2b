"""
Pytest fixtures and configuration for all tests.
"""

import pytest
from datetime import datetime
from typing import AsyncGenerator, Optional
from mongomock_motor import AsyncMongoMockClient
from motor.motor_asyncio import AsyncIOMotorDatabase

from ufc_scoring.models import Event, Fight, FightResult, Pick, PickDetail, User, make_pick_id
from ufc_scoring.repositories import (
    EventRepository,
    FightRepository,
    PickRepository,
    UserRepository,
)

TEST_DB_NAME = "ufc_picks_test"

EVENT_ID = 100


@pytest.fixture(scope="function")
async def test_db() -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    """
    Provide a clean in-memory test database for each test.

    Automatically cleans up after each test.
    """
    client = AsyncMongoMockClient()
    db = client[TEST_DB_NAME]

    yield db

    # Cleanup: drop all collections after test
    collection_names = await db.list_collection_names()
    for collection_name in collection_names:
        await db[collection_name].drop()


def detail(
    fight_id: int,
    winner: str,
    method: str,
    round: Optional[int] = None,
    time: Optional[str] = None
) -> PickDetail:
    """Shortcut for an unscored pick detail."""
    return PickDetail(
        fight_id=fight_id,
        predicted_winner=winner,
        predicted_method=method,
        predicted_round=round,
        predicted_time=time
    )


class Seeder:
    """Inserts test data through the repositories."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.users = UserRepository(db)
        self.events = EventRepository(db)
        self.fights = FightRepository(db)
        self.picks = PickRepository(db)

    async def user(self, user_id: str, is_active: bool = True) -> User:
        return await self.users.create(User(
            _id=user_id,
            username=user_id.capitalize(),
            email=f"{user_id}@example.com",
            is_active=is_active
        ))

    async def event(
        self,
        event_id: int,
        date: datetime = datetime(2025, 3, 1),
        is_active: bool = True
    ) -> Event:
        return await self.events.create(Event(
            id=event_id,
            name=f"UFC {event_id}",
            date=date,
            is_active=is_active
        ))

    async def fight(
        self,
        fight_id: int,
        event_id: int,
        result: Optional[FightResult] = None
    ) -> Fight:
        return await self.fights.create(Fight(
            id=fight_id,
            event_id=event_id,
            fight_number=fight_id,
            fighter1=f"Fighter {fight_id}A",
            fighter2=f"Fighter {fight_id}B",
            is_completed=result is not None,
            result=result
        ))

    async def pick(
        self,
        user_id: str,
        event_id: int,
        details: list[PickDetail],
        is_submitted: bool = True
    ) -> Pick:
        return await self.picks.create(Pick(
            id=make_pick_id(user_id, event_id),
            user_id=user_id,
            event_id=event_id,
            is_submitted=is_submitted,
            submitted_at=datetime(2025, 2, 28) if is_submitted else None,
            details=details
        ))


@pytest.fixture
def seed(test_db) -> Seeder:
    return Seeder(test_db)


@pytest.fixture
def event_results() -> dict[int, FightResult]:
    """
    Official results for the sample card.

    Fight 1: fighter2 by KO/TKO, round 2 at 3:45
    Fight 2: fighter1 by Decision
    Fight 3: fighter1 by Submission, round 1 at 2:10
    """
    return {
        1: FightResult(winner="fighter2", method="KO/TKO", round=2, time="3:45"),
        2: FightResult(winner="fighter1", method="Decision"),
        3: FightResult(winner="fighter1", method="Submission", round=1, time="2:10"),
    }


@pytest.fixture
async def sample_event(seed):
    """
    Event 100 with three fights (no results yet) and three submitted picks.

    Against event_results:
    - alice: 6 + 4 + 6 = 16 points, 3/3 correct
    - bob:   5 + 3 + 0 = 8 points, 2/3 correct
    - carl:  0 + 0 + 4 = 4 points, 1/3 correct
    """
    for user_id in ("alice", "bob", "carl"):
        await seed.user(user_id)

    await seed.event(EVENT_ID)
    for fight_id in (1, 2, 3):
        await seed.fight(fight_id, EVENT_ID)

    await seed.pick("alice", EVENT_ID, [
        detail(1, "fighter2", "KO/TKO", 2, "3:45"),
        detail(2, "fighter1", "Decision"),
        detail(3, "fighter1", "Submission", 1, "2:10"),
    ])
    await seed.pick("bob", EVENT_ID, [
        detail(1, "fighter2", "Submission", 2, "3:45"),
        detail(2, "fighter1", "KO/TKO", 2),
        detail(3, "fighter2", "Submission", 1, "2:10"),
    ])
    await seed.pick("carl", EVENT_ID, [
        detail(1, "fighter1", "KO/TKO", 2, "3:45"),
        detail(2, "fighter2", "Decision"),
        detail(3, "fighter1", "Submission", 3),
    ])

    return EVENT_ID


@pytest.fixture
def make_detail():
    return detail

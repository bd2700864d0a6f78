import os
from datetime import datetime
from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("PLATFORM_ENVIRONMENT", "test")

# pylint: disable=wrong-import-position
import database
from testnetfaucet.repository.claim_repository import ClaimRepository
from testnetfaucet.repository.connection import SessionProvider

ELIGIBILITY_WINDOW = timedelta(hours=24)
RESERVATION_TIMEOUT = timedelta(minutes=5)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta):
        self.now = self.now + delta


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 6, 1, 12, 0, 0))


@pytest.fixture
async def session_provider(tmp_path):
    # One pooled connection, SQLite writers are serialized by the pool
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'faucet.db'}",
        pool_size=1,
        max_overflow=0,
    )
    async with engine.begin() as conn:
        await conn.run_sync(database.Base.metadata.create_all)
    yield SessionProvider(
        engine=engine,
        session_maker=async_sessionmaker(bind=engine, expire_on_commit=False),
    )
    await engine.dispose()


@pytest.fixture
def claim_repository(session_provider, clock):
    return ClaimRepository(
        session_provider,
        session_provider,
        eligibility_window=ELIGIBILITY_WINDOW,
        reservation_timeout=RESERVATION_TIMEOUT,
        clock=clock,
    )

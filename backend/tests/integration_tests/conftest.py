from collections.abc import AsyncIterator

import pytest_asyncio
from sqlalchemy import create_engine

from darts.config import config
from darts.database import database
from darts.schema import matches, metadata, participants, players, score_history, tournaments


@pytest_asyncio.fixture(loop_scope="session", scope="session", autouse=True)
async def create_tables() -> AsyncIterator[None]:
    engine = create_engine(config.database_url)
    metadata.drop_all(engine)
    metadata.create_all(engine)
    engine.dispose()

    await database.connect()
    yield
    await database.disconnect()


@pytest_asyncio.fixture(loop_scope="session", autouse=True)
async def clear_tables(create_tables: None) -> AsyncIterator[None]:
    yield
    for table in (score_history, matches, participants, tournaments, players):
        await database.execute(table.delete())

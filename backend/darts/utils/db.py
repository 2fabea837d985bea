from typing import TypeVar

from databases import Database
from pydantic import BaseModel
from sqlalchemy.sql import ClauseElement

BaseModelT = TypeVar("BaseModelT", bound=BaseModel)


async def fetch_one_parsed(
    database: Database, model: type[BaseModelT], query: ClauseElement | str, values: dict | None = None
) -> BaseModelT | None:
    record = await database.fetch_one(query, values)
    return model.model_validate(dict(record._mapping)) if record is not None else None


async def fetch_all_parsed(
    database: Database, model: type[BaseModelT], query: ClauseElement | str, values: dict | None = None
) -> list[BaseModelT]:
    records = await database.fetch_all(query, values)
    return [model.model_validate(dict(record._mapping)) for record in records]

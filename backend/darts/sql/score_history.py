from heliclockter import datetime_utc

from darts.database import database
from darts.models.db.score_history import ScoreHistory, ScoreHistoryInsertable
from darts.schema import score_history
from darts.utils.db import fetch_all_parsed, fetch_one_parsed
from darts.utils.id_types import MatchId, PlayerId
from darts.utils.types import assert_some


async def sql_create_score_history(
    match_id: MatchId, player_id: PlayerId, score: int
) -> ScoreHistory:
    values = ScoreHistoryInsertable(
        match_id=match_id, player_id=player_id, score=score, created=datetime_utc.now()
    ).model_dump()
    return assert_some(
        await fetch_one_parsed(
            database,
            ScoreHistory,
            score_history.insert().values(**values).returning(*score_history.c),
        )
    )


async def sql_get_score_history(match_id: MatchId) -> list[ScoreHistory]:
    query = (
        score_history.select()
        .where(score_history.c.match_id == match_id)
        .order_by(score_history.c.created, score_history.c.id)
    )
    return await fetch_all_parsed(database, ScoreHistory, query)

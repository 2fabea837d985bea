from heliclockter import datetime_utc

from darts.models.db.shared import BaseModelORM
from darts.utils.id_types import MatchId, PlayerId, ScoreHistoryId


class ScoreHistoryInsertable(BaseModelORM):
    match_id: MatchId
    player_id: PlayerId
    score: int
    created: datetime_utc


class ScoreHistory(ScoreHistoryInsertable):
    id: ScoreHistoryId

from heliclockter import datetime_utc
from pydantic import BaseModel

from darts.models.db.player import Player
from darts.models.db.shared import BaseModelORM
from darts.utils.id_types import ParticipantId, PlayerId, TournamentId


class ParticipantBody(BaseModel):
    player_id: PlayerId


class ParticipantInsertable(BaseModelORM):
    tournament_id: TournamentId
    player_id: PlayerId
    draw_position: int | None = None
    registered: datetime_utc


class Participant(ParticipantInsertable):
    id: ParticipantId


class ParticipantWithPlayer(Participant):
    player: Player

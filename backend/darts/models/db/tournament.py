import datetime
from enum import auto
from typing import Annotated

from heliclockter import datetime_utc
from pydantic import BaseModel, StringConstraints

from darts.models.db.shared import BaseModelORM
from darts.utils.id_types import PlayerId, TournamentId
from darts.utils.types import EnumAutoStr

TournamentName = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=128)
]


class TournamentFormat(EnumAutoStr):
    SINGLE_ELIMINATION = auto()
    DOUBLE_ELIMINATION = auto()
    POOLS = auto()


class TournamentStatus(EnumAutoStr):
    PLANNED = auto()
    IN_PROGRESS = auto()
    FINISHED = auto()


class TournamentFilter(EnumAutoStr):
    ALL = auto()
    IN_PROGRESS = auto()
    UPCOMING = auto()


class TournamentBody(BaseModelORM):
    name: TournamentName
    date: datetime.date
    format: TournamentFormat = TournamentFormat.SINGLE_ELIMINATION


class TournamentUpdateBody(BaseModel):
    name: TournamentName | None = None
    date: datetime.date | None = None
    format: TournamentFormat | None = None


class TournamentInsertable(TournamentBody):
    status: TournamentStatus = TournamentStatus.PLANNED
    current_round: int = 0
    total_rounds: int | None = None
    champion_id: PlayerId | None = None
    created: datetime_utc


class Tournament(TournamentInsertable):
    id: TournamentId

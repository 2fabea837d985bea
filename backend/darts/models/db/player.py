from enum import auto
from typing import Annotated

from heliclockter import datetime_utc
from pydantic import BaseModel, StringConstraints

from darts.models.db.shared import BaseModelORM
from darts.utils.id_types import PlayerId
from darts.utils.types import EnumAutoStr

PlayerName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]


class PlayerLevel(EnumAutoStr):
    BEGINNER = auto()
    AMATEUR = auto()
    INTERMEDIATE = auto()
    SEMI_PRO = auto()
    PROFESSIONAL = auto()


class PlayerBody(BaseModelORM):
    first_name: PlayerName
    last_name: PlayerName
    nickname: str | None = None
    level: PlayerLevel = PlayerLevel.AMATEUR
    active: bool = True


class PlayerUpdateBody(BaseModel):
    first_name: PlayerName | None = None
    last_name: PlayerName | None = None
    nickname: str | None = None
    level: PlayerLevel | None = None
    active: bool | None = None


class PlayerInsertable(PlayerBody):
    participations: int = 0
    wins: int = 0
    created: datetime_utc


class Player(PlayerInsertable):
    id: PlayerId

    @property
    def display_name(self) -> str:
        if self.nickname:
            return f"{self.first_name} '{self.nickname}' {self.last_name}"
        return f"{self.first_name} {self.last_name}"


class PlayerStatistics(BaseModel):
    player: Player
    matches_played: int
    matches_won: int
    ratio: float
    participations: int
    wins: int

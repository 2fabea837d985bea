from enum import auto
from typing import Literal

from heliclockter import datetime_utc
from pydantic import BaseModel

from darts.models.db.player import Player
from darts.models.db.shared import BaseModelORM
from darts.utils.id_types import MatchId, PlayerId, TournamentId
from darts.utils.types import EnumAutoStr

Slot = Literal[1, 2]


class MatchStatus(EnumAutoStr):
    WAITING = auto()
    ACTIVE = auto()
    FINISHED = auto()


class MatchInsertable(BaseModelORM):
    tournament_id: TournamentId
    round: int
    position: int
    player1_id: PlayerId | None = None
    player2_id: PlayerId | None = None
    player1_score: int = 0
    player2_score: int = 0
    winner_id: PlayerId | None = None
    status: MatchStatus = MatchStatus.WAITING
    scheduled_time: str
    is_bye: bool = False
    created: datetime_utc

    @property
    def player_ids(self) -> list[PlayerId]:
        return [
            player_id for player_id in (self.player1_id, self.player2_id) if player_id is not None
        ]

    @property
    def has_both_players(self) -> bool:
        return self.player1_id is not None and self.player2_id is not None

    def get_slot_of(self, player_id: PlayerId) -> Slot | None:
        if self.player1_id == player_id:
            return 1
        if self.player2_id == player_id:
            return 2
        return None

    def get_loser(self) -> PlayerId | None:
        if self.status != MatchStatus.FINISHED or self.winner_id is None or self.is_bye:
            return None
        if self.winner_id == self.player1_id:
            return self.player2_id
        return self.player1_id


class Match(MatchInsertable):
    id: MatchId


class MatchWithDetails(Match):
    player1: Player | None = None
    player2: Player | None = None
    winner: Player | None = None


class NextSlot(BaseModel):
    round: int
    position: int
    slot: Slot


class BracketRound(BaseModel):
    round: int
    matches: list[Match]


class RepechageCandidate(BaseModel):
    player: Player
    match_id: MatchId
    round: int

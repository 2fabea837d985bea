from pydantic import BaseModel

from darts.models.db.match import BracketRound, Match
from darts.models.db.participant import ParticipantWithPlayer
from darts.models.db.player import Player
from darts.models.db.tournament import Tournament


class TournamentDetails(BaseModel):
    tournament: Tournament
    participants: list[ParticipantWithPlayer]
    matches: list[Match]
    champion: Player | None = None


class TournamentBracket(BaseModel):
    tournament: Tournament
    rounds: list[BracketRound]

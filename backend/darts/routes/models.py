from typing import Generic, TypeVar

from pydantic import BaseModel

from darts.models.db.match import Match, MatchWithDetails, RepechageCandidate
from darts.models.db.participant import Participant, ParticipantWithPlayer
from darts.models.db.player import Player, PlayerStatistics
from darts.models.db.score_history import ScoreHistory
from darts.models.db.tournament import Tournament
from darts.models.db.util import TournamentBracket, TournamentDetails


class SuccessResponse(BaseModel):
    success: bool = True


DataT = TypeVar('DataT')


class DataResponse(BaseModel, Generic[DataT]):
    data: DataT


class PlayersResponse(DataResponse[list[Player]]):
    pass


class SinglePlayerResponse(DataResponse[Player]):
    pass


class PlayerStatisticsResponse(DataResponse[PlayerStatistics]):
    pass


class TournamentResponse(DataResponse[Tournament]):
    pass


class CurrentTournamentResponse(DataResponse[Tournament | None]):
    pass


class TournamentsResponse(DataResponse[list[Tournament]]):
    pass


class TournamentDetailsResponse(DataResponse[TournamentDetails]):
    pass


class TournamentBracketResponse(DataResponse[TournamentBracket]):
    pass


class ParticipantsResponse(DataResponse[list[ParticipantWithPlayer]]):
    pass


class SingleParticipantResponse(DataResponse[Participant]):
    pass


class MatchesResponse(DataResponse[list[Match]]):
    pass


class MatchesWithDetailsResponse(DataResponse[list[MatchWithDetails]]):
    pass


class SingleMatchResponse(DataResponse[Match]):
    pass


class MatchWithDetailsResponse(DataResponse[MatchWithDetails]):
    pass


class ScoreHistoryResponse(DataResponse[list[ScoreHistory]]):
    pass


class RepechageCandidatesResponse(DataResponse[list[RepechageCandidate]]):
    pass


class RepechageCandidateResponse(DataResponse[RepechageCandidate]):
    pass

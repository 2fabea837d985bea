from darts.logic.lifecycle import get_match_or_raise
from darts.logic.tournaments import get_tournament_or_raise
from darts.models.db.match import Match
from darts.models.db.player import Player
from darts.models.db.tournament import Tournament
from darts.sql.players import get_player_by_id
from darts.utils.errors import PlayerNotFound
from darts.utils.id_types import MatchId, PlayerId, TournamentId


async def tournament_dependency(tournament_id: TournamentId) -> Tournament:
    return await get_tournament_or_raise(tournament_id)


async def player_dependency(player_id: PlayerId) -> Player:
    player = await get_player_by_id(player_id)
    if player is None:
        raise PlayerNotFound()

    return player


async def match_dependency(match_id: MatchId) -> Match:
    return await get_match_or_raise(match_id)

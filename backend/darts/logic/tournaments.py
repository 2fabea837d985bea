from itertools import groupby

from darts.models.db.match import BracketRound, Match, MatchWithDetails
from darts.models.db.participant import Participant
from darts.models.db.tournament import Tournament, TournamentStatus, TournamentUpdateBody
from darts.models.db.util import TournamentBracket, TournamentDetails
from darts.sql.matches import sql_get_matches
from darts.sql.participants import (
    get_participants_with_players,
    sql_register_participant,
    sql_unregister_participant,
)
from darts.sql.players import get_player_by_id, get_players_by_ids
from darts.sql.tournaments import sql_get_tournament, sql_update_tournament
from darts.utils.errors import PlayerNotFound, TournamentNotFound, TournamentNotReady
from darts.utils.id_types import PlayerId, TournamentId
from darts.utils.logging import logger


async def get_tournament_or_raise(tournament_id: TournamentId) -> Tournament:
    tournament = await sql_get_tournament(tournament_id)
    if tournament is None:
        raise TournamentNotFound()

    return tournament


async def get_matches_with_details(matches: list[Match]) -> list[MatchWithDetails]:
    player_ids = {
        player_id
        for match in matches
        for player_id in (match.player1_id, match.player2_id, match.winner_id)
        if player_id is not None
    }
    players = await get_players_by_ids(player_ids)

    return [
        MatchWithDetails(
            **match.model_dump(),
            player1=players.get(match.player1_id) if match.player1_id is not None else None,
            player2=players.get(match.player2_id) if match.player2_id is not None else None,
            winner=players.get(match.winner_id) if match.winner_id is not None else None,
        )
        for match in matches
    ]


async def get_tournament_details(tournament_id: TournamentId) -> TournamentDetails:
    tournament = await get_tournament_or_raise(tournament_id)
    champion = (
        await get_player_by_id(tournament.champion_id)
        if tournament.champion_id is not None
        else None
    )

    return TournamentDetails(
        tournament=tournament,
        participants=await get_participants_with_players(tournament_id),
        matches=await sql_get_matches(tournament_id),
        champion=champion,
    )


async def get_tournament_bracket(tournament_id: TournamentId) -> TournamentBracket:
    tournament = await get_tournament_or_raise(tournament_id)
    matches = await sql_get_matches(tournament_id)

    return TournamentBracket(
        tournament=tournament,
        rounds=[
            BracketRound(round=round_, matches=list(round_matches))
            for round_, round_matches in groupby(matches, key=lambda match: match.round)
        ],
    )


async def update_planned_tournament(
    tournament_id: TournamentId, tournament_body: TournamentUpdateBody
) -> Tournament:
    await get_tournament_or_raise(tournament_id)
    updated = await sql_update_tournament(tournament_id, tournament_body)
    if updated is None:
        raise TournamentNotReady("Only planned tournaments can be edited")

    return updated


async def register_participant(tournament_id: TournamentId, player_id: PlayerId) -> Participant:
    tournament = await get_tournament_or_raise(tournament_id)
    if tournament.status != TournamentStatus.PLANNED:
        raise TournamentNotReady("Participants can only register before the tournament starts")

    if await get_player_by_id(player_id) is None:
        raise PlayerNotFound()

    participant = await sql_register_participant(tournament_id, player_id)
    logger.info(f"Registered player {player_id} for tournament {tournament_id}")
    return participant


async def unregister_participant(tournament_id: TournamentId, player_id: PlayerId) -> None:
    tournament = await get_tournament_or_raise(tournament_id)
    if tournament.status != TournamentStatus.PLANNED:
        raise TournamentNotReady("Participants can only unregister before the tournament starts")

    if not await sql_unregister_participant(tournament_id, player_id):
        raise PlayerNotFound("Player is not registered for this tournament")

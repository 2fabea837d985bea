from darts.database import database
from darts.logic.ranking.elimination import advance_winner, get_total_rounds_for_tournament
from darts.models.db.match import Match, MatchStatus
from darts.sql.matches import (
    sql_activate_match,
    sql_finish_match,
    sql_get_match,
    sql_update_match_scores,
)
from darts.sql.players import sql_increment_player_wins
from darts.sql.score_history import sql_create_score_history
from darts.sql.tournaments import sql_get_tournament
from darts.utils.errors import (
    InvalidScore,
    InvalidTransition,
    InvalidWinner,
    MatchNotActive,
    MatchNotFound,
    TournamentNotFound,
)
from darts.utils.id_types import MatchId, PlayerId
from darts.utils.logging import logger


async def get_match_or_raise(match_id: MatchId) -> Match:
    match = await sql_get_match(match_id)
    if match is None:
        raise MatchNotFound()

    return match


async def activate_match(match_id: MatchId) -> Match:
    match = await get_match_or_raise(match_id)
    if match.status != MatchStatus.WAITING:
        raise InvalidTransition(
            f"Match is {match.status.value.lower()}, only waiting matches can be activated"
        )

    if not match.has_both_players:
        raise InvalidTransition("Match cannot be activated before both players are known")

    activated = await sql_activate_match(match_id)
    if activated is None:
        raise InvalidTransition()

    logger.info(f"Activated match {match_id}")
    return activated


async def update_match_score(match_id: MatchId, player1_score: int, player2_score: int) -> Match:
    match = await get_match_or_raise(match_id)
    if player1_score < 0 or player2_score < 0:
        raise InvalidScore()

    if match.status != MatchStatus.ACTIVE:
        raise MatchNotActive()

    async with database.transaction():
        scores = ((match.player1_id, player1_score), (match.player2_id, player2_score))
        for player_id, score in scores:
            if player_id is not None:
                await sql_create_score_history(match_id, player_id, score)

        updated = await sql_update_match_scores(match_id, player1_score, player2_score)
        if updated is None:
            raise MatchNotActive()

    return updated


async def finish_match(match_id: MatchId, winner_id: PlayerId) -> Match:
    """
    Finishes an active match and moves its winner through the bracket.

    The status change, the win counter and the advancement are committed together. Of two
    concurrent calls for the same match, exactly one succeeds and the other sees MatchNotActive.
    """
    match = await get_match_or_raise(match_id)
    if match.status != MatchStatus.ACTIVE:
        raise MatchNotActive()

    if match.get_slot_of(winner_id) is None:
        raise InvalidWinner()

    tournament = await sql_get_tournament(match.tournament_id)
    if tournament is None:
        raise TournamentNotFound()

    async with database.transaction():
        finished = await sql_finish_match(match_id, winner_id)
        if finished is None:
            raise MatchNotActive()

        await sql_increment_player_wins(winner_id)
        total_rounds = await get_total_rounds_for_tournament(tournament)
        await advance_winner(finished, winner_id, total_rounds)

    logger.info(f"Match {match_id} finished, winner is player {winner_id}")
    return finished

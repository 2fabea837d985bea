from darts.config import ByePolicy, config
from darts.logic.planning.matches import calculate_match_time
from darts.logic.scheduling.elimination import (
    get_match_count_for_round,
    get_next_slot,
    get_number_of_rounds_to_create_single_elimination,
)
from darts.models.db.match import Match, MatchStatus
from darts.models.db.tournament import Tournament
from darts.sql.matches import (
    sql_activate_match,
    sql_assign_player_to_next_match,
    sql_finish_match_as_bye,
)
from darts.sql.participants import get_participant_count
from darts.sql.tournaments import (
    sql_advance_current_round,
    sql_finish_tournament,
    sql_get_tournament,
    sql_set_total_rounds,
)
from darts.utils.errors import TournamentNotFound
from darts.utils.id_types import PlayerId
from darts.utils.logging import logger


async def get_total_rounds_for_tournament(tournament: Tournament) -> int:
    if tournament.total_rounds is not None:
        return tournament.total_rounds

    total_rounds = get_number_of_rounds_to_create_single_elimination(
        await get_participant_count(tournament.id)
    )
    await sql_set_total_rounds(tournament.id, total_rounds)
    return total_rounds


def is_unopposed(participant_count: int, match: Match) -> bool:
    """
    Whether the lone player of a match can never get an opponent through the bracket.

    In the first round that is the last match of an odd draw. In later rounds it is a match
    whose second feeder match does not exist, because the previous round holds fewer matches.
    """
    if match.status == MatchStatus.FINISHED or len(match.player_ids) != 1:
        return False

    if match.round == 1:
        return True

    if match.player1_id is None:
        return False

    return 2 * match.position > get_match_count_for_round(participant_count, match.round - 1)


async def resolve_bye(match: Match, total_rounds: int) -> Match:
    winner_id = match.player_ids[0]
    bye = await sql_finish_match_as_bye(match.id, winner_id)
    if bye is None:
        return match

    logger.info(
        f"Player {winner_id} gets a bye in round {bye.round} position {bye.position} "
        f"of tournament {bye.tournament_id}"
    )
    await advance_winner(bye, winner_id, total_rounds)
    return bye


async def apply_ready_match_policies(match: Match, total_rounds: int) -> Match:
    if config.bye_policy == ByePolicy.AUTO_ADVANCE and is_unopposed(
        await get_participant_count(match.tournament_id), match
    ):
        return await resolve_bye(match, total_rounds)

    if (
        config.auto_activate_ready_matches
        and match.status == MatchStatus.WAITING
        and match.has_both_players
    ):
        activated = await sql_activate_match(match.id)
        if activated is not None:
            logger.info(f"Activated match {activated.id} now that both players are known")
            return activated

    return match


async def advance_winner(match: Match, winner_id: PlayerId, total_rounds: int) -> Match | None:
    """
    Moves the winner of a finished match into the next round.

    The winner of position p in round r plays in round r + 1 at position ceil(p / 2), in the
    first slot for odd positions and the second slot for even ones. Winning the final round
    finishes the tournament instead. Returns the next match, or None when the tournament is over.
    """
    tournament = await sql_get_tournament(match.tournament_id)
    if tournament is None:
        raise TournamentNotFound()

    if match.round >= total_rounds:
        finished = await sql_finish_tournament(tournament.id, winner_id)
        if finished is None:
            logger.warning(
                f"Tournament {tournament.id} was not in progress when its final was decided"
            )
        else:
            logger.info(f"Tournament {tournament.id} is finished, champion is player {winner_id}")
        return None

    next_slot = get_next_slot(match.round, match.position)
    next_match = await sql_assign_player_to_next_match(
        tournament.id,
        next_slot,
        winner_id,
        calculate_match_time(next_slot.round, next_slot.position),
    )
    await sql_advance_current_round(tournament.id, next_slot.round)
    logger.info(
        f"Player {winner_id} advances to round {next_slot.round} position {next_slot.position} "
        f"slot {next_slot.slot} of tournament {tournament.id}"
    )

    return await apply_ready_match_policies(next_match, total_rounds)

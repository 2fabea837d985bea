import random

from darts.database import database
from darts.logic.ranking.elimination import apply_ready_match_policies
from darts.logic.scheduling.elimination import (
    build_first_round,
    get_number_of_rounds_to_create_single_elimination,
)
from darts.logic.scheduling.seeding import seed_participants
from darts.models.db.match import Match
from darts.models.db.tournament import TournamentFormat, TournamentStatus
from darts.sql.participants import get_participant_count
from darts.sql.players import sql_increment_participations
from darts.sql.tournaments import (
    sql_get_tournament,
    sql_set_total_rounds,
    sql_start_tournament,
)
from darts.utils.errors import TournamentNotFound, TournamentNotReady, UnsupportedFormat
from darts.utils.id_types import TournamentId
from darts.utils.logging import logger


async def seed_and_start(
    tournament_id: TournamentId, rng: random.Random | None = None
) -> list[Match]:
    """
    Draws the participants of a planned tournament, creates its first round and moves it to
    IN_PROGRESS. Either all of that happens or nothing does.
    """
    tournament = await sql_get_tournament(tournament_id)
    if tournament is None:
        raise TournamentNotFound()

    if tournament.status != TournamentStatus.PLANNED:
        raise TournamentNotReady()

    if tournament.format != TournamentFormat.SINGLE_ELIMINATION:
        raise UnsupportedFormat()

    # The draw below decides the number of rounds
    get_number_of_rounds_to_create_single_elimination(await get_participant_count(tournament_id))

    async with database.transaction():
        # Claiming the tournament first makes concurrent starts and registrations fail here
        started = await sql_start_tournament(tournament_id)
        if started is None:
            raise TournamentNotReady()

        participants = await seed_participants(tournament_id, rng or random.Random())
        total_rounds = get_number_of_rounds_to_create_single_elimination(len(participants))
        await sql_set_total_rounds(tournament_id, total_rounds)
        await sql_increment_participations([participant.player_id for participant in participants])
        first_round = await build_first_round(tournament, participants)
        first_round = [await apply_ready_match_policies(match, total_rounds) for match in first_round]

    logger.info(
        f"Started tournament {tournament_id} with {len(participants)} participants "
        f"over {total_rounds} rounds"
    )
    return first_round

import random
from collections.abc import Sequence
from typing import TypeVar

from darts.models.db.participant import Participant
from darts.sql.participants import get_participants, sql_set_draw_positions
from darts.utils.errors import InsufficientParticipants
from darts.utils.id_types import TournamentId
from darts.utils.logging import logger

T = TypeVar("T")


def shuffle_participants(participants: Sequence[T], rng: random.Random) -> list[T]:
    """
    Fisher-Yates shuffle that draws from the given random source, so that a seeded source
    always produces the same draw.
    """
    shuffled = list(participants)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]

    return shuffled


async def seed_participants(tournament_id: TournamentId, rng: random.Random) -> list[Participant]:
    participants = await get_participants(tournament_id)
    if len(participants) < 2:
        raise InsufficientParticipants()

    shuffled = shuffle_participants(participants, rng)
    await sql_set_draw_positions(
        {participant.id: draw_position for draw_position, participant in enumerate(shuffled, 1)}
    )
    logger.info(f"Drew {len(shuffled)} participants for tournament {tournament_id}")

    return [
        participant.model_copy(update={"draw_position": draw_position})
        for draw_position, participant in enumerate(shuffled, 1)
    ]

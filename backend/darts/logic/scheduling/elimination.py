from heliclockter import datetime_utc

from darts.config import config
from darts.logic.planning.matches import calculate_match_time
from darts.models.db.match import Match, MatchInsertable, MatchStatus, NextSlot
from darts.models.db.participant import Participant
from darts.models.db.tournament import Tournament, TournamentStatus
from darts.sql.matches import sql_create_match
from darts.utils.errors import InsufficientParticipants, SeedingRequired, TournamentNotReady
from darts.utils.id_types import PlayerId, TournamentId
from darts.utils.logging import logger


def get_number_of_rounds_to_create_single_elimination(participant_count: int) -> int:
    if participant_count < 2:
        raise InsufficientParticipants()

    # ceil(log2(n)) without floating point
    return (participant_count - 1).bit_length()


def get_next_slot(round_: int, position: int) -> NextSlot:
    return NextSlot(
        round=round_ + 1,
        position=(position + 1) // 2,
        slot=1 if position % 2 == 1 else 2,
    )


def get_player_count_for_round(participant_count: int, round_: int) -> int:
    player_count = participant_count
    for _ in range(round_ - 1):
        player_count = (player_count + 1) // 2

    return player_count


def get_match_count_for_round(participant_count: int, round_: int) -> int:
    return (get_player_count_for_round(participant_count, round_) + 1) // 2


def determine_matches_first_round(
    tournament_id: TournamentId, player_ids: list[PlayerId]
) -> list[MatchInsertable]:
    """
    Pairs the players in draw order: 1 vs 2, 3 vs 4 and so on. With an odd number of players
    the last one ends up alone in the last match, waiting for a repechage or a bye.
    """
    now = datetime_utc.now()
    suggestions: list[MatchInsertable] = []

    for i in range(0, len(player_ids), 2):
        position = i // 2 + 1
        player1_id = player_ids[i]
        player2_id = player_ids[i + 1] if i + 1 < len(player_ids) else None
        activate = (
            config.activate_first_match_on_start and position == 1 and player2_id is not None
        )

        suggestions.append(
            MatchInsertable(
                tournament_id=tournament_id,
                round=1,
                position=position,
                player1_id=player1_id,
                player2_id=player2_id,
                status=MatchStatus.ACTIVE if activate else MatchStatus.WAITING,
                scheduled_time=calculate_match_time(1, position),
                created=now,
            )
        )

    return suggestions


async def build_first_round(
    tournament: Tournament, participants: list[Participant]
) -> list[Match]:
    if tournament.status != TournamentStatus.PLANNED:
        raise TournamentNotReady()

    if any(participant.draw_position is None for participant in participants):
        raise SeedingRequired()

    ordered = sorted(participants, key=lambda participant: participant.draw_position or 0)
    suggestions = determine_matches_first_round(
        tournament.id, [participant.player_id for participant in ordered]
    )

    created = [await sql_create_match(suggestion) for suggestion in suggestions]
    logger.info(f"Created {len(created)} first round matches for tournament {tournament.id}")
    return created

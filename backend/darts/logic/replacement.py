import random

from darts.logic.ranking.elimination import (
    apply_ready_match_policies,
    get_total_rounds_for_tournament,
)
from darts.models.db.match import Match, MatchStatus, RepechageCandidate
from darts.sql.matches import (
    sql_fill_empty_slots,
    sql_get_match,
    sql_get_matches,
    sql_replace_player_in_slot,
)
from darts.sql.players import get_player_by_id, get_players_by_ids
from darts.sql.tournaments import sql_get_tournament
from darts.utils.errors import (
    InvalidTransition,
    MatchNotFound,
    NoEmptySlot,
    NoRepechageCandidates,
    PlayerNotFound,
    PlayerNotInMatch,
    TournamentNotFound,
)
from darts.utils.id_types import MatchId, PlayerId, TournamentId
from darts.utils.logging import logger


async def _check_player_exists(player_id: PlayerId) -> None:
    if await get_player_by_id(player_id) is None:
        raise PlayerNotFound()


async def _apply_policies(match: Match) -> Match:
    tournament = await sql_get_tournament(match.tournament_id)
    if tournament is None:
        raise TournamentNotFound()

    total_rounds = await get_total_rounds_for_tournament(tournament)
    return await apply_ready_match_policies(match, total_rounds)


async def replace_in_slot(
    match_id: MatchId, target_player_id: PlayerId, replacement_player_id: PlayerId
) -> Match:
    """
    Swaps an absent player for another one. Only the slot the target occupies changes, the
    status of the match stays as it was.
    """
    match = await sql_get_match(match_id)
    if match is None:
        raise PlayerNotInMatch("Could not find the match of the player to replace")

    slot = match.get_slot_of(target_player_id)
    if slot is None:
        raise PlayerNotInMatch()

    if match.status == MatchStatus.FINISHED:
        raise InvalidTransition("Players of a finished match cannot be replaced")

    await _check_player_exists(replacement_player_id)
    replaced = await sql_replace_player_in_slot(
        match_id, slot, target_player_id, replacement_player_id
    )
    if replaced is None:
        raise PlayerNotInMatch()

    logger.info(
        f"Replaced player {target_player_id} by player {replacement_player_id} "
        f"in slot {slot} of match {match_id}"
    )
    return await _apply_policies(replaced)


async def fill_empty_slots(match_id: MatchId, replacement_player_id: PlayerId) -> Match:
    match = await sql_get_match(match_id)
    if match is None:
        raise MatchNotFound()

    if match.has_both_players:
        raise NoEmptySlot()

    if match.status == MatchStatus.FINISHED:
        raise InvalidTransition("Slots of a finished match cannot be filled")

    await _check_player_exists(replacement_player_id)
    if len(match.player_ids) < 1:
        logger.warning(
            f"Match {match_id} has no players, player {replacement_player_id} fills both slots"
        )

    filled = await sql_fill_empty_slots(match_id, replacement_player_id)
    if filled is None:
        raise NoEmptySlot()

    logger.info(f"Player {replacement_player_id} fills the empty slots of match {match_id}")
    return await _apply_policies(filled)


async def get_repechage_candidates(tournament_id: TournamentId) -> list[RepechageCandidate]:
    """Every loss of a played match in the tournament, a player losing twice appears twice."""
    if await sql_get_tournament(tournament_id) is None:
        raise TournamentNotFound()

    losses = [
        (loser_id, match)
        for match in await sql_get_matches(tournament_id)
        if (loser_id := match.get_loser()) is not None
    ]
    players = await get_players_by_ids({loser_id for loser_id, _ in losses})

    return [
        RepechageCandidate(player=players[loser_id], match_id=match.id, round=match.round)
        for loser_id, match in losses
        if loser_id in players
    ]


async def draw_repechage_candidate(
    tournament_id: TournamentId, rng: random.Random | None = None
) -> RepechageCandidate:
    candidates = await get_repechage_candidates(tournament_id)
    if len(candidates) < 1:
        raise NoRepechageCandidates()

    candidate = (rng or random.Random()).choice(candidates)
    logger.info(
        f"Drew player {candidate.player.id} from {len(candidates)} repechage candidates "
        f"of tournament {tournament_id}"
    )
    return candidate

from typing import assert_never

from darts.logic.lifecycle import activate_match, finish_match, update_match_score
from darts.logic.replacement import fill_empty_slots, replace_in_slot
from darts.models.commands import (
    ActivateMatch,
    FillEmptySlots,
    FinishMatch,
    MatchCommand,
    ReplaceSlot,
    UpdateScore,
)
from darts.models.db.match import Match
from darts.utils.id_types import MatchId


async def apply_match_command(match_id: MatchId, command: MatchCommand) -> Match:
    match command:
        case ActivateMatch():
            return await activate_match(match_id)
        case UpdateScore(player1_score=player1_score, player2_score=player2_score):
            return await update_match_score(match_id, player1_score, player2_score)
        case FinishMatch(winner_id=winner_id):
            return await finish_match(match_id, winner_id)
        case ReplaceSlot(
            target_player_id=target_player_id, replacement_player_id=replacement_player_id
        ):
            return await replace_in_slot(match_id, target_player_id, replacement_player_id)
        case FillEmptySlots(replacement_player_id=replacement_player_id):
            return await fill_empty_slots(match_id, replacement_player_id)
        case _:
            assert_never(command)

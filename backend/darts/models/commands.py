"""
Typed commands accepted by a match.

Every state change an operator can request on a match is one of these models, so a
request can only carry the fields that belong to its transition.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from darts.utils.id_types import PlayerId


class ActivateMatch(BaseModel):
    type: Literal["activate"] = "activate"


class UpdateScore(BaseModel):
    type: Literal["update_score"] = "update_score"
    player1_score: int
    player2_score: int


class FinishMatch(BaseModel):
    type: Literal["finish"] = "finish"
    winner_id: PlayerId


class ReplaceSlot(BaseModel):
    type: Literal["replace_slot"] = "replace_slot"
    target_player_id: PlayerId
    replacement_player_id: PlayerId


class FillEmptySlots(BaseModel):
    type: Literal["fill_empty_slots"] = "fill_empty_slots"
    replacement_player_id: PlayerId


MatchCommand = Annotated[
    ActivateMatch | UpdateScore | FinishMatch | ReplaceSlot | FillEmptySlots,
    Field(discriminator="type"),
]


class MatchCommandBody(BaseModel):
    command: MatchCommand

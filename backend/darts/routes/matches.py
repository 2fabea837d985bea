from fastapi import APIRouter, Depends

from darts.config import config
from darts.logic.commands import apply_match_command
from darts.logic.lifecycle import activate_match, finish_match, update_match_score
from darts.logic.replacement import fill_empty_slots, replace_in_slot
from darts.logic.tournaments import get_matches_with_details
from darts.models.commands import (
    FillEmptySlots,
    FinishMatch,
    MatchCommandBody,
    ReplaceSlot,
    UpdateScore,
)
from darts.models.db.match import Match
from darts.routes.models import (
    MatchesWithDetailsResponse,
    MatchWithDetailsResponse,
    ScoreHistoryResponse,
    SingleMatchResponse,
)
from darts.routes.util import match_dependency
from darts.sql.matches import sql_get_active_matches
from darts.sql.score_history import sql_get_score_history
from darts.utils.id_types import MatchId, TournamentId

router = APIRouter(prefix=config.api_prefix)


@router.get("/matches", response_model=MatchesWithDetailsResponse)
async def get_active_matches(
    tournament_id: TournamentId | None = None,
) -> MatchesWithDetailsResponse:
    matches = await sql_get_active_matches(tournament_id)
    return MatchesWithDetailsResponse(data=await get_matches_with_details(matches))


@router.get("/matches/{match_id}", response_model=MatchWithDetailsResponse)
async def get_match(match: Match = Depends(match_dependency)) -> MatchWithDetailsResponse:
    [match_with_details] = await get_matches_with_details([match])
    return MatchWithDetailsResponse(data=match_with_details)


@router.post("/matches/{match_id}/activate", response_model=SingleMatchResponse)
async def activate(match_id: MatchId) -> SingleMatchResponse:
    return SingleMatchResponse(data=await activate_match(match_id))


@router.put("/matches/{match_id}/score", response_model=SingleMatchResponse)
async def update_score(match_id: MatchId, body: UpdateScore) -> SingleMatchResponse:
    return SingleMatchResponse(
        data=await update_match_score(match_id, body.player1_score, body.player2_score)
    )


@router.post("/matches/{match_id}/finish", response_model=SingleMatchResponse)
async def finish(match_id: MatchId, body: FinishMatch) -> SingleMatchResponse:
    return SingleMatchResponse(data=await finish_match(match_id, body.winner_id))


@router.post("/matches/{match_id}/replace", response_model=SingleMatchResponse)
async def replace(match_id: MatchId, body: ReplaceSlot) -> SingleMatchResponse:
    return SingleMatchResponse(
        data=await replace_in_slot(match_id, body.target_player_id, body.replacement_player_id)
    )


@router.post("/matches/{match_id}/fill", response_model=SingleMatchResponse)
async def fill(match_id: MatchId, body: FillEmptySlots) -> SingleMatchResponse:
    return SingleMatchResponse(data=await fill_empty_slots(match_id, body.replacement_player_id))


@router.post("/matches/{match_id}/commands", response_model=SingleMatchResponse)
async def apply_command(match_id: MatchId, body: MatchCommandBody) -> SingleMatchResponse:
    return SingleMatchResponse(data=await apply_match_command(match_id, body.command))


@router.get("/matches/{match_id}/score_history", response_model=ScoreHistoryResponse)
async def get_score_history(match: Match = Depends(match_dependency)) -> ScoreHistoryResponse:
    return ScoreHistoryResponse(data=await sql_get_score_history(match.id))

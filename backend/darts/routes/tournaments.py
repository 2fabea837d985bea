from fastapi import APIRouter, Depends, Query

from darts.config import config
from darts.logic.replacement import draw_repechage_candidate, get_repechage_candidates
from darts.logic.scheduling.builder import seed_and_start
from darts.logic.tournaments import (
    get_tournament_bracket,
    get_tournament_details,
    register_participant,
    unregister_participant,
    update_planned_tournament,
)
from darts.models.db.participant import ParticipantBody
from darts.models.db.tournament import (
    Tournament,
    TournamentBody,
    TournamentFilter,
    TournamentUpdateBody,
)
from darts.routes.models import (
    CurrentTournamentResponse,
    MatchesResponse,
    ParticipantsResponse,
    RepechageCandidateResponse,
    RepechageCandidatesResponse,
    SingleParticipantResponse,
    SuccessResponse,
    TournamentBracketResponse,
    TournamentDetailsResponse,
    TournamentResponse,
    TournamentsResponse,
)
from darts.routes.util import tournament_dependency
from darts.sql.matches import sql_get_matches
from darts.sql.participants import get_participants_with_players
from darts.sql.tournaments import (
    sql_create_tournament,
    sql_delete_tournament,
    sql_get_current_tournament,
    sql_get_tournaments,
)
from darts.utils.id_types import PlayerId
from darts.utils.logging import logger

router = APIRouter(prefix=config.api_prefix)


@router.get("/tournaments", response_model=TournamentsResponse)
async def get_tournaments(
    filter_: TournamentFilter = Query(default=TournamentFilter.ALL, alias="filter"),
) -> TournamentsResponse:
    return TournamentsResponse(data=await sql_get_tournaments(filter_))


@router.post("/tournaments", response_model=TournamentResponse)
async def create_tournament(tournament_body: TournamentBody) -> TournamentResponse:
    tournament = await sql_create_tournament(tournament_body)
    logger.info(f"Created tournament {tournament.id} ({tournament.name})")
    return TournamentResponse(data=tournament)


@router.get("/tournaments/current", response_model=CurrentTournamentResponse)
async def get_current_tournament() -> CurrentTournamentResponse:
    return CurrentTournamentResponse(data=await sql_get_current_tournament())


@router.get("/tournaments/{tournament_id}", response_model=TournamentResponse)
async def get_tournament(
    tournament: Tournament = Depends(tournament_dependency),
) -> TournamentResponse:
    return TournamentResponse(data=tournament)


@router.put("/tournaments/{tournament_id}", response_model=TournamentResponse)
async def update_tournament_by_id(
    tournament_body: TournamentUpdateBody,
    tournament: Tournament = Depends(tournament_dependency),
) -> TournamentResponse:
    return TournamentResponse(data=await update_planned_tournament(tournament.id, tournament_body))


@router.delete("/tournaments/{tournament_id}", response_model=SuccessResponse)
async def delete_tournament(
    tournament: Tournament = Depends(tournament_dependency),
) -> SuccessResponse:
    await sql_delete_tournament(tournament.id)
    logger.info(f"Deleted tournament {tournament.id}")
    return SuccessResponse()


@router.get("/tournaments/{tournament_id}/details", response_model=TournamentDetailsResponse)
async def get_details(
    tournament: Tournament = Depends(tournament_dependency),
) -> TournamentDetailsResponse:
    return TournamentDetailsResponse(data=await get_tournament_details(tournament.id))


@router.get("/tournaments/{tournament_id}/bracket", response_model=TournamentBracketResponse)
async def get_bracket(
    tournament: Tournament = Depends(tournament_dependency),
) -> TournamentBracketResponse:
    return TournamentBracketResponse(data=await get_tournament_bracket(tournament.id))


@router.post("/tournaments/{tournament_id}/start", response_model=MatchesResponse)
async def start_tournament(
    tournament: Tournament = Depends(tournament_dependency),
) -> MatchesResponse:
    return MatchesResponse(data=await seed_and_start(tournament.id))


@router.get("/tournaments/{tournament_id}/participants", response_model=ParticipantsResponse)
async def get_participants(
    tournament: Tournament = Depends(tournament_dependency),
) -> ParticipantsResponse:
    return ParticipantsResponse(data=await get_participants_with_players(tournament.id))


@router.post(
    "/tournaments/{tournament_id}/participants", response_model=SingleParticipantResponse
)
async def create_participant(
    participant_body: ParticipantBody,
    tournament: Tournament = Depends(tournament_dependency),
) -> SingleParticipantResponse:
    return SingleParticipantResponse(
        data=await register_participant(tournament.id, participant_body.player_id)
    )


@router.delete(
    "/tournaments/{tournament_id}/participants/{player_id}", response_model=SuccessResponse
)
async def delete_participant(
    player_id: PlayerId,
    tournament: Tournament = Depends(tournament_dependency),
) -> SuccessResponse:
    await unregister_participant(tournament.id, player_id)
    return SuccessResponse()


@router.get("/tournaments/{tournament_id}/matches", response_model=MatchesResponse)
async def get_tournament_matches(
    round_: int | None = Query(default=None, alias="round", ge=1),
    tournament: Tournament = Depends(tournament_dependency),
) -> MatchesResponse:
    return MatchesResponse(data=await sql_get_matches(tournament.id, round_))


@router.get("/tournaments/{tournament_id}/repechage", response_model=RepechageCandidatesResponse)
async def get_repechage(
    tournament: Tournament = Depends(tournament_dependency),
) -> RepechageCandidatesResponse:
    return RepechageCandidatesResponse(data=await get_repechage_candidates(tournament.id))


@router.post(
    "/tournaments/{tournament_id}/repechage/draw", response_model=RepechageCandidateResponse
)
async def draw_repechage(
    tournament: Tournament = Depends(tournament_dependency),
) -> RepechageCandidateResponse:
    return RepechageCandidateResponse(data=await draw_repechage_candidate(tournament.id))

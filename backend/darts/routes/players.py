from fastapi import APIRouter, Depends, Query

from darts.config import config
from darts.models.db.player import Player, PlayerBody, PlayerUpdateBody
from darts.routes.models import (
    MatchesResponse,
    PlayersResponse,
    PlayerStatisticsResponse,
    SinglePlayerResponse,
    SuccessResponse,
)
from darts.routes.util import player_dependency
from darts.sql.matches import sql_get_matches_of_player
from darts.sql.players import (
    get_all_players,
    get_player_by_id,
    get_player_statistics,
    get_top_players,
    insert_player,
    sql_delete_player,
    sql_set_player_active,
    sql_update_player,
)
from darts.utils.errors import PlayerAlreadyActive
from darts.utils.logging import logger
from darts.utils.types import assert_some

router = APIRouter(prefix=config.api_prefix)


@router.get("/players", response_model=PlayersResponse)
async def get_players(active_only: bool = False, search: str | None = None) -> PlayersResponse:
    return PlayersResponse(data=await get_all_players(active_only=active_only, search=search))


@router.post("/players", response_model=SinglePlayerResponse)
async def create_player(player_body: PlayerBody) -> SinglePlayerResponse:
    player = await insert_player(player_body)
    logger.info(f"Created player {player.id} ({player.display_name})")
    return SinglePlayerResponse(data=player)


@router.get("/players/leaderboard", response_model=PlayersResponse)
async def get_leaderboard(limit: int = Query(default=10, ge=1, le=100)) -> PlayersResponse:
    return PlayersResponse(data=await get_top_players(limit))


@router.get("/players/{player_id}", response_model=SinglePlayerResponse)
async def get_player(player: Player = Depends(player_dependency)) -> SinglePlayerResponse:
    return SinglePlayerResponse(data=player)


@router.put("/players/{player_id}", response_model=SinglePlayerResponse)
async def update_player_by_id(
    player_body: PlayerUpdateBody, player: Player = Depends(player_dependency)
) -> SinglePlayerResponse:
    await sql_update_player(player.id, player_body)
    return SinglePlayerResponse(data=assert_some(await get_player_by_id(player.id)))


@router.delete("/players/{player_id}", response_model=SuccessResponse)
async def delete_player(
    permanent: bool = False, player: Player = Depends(player_dependency)
) -> SuccessResponse:
    if permanent:
        await sql_delete_player(player.id)
        logger.info(f"Deleted player {player.id}")
    else:
        await sql_set_player_active(player.id, False)
        logger.info(f"Disabled player {player.id}")

    return SuccessResponse()


@router.post("/players/{player_id}/enable", response_model=SinglePlayerResponse)
async def enable_player(player: Player = Depends(player_dependency)) -> SinglePlayerResponse:
    if player.active:
        raise PlayerAlreadyActive()

    await sql_set_player_active(player.id, True)
    logger.info(f"Enabled player {player.id}")
    return SinglePlayerResponse(data=assert_some(await get_player_by_id(player.id)))


@router.get("/players/{player_id}/stats", response_model=PlayerStatisticsResponse)
async def get_player_stats(
    player: Player = Depends(player_dependency),
) -> PlayerStatisticsResponse:
    return PlayerStatisticsResponse(data=await get_player_statistics(player))


@router.get("/players/{player_id}/matches", response_model=MatchesResponse)
async def get_player_matches(player: Player = Depends(player_dependency)) -> MatchesResponse:
    return MatchesResponse(data=await sql_get_matches_of_player(player.id))

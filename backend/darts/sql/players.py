from heliclockter import datetime_utc
from sqlalchemy import ColumnElement, and_, func, or_, select

from darts.database import database
from darts.models.db.player import (
    Player,
    PlayerBody,
    PlayerInsertable,
    PlayerStatistics,
    PlayerUpdateBody,
)
from darts.models.db.match import MatchStatus
from darts.schema import matches, participants, players
from darts.utils.db import fetch_all_parsed, fetch_one_parsed
from darts.utils.errors import ForeignKey, PlayerReferenced, check_foreign_key_violation
from darts.utils.id_types import PlayerId
from darts.utils.types import assert_some, dict_with_enum_values


async def get_all_players(
    *, active_only: bool = False, search: str | None = None
) -> list[Player]:
    query = players.select()

    if active_only:
        query = query.where(players.c.active == True)  # noqa: E712

    if search is not None and search.strip() != "":
        pattern = f"%{search.strip().lower()}%"
        query = query.where(
            or_(
                func.lower(players.c.first_name).like(pattern),
                func.lower(players.c.last_name).like(pattern),
                func.lower(players.c.nickname).like(pattern),
            )
        )

    return await fetch_all_parsed(
        database, Player, query.order_by(players.c.last_name, players.c.first_name)
    )


async def get_player_by_id(player_id: PlayerId) -> Player | None:
    return await fetch_one_parsed(database, Player, players.select().where(players.c.id == player_id))


async def get_players_by_ids(player_ids: set[PlayerId]) -> dict[PlayerId, Player]:
    if len(player_ids) < 1:
        return {}

    result = await fetch_all_parsed(
        database, Player, players.select().where(players.c.id.in_(player_ids))
    )
    return {player.id: player for player in result}


async def get_top_players(limit: int = 10) -> list[Player]:
    query = (
        players.select()
        .where(players.c.active == True)  # noqa: E712
        .order_by(players.c.wins.desc(), players.c.participations.desc(), players.c.id)
        .limit(limit)
    )
    return await fetch_all_parsed(database, Player, query)


async def insert_player(player_body: PlayerBody) -> Player:
    values = dict_with_enum_values(
        PlayerInsertable(**player_body.model_dump(), created=datetime_utc.now()).model_dump()
    )
    return assert_some(
        await fetch_one_parsed(
            database, Player, players.insert().values(**values).returning(*players.c)
        )
    )


async def sql_update_player(player_id: PlayerId, player_body: PlayerUpdateBody) -> None:
    values = {
        key: value
        for key, value in dict_with_enum_values(player_body.model_dump(exclude_unset=True)).items()
        if value is not None or key == "nickname"
    }
    if len(values) < 1:
        return

    await database.execute(players.update().where(players.c.id == player_id).values(**values))


async def sql_set_player_active(player_id: PlayerId, active: bool) -> None:
    await database.execute(
        players.update().where(players.c.id == player_id).values(active=active)
    )


async def sql_delete_player(player_id: PlayerId) -> None:
    if await get_match_count_for_player(player_id) > 0:
        raise PlayerReferenced()

    with check_foreign_key_violation(
        {
            ForeignKey.matches_player1_id_fkey,
            ForeignKey.matches_player2_id_fkey,
            ForeignKey.matches_winner_id_fkey,
            ForeignKey.score_history_player_id_fkey,
        },
        PlayerReferenced(),
    ):
        async with database.transaction():
            await database.execute(
                participants.delete().where(participants.c.player_id == player_id)
            )
            await database.execute(players.delete().where(players.c.id == player_id))


async def sql_increment_player_wins(player_id: PlayerId) -> None:
    await database.execute(
        players.update().where(players.c.id == player_id).values(wins=players.c.wins + 1)
    )


async def sql_increment_participations(player_ids: list[PlayerId]) -> None:
    if len(player_ids) < 1:
        return

    await database.execute(
        players.update()
        .where(players.c.id.in_(player_ids))
        .values(participations=players.c.participations + 1)
    )


def _matches_of_player(player_id: PlayerId) -> ColumnElement[bool]:
    return or_(matches.c.player1_id == player_id, matches.c.player2_id == player_id)


async def get_match_count_for_player(player_id: PlayerId) -> int:
    query = select(func.count()).select_from(matches).where(_matches_of_player(player_id))
    return int(await database.fetch_val(query) or 0)


async def get_player_statistics(player: Player) -> PlayerStatistics:
    played_query = (
        select(func.count())
        .select_from(matches)
        .where(
            and_(
                _matches_of_player(player.id),
                matches.c.status == MatchStatus.FINISHED.value,
                matches.c.is_bye == False,  # noqa: E712
            )
        )
    )
    won_query = (
        select(func.count())
        .select_from(matches)
        .where(
            and_(
                matches.c.winner_id == player.id,
                matches.c.status == MatchStatus.FINISHED.value,
                matches.c.is_bye == False,  # noqa: E712
            )
        )
    )
    matches_played = int(await database.fetch_val(played_query) or 0)
    matches_won = int(await database.fetch_val(won_query) or 0)

    return PlayerStatistics(
        player=player,
        matches_played=matches_played,
        matches_won=matches_won,
        ratio=matches_won / matches_played if matches_played > 0 else 0.0,
        participations=player.participations,
        wins=player.wins,
    )

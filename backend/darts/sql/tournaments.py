from heliclockter import datetime_utc
from sqlalchemy import and_, delete, select

from darts.database import database
from darts.models.db.tournament import (
    Tournament,
    TournamentBody,
    TournamentFilter,
    TournamentInsertable,
    TournamentStatus,
    TournamentUpdateBody,
)
from darts.schema import matches, participants, score_history, tournaments
from darts.utils.db import fetch_all_parsed, fetch_one_parsed
from darts.utils.id_types import PlayerId, TournamentId
from darts.utils.types import assert_some, dict_with_enum_values, dict_without_none


async def sql_get_tournament(tournament_id: TournamentId) -> Tournament | None:
    return await fetch_one_parsed(
        database, Tournament, tournaments.select().where(tournaments.c.id == tournament_id)
    )


async def sql_get_tournaments(filter_: TournamentFilter = TournamentFilter.ALL) -> list[Tournament]:
    query = tournaments.select()

    match filter_:
        case TournamentFilter.IN_PROGRESS:
            query = query.where(tournaments.c.status == TournamentStatus.IN_PROGRESS.value)
        case TournamentFilter.UPCOMING:
            query = query.where(tournaments.c.status == TournamentStatus.PLANNED.value)
        case TournamentFilter.ALL:
            pass

    return await fetch_all_parsed(
        database, Tournament, query.order_by(tournaments.c.date.desc(), tournaments.c.id.desc())
    )


async def sql_get_current_tournament() -> Tournament | None:
    query = (
        tournaments.select()
        .where(tournaments.c.status == TournamentStatus.IN_PROGRESS.value)
        .order_by(tournaments.c.date.desc(), tournaments.c.id.desc())
        .limit(1)
    )
    return await fetch_one_parsed(database, Tournament, query)


async def sql_create_tournament(tournament_body: TournamentBody) -> Tournament:
    values = dict_with_enum_values(
        TournamentInsertable(**tournament_body.model_dump(), created=datetime_utc.now()).model_dump()
    )
    return assert_some(
        await fetch_one_parsed(
            database,
            Tournament,
            tournaments.insert().values(**values).returning(*tournaments.c),
        )
    )


async def sql_update_tournament(
    tournament_id: TournamentId, tournament_body: TournamentUpdateBody
) -> Tournament | None:
    """
    Updates the editable fields of a tournament that has not started yet.

    Returns None when the tournament is missing or no longer planned.
    """
    values = dict_without_none(dict_with_enum_values(tournament_body.model_dump()))
    condition = and_(
        tournaments.c.id == tournament_id,
        tournaments.c.status == TournamentStatus.PLANNED.value,
    )
    if len(values) < 1:
        return await fetch_one_parsed(database, Tournament, tournaments.select().where(condition))

    query = tournaments.update().where(condition).values(**values).returning(*tournaments.c)
    return await fetch_one_parsed(database, Tournament, query)


async def sql_delete_tournament(tournament_id: TournamentId) -> None:
    match_ids = select(matches.c.id).where(matches.c.tournament_id == tournament_id)

    async with database.transaction():
        await database.execute(
            delete(score_history).where(score_history.c.match_id.in_(match_ids))
        )
        await database.execute(delete(matches).where(matches.c.tournament_id == tournament_id))
        await database.execute(
            delete(participants).where(participants.c.tournament_id == tournament_id)
        )
        await database.execute(delete(tournaments).where(tournaments.c.id == tournament_id))


async def sql_start_tournament(tournament_id: TournamentId) -> Tournament | None:
    """
    Moves a tournament from PLANNED to IN_PROGRESS.

    Only one caller can win this transition, the others get None back. The number of rounds
    is cleared here and set once the draw is known.
    """
    query = (
        tournaments.update()
        .where(
            and_(
                tournaments.c.id == tournament_id,
                tournaments.c.status == TournamentStatus.PLANNED.value,
            )
        )
        .values(
            status=TournamentStatus.IN_PROGRESS.value,
            current_round=1,
            total_rounds=None,
        )
        .returning(*tournaments.c)
    )
    return await fetch_one_parsed(database, Tournament, query)


async def sql_finish_tournament(
    tournament_id: TournamentId, champion_id: PlayerId
) -> Tournament | None:
    query = (
        tournaments.update()
        .where(
            and_(
                tournaments.c.id == tournament_id,
                tournaments.c.status == TournamentStatus.IN_PROGRESS.value,
            )
        )
        .values(status=TournamentStatus.FINISHED.value, champion_id=champion_id)
        .returning(*tournaments.c)
    )
    return await fetch_one_parsed(database, Tournament, query)


async def sql_advance_current_round(tournament_id: TournamentId, round_: int) -> None:
    await database.execute(
        tournaments.update()
        .where(and_(tournaments.c.id == tournament_id, tournaments.c.current_round < round_))
        .values(current_round=round_)
    )


async def sql_set_total_rounds(tournament_id: TournamentId, total_rounds: int) -> None:
    await database.execute(
        tournaments.update()
        .where(and_(tournaments.c.id == tournament_id, tournaments.c.total_rounds.is_(None)))
        .values(total_rounds=total_rounds)
    )


async def sql_lock_planned_tournament(tournament_id: TournamentId) -> bool:
    """
    Takes the row lock of a tournament that is still PLANNED, for the rest of the transaction.

    A start that commits first makes this return False, so nothing can join a drawn bracket.
    """
    query = (
        tournaments.update()
        .where(
            and_(
                tournaments.c.id == tournament_id,
                tournaments.c.status == TournamentStatus.PLANNED.value,
            )
        )
        .values(status=TournamentStatus.PLANNED.value)
        .returning(tournaments.c.id)
    )
    return await database.fetch_one(query) is not None

from heliclockter import datetime_utc
from sqlalchemy import and_, func, or_

from darts.database import database
from darts.models.db.match import Match, MatchInsertable, MatchStatus, NextSlot, Slot
from darts.schema import matches
from darts.utils.db import fetch_all_parsed, fetch_one_parsed
from darts.utils.errors import is_unique_violation
from darts.utils.id_types import MatchId, PlayerId, TournamentId
from darts.utils.logging import logger
from darts.utils.types import assert_some, dict_with_enum_values


def _slot_column(slot: Slot) -> str:
    return "player1_id" if slot == 1 else "player2_id"


async def sql_get_match(match_id: MatchId) -> Match | None:
    return await fetch_one_parsed(database, Match, matches.select().where(matches.c.id == match_id))


async def sql_get_match_by_position(
    tournament_id: TournamentId, round_: int, position: int
) -> Match | None:
    query = matches.select().where(
        and_(
            matches.c.tournament_id == tournament_id,
            matches.c.round == round_,
            matches.c.position == position,
        )
    )
    return await fetch_one_parsed(database, Match, query)


async def sql_get_matches(tournament_id: TournamentId, round_: int | None = None) -> list[Match]:
    query = matches.select().where(matches.c.tournament_id == tournament_id)
    if round_ is not None:
        query = query.where(matches.c.round == round_)

    return await fetch_all_parsed(
        database, Match, query.order_by(matches.c.round, matches.c.position)
    )


async def sql_get_active_matches(tournament_id: TournamentId | None = None) -> list[Match]:
    query = matches.select().where(matches.c.status == MatchStatus.ACTIVE.value)
    if tournament_id is not None:
        query = query.where(matches.c.tournament_id == tournament_id)

    return await fetch_all_parsed(
        database,
        Match,
        query.order_by(matches.c.tournament_id, matches.c.round, matches.c.position),
    )


async def sql_get_matches_of_player(player_id: PlayerId) -> list[Match]:
    query = (
        matches.select()
        .where(or_(matches.c.player1_id == player_id, matches.c.player2_id == player_id))
        .order_by(matches.c.created.desc(), matches.c.id.desc())
    )
    return await fetch_all_parsed(database, Match, query)


async def sql_create_match(match: MatchInsertable) -> Match:
    values = dict_with_enum_values(match.model_dump())
    return assert_some(
        await fetch_one_parsed(
            database, Match, matches.insert().values(**values).returning(*matches.c)
        )
    )


async def sql_activate_match(match_id: MatchId) -> Match | None:
    query = (
        matches.update()
        .where(
            and_(
                matches.c.id == match_id,
                matches.c.status == MatchStatus.WAITING.value,
                matches.c.player1_id.is_not(None),
                matches.c.player2_id.is_not(None),
            )
        )
        .values(status=MatchStatus.ACTIVE.value)
        .returning(*matches.c)
    )
    return await fetch_one_parsed(database, Match, query)


async def sql_update_match_scores(
    match_id: MatchId, player1_score: int, player2_score: int
) -> Match | None:
    query = (
        matches.update()
        .where(and_(matches.c.id == match_id, matches.c.status == MatchStatus.ACTIVE.value))
        .values(player1_score=player1_score, player2_score=player2_score)
        .returning(*matches.c)
    )
    return await fetch_one_parsed(database, Match, query)


async def sql_finish_match(match_id: MatchId, winner_id: PlayerId) -> Match | None:
    """
    Atomically moves an active match to FINISHED with the given winner.

    Returns None when the match is not active anymore or the winner occupies no slot, so
    that of two concurrent callers only one sees the finished row.
    """
    query = (
        matches.update()
        .where(
            and_(
                matches.c.id == match_id,
                matches.c.status == MatchStatus.ACTIVE.value,
                or_(matches.c.player1_id == winner_id, matches.c.player2_id == winner_id),
            )
        )
        .values(status=MatchStatus.FINISHED.value, winner_id=winner_id)
        .returning(*matches.c)
    )
    return await fetch_one_parsed(database, Match, query)


async def sql_finish_match_as_bye(match_id: MatchId, winner_id: PlayerId) -> Match | None:
    query = (
        matches.update()
        .where(
            and_(
                matches.c.id == match_id,
                matches.c.status != MatchStatus.FINISHED.value,
                or_(
                    and_(matches.c.player1_id == winner_id, matches.c.player2_id.is_(None)),
                    and_(matches.c.player2_id == winner_id, matches.c.player1_id.is_(None)),
                ),
            )
        )
        .values(status=MatchStatus.FINISHED.value, winner_id=winner_id, is_bye=True)
        .returning(*matches.c)
    )
    return await fetch_one_parsed(database, Match, query)


async def _assign_player_to_existing_match(
    tournament_id: TournamentId, next_slot: NextSlot, player_id: PlayerId
) -> Match | None:
    query = (
        matches.update()
        .where(
            and_(
                matches.c.tournament_id == tournament_id,
                matches.c.round == next_slot.round,
                matches.c.position == next_slot.position,
            )
        )
        .values({_slot_column(next_slot.slot): player_id})
        .returning(*matches.c)
    )
    return await fetch_one_parsed(database, Match, query)


async def sql_assign_player_to_next_match(
    tournament_id: TournamentId,
    next_slot: NextSlot,
    player_id: PlayerId,
    scheduled_time: str,
) -> Match:
    """
    Places a player in one slot of the match at (round, position), creating the match when
    it does not exist yet. The other slot is never touched.

    When two siblings advance at the same time, both may attempt the insert. The loser of
    that race hits the unique index on (tournament_id, round, position) and falls back to
    updating the row the winner created.
    """
    existing = await _assign_player_to_existing_match(tournament_id, next_slot, player_id)
    if existing is not None:
        return existing

    values = dict_with_enum_values(
        MatchInsertable(
            tournament_id=tournament_id,
            round=next_slot.round,
            position=next_slot.position,
            scheduled_time=scheduled_time,
            created=datetime_utc.now(),
            **{_slot_column(next_slot.slot): player_id},
        ).model_dump()
    )

    try:
        async with database.transaction():
            return assert_some(
                await fetch_one_parsed(
                    database, Match, matches.insert().values(**values).returning(*matches.c)
                )
            )
    except Exception as exc:
        if not is_unique_violation(exc):
            raise

    logger.info(
        f"Match at round {next_slot.round} position {next_slot.position} of tournament "
        f"{tournament_id} was created concurrently, updating it instead"
    )
    return assert_some(
        await _assign_player_to_existing_match(tournament_id, next_slot, player_id)
    )


async def sql_replace_player_in_slot(
    match_id: MatchId, slot: Slot, target_player_id: PlayerId, replacement_player_id: PlayerId
) -> Match | None:
    column = _slot_column(slot)
    query = (
        matches.update()
        .where(
            and_(
                matches.c.id == match_id,
                matches.c.status != MatchStatus.FINISHED.value,
                matches.c[column] == target_player_id,
            )
        )
        .values({column: replacement_player_id})
        .returning(*matches.c)
    )
    return await fetch_one_parsed(database, Match, query)


async def sql_fill_empty_slots(
    match_id: MatchId, replacement_player_id: PlayerId
) -> Match | None:
    query = (
        matches.update()
        .where(
            and_(
                matches.c.id == match_id,
                matches.c.status != MatchStatus.FINISHED.value,
                or_(matches.c.player1_id.is_(None), matches.c.player2_id.is_(None)),
            )
        )
        .values(
            player1_id=func.coalesce(matches.c.player1_id, replacement_player_id),
            player2_id=func.coalesce(matches.c.player2_id, replacement_player_id),
        )
        .returning(*matches.c)
    )
    return await fetch_one_parsed(database, Match, query)

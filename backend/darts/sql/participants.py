from heliclockter import datetime_utc
from sqlalchemy import and_, func, select

from darts.database import database
from darts.models.db.participant import (
    Participant,
    ParticipantInsertable,
    ParticipantWithPlayer,
)
from darts.models.db.player import Player
from darts.schema import participants, players
from darts.sql.tournaments import sql_lock_planned_tournament
from darts.utils.db import fetch_all_parsed, fetch_one_parsed
from darts.utils.errors import (
    DuplicateRegistration,
    TournamentNotReady,
    UniqueIndex,
    check_unique_constraint_violation,
)
from darts.utils.id_types import ParticipantId, PlayerId, TournamentId
from darts.utils.types import assert_some


async def get_participants(tournament_id: TournamentId) -> list[Participant]:
    query = (
        participants.select()
        .where(participants.c.tournament_id == tournament_id)
        .order_by(participants.c.draw_position, participants.c.id)
    )
    return await fetch_all_parsed(database, Participant, query)


async def get_participants_with_players(tournament_id: TournamentId) -> list[ParticipantWithPlayer]:
    player_columns = [column.label(f"player__{column.name}") for column in players.c]
    query = (
        select(participants, *player_columns)
        .select_from(participants.join(players, players.c.id == participants.c.player_id))
        .where(participants.c.tournament_id == tournament_id)
        .order_by(participants.c.draw_position, participants.c.id)
    )
    records = await database.fetch_all(query)

    result = []
    for record in records:
        mapping = dict(record._mapping)
        player = Player.model_validate(
            {
                key.removeprefix("player__"): value
                for key, value in mapping.items()
                if key.startswith("player__")
            }
        )
        participant = Participant.model_validate(
            {key: value for key, value in mapping.items() if not key.startswith("player__")}
        )
        result.append(ParticipantWithPlayer(**participant.model_dump(), player=player))

    return result


async def get_participant_count(tournament_id: TournamentId) -> int:
    query = (
        select(func.count())
        .select_from(participants)
        .where(participants.c.tournament_id == tournament_id)
    )
    return int(await database.fetch_val(query) or 0)


async def sql_register_participant(
    tournament_id: TournamentId, player_id: PlayerId
) -> Participant:
    values = ParticipantInsertable(
        tournament_id=tournament_id, player_id=player_id, registered=datetime_utc.now()
    ).model_dump()

    with check_unique_constraint_violation(
        {UniqueIndex.participants_tournament_id_player_id_key}, DuplicateRegistration()
    ):
        async with database.transaction():
            if not await sql_lock_planned_tournament(tournament_id):
                raise TournamentNotReady(
                    "Participants can only register before the tournament starts"
                )

            return assert_some(
                await fetch_one_parsed(
                    database,
                    Participant,
                    participants.insert().values(**values).returning(*participants.c),
                )
            )


async def sql_unregister_participant(tournament_id: TournamentId, player_id: PlayerId) -> bool:
    query = (
        participants.delete()
        .where(
            and_(
                participants.c.tournament_id == tournament_id,
                participants.c.player_id == player_id,
            )
        )
        .returning(participants.c.id)
    )
    return await database.fetch_one(query) is not None


async def sql_set_draw_positions(draw_positions: dict[ParticipantId, int]) -> None:
    for participant_id, draw_position in draw_positions.items():
        await database.execute(
            participants.update()
            .where(participants.c.id == participant_id)
            .values(draw_position=draw_position)
        )

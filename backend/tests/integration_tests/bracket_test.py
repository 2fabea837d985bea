import random

import pytest

from darts.config import ByePolicy, config
from darts.logic.lifecycle import activate_match, finish_match, update_match_score
from darts.logic.scheduling import builder
from darts.logic.scheduling.builder import seed_and_start
from darts.logic.tournaments import get_tournament_bracket
from darts.models.db.match import Match, MatchStatus, NextSlot
from darts.models.db.tournament import TournamentBody, TournamentFormat, TournamentStatus
from darts.sql import matches as matches_sql
from darts.sql.matches import sql_get_match, sql_get_match_by_position, sql_get_matches
from darts.sql.participants import get_participants, sql_register_participant
from darts.sql.players import get_player_by_id
from darts.sql.score_history import sql_get_score_history
from darts.sql.tournaments import sql_create_tournament, sql_get_tournament
from darts.utils.errors import (
    InsufficientParticipants,
    InvalidScore,
    InvalidTransition,
    MatchNotActive,
    TournamentNotReady,
    UnsupportedFormat,
)
from darts.utils.id_types import PlayerId, TournamentId
from darts.utils.types import assert_some
from tests.integration_tests.sql import (
    DUMMY_DATE,
    insert_players,
    insert_tournament_with_players,
)


async def _get_match(tournament_id: TournamentId, round_: int, position: int) -> Match:
    return assert_some(await sql_get_match_by_position(tournament_id, round_, position))


async def _play(match: Match, winner_slot: int = 1) -> Match:
    if match.status == MatchStatus.WAITING:
        await activate_match(match.id)

    winner_id = assert_some(match.player1_id if winner_slot == 1 else match.player2_id)
    return await finish_match(match.id, winner_id)


@pytest.mark.asyncio(loop_scope="session")
async def test_two_players_single_final() -> None:
    tournament, players = await insert_tournament_with_players(2)

    [final] = await seed_and_start(tournament.id, random.Random(3))
    assert final.status == MatchStatus.ACTIVE
    assert {final.player1_id, final.player2_id} == {player.id for player in players}

    started = assert_some(await sql_get_tournament(tournament.id))
    assert started.status == TournamentStatus.IN_PROGRESS
    assert started.total_rounds == 1
    assert started.current_round == 1

    await finish_match(final.id, assert_some(final.player2_id))

    finished = assert_some(await sql_get_tournament(tournament.id))
    assert finished.status == TournamentStatus.FINISHED
    assert finished.champion_id == final.player2_id
    assert len(await sql_get_matches(tournament.id)) == 1

    champion = assert_some(await get_player_by_id(assert_some(final.player2_id)))
    assert champion.wins == 1
    assert champion.participations == 1


@pytest.mark.asyncio(loop_scope="session")
async def test_seeding_assigns_each_draw_position_once() -> None:
    tournament, players = await insert_tournament_with_players(8)

    first_round = await seed_and_start(tournament.id, random.Random(11))
    participants = await get_participants(tournament.id)

    assert sorted(participant.draw_position or 0 for participant in participants) == list(
        range(1, 9)
    )
    assert [match.position for match in first_round] == [1, 2, 3, 4]
    assert [match.status for match in first_round] == [
        MatchStatus.ACTIVE,
        MatchStatus.WAITING,
        MatchStatus.WAITING,
        MatchStatus.WAITING,
    ]

    by_draw_position = {
        participant.draw_position: participant.player_id for participant in participants
    }
    for match in first_round:
        assert match.player1_id == by_draw_position[2 * match.position - 1]
        assert match.player2_id == by_draw_position[2 * match.position]

    for player in players:
        assert assert_some(await get_player_by_id(player.id)).participations == 1


@pytest.mark.asyncio(loop_scope="session")
async def test_four_players_full_bracket() -> None:
    tournament, _ = await insert_tournament_with_players(4)
    await seed_and_start(tournament.id, random.Random(5))

    semi_final_1 = await _get_match(tournament.id, 1, 1)
    semi_final_2 = await _get_match(tournament.id, 1, 2)

    await _play(semi_final_1, winner_slot=1)
    final = await _get_match(tournament.id, 2, 1)
    assert final.player1_id == semi_final_1.player1_id
    assert final.player2_id is None
    assert final.status == MatchStatus.WAITING
    assert final.scheduled_time == "19:45:00"
    assert assert_some(await sql_get_tournament(tournament.id)).current_round == 2

    with pytest.raises(InvalidTransition):
        await activate_match(final.id)

    await _play(semi_final_2, winner_slot=2)
    final = await _get_match(tournament.id, 2, 1)
    assert final.player1_id == semi_final_1.player1_id
    assert final.player2_id == semi_final_2.player2_id

    await _play(final, winner_slot=2)

    finished = assert_some(await sql_get_tournament(tournament.id))
    assert finished.status == TournamentStatus.FINISHED
    assert finished.champion_id == semi_final_2.player2_id
    assert len(await sql_get_matches(tournament.id)) == 3


@pytest.mark.asyncio(loop_scope="session")
async def test_five_players_manual_byes_wait_for_repechage() -> None:
    tournament, _ = await insert_tournament_with_players(5)
    first_round = await seed_and_start(tournament.id, random.Random(8))

    assert len(first_round) == 3
    lone = first_round[2]
    assert lone.player2_id is None
    assert lone.status == MatchStatus.WAITING
    assert not lone.is_bye
    assert assert_some(await sql_get_tournament(tournament.id)).total_rounds == 3

    await _play(first_round[0])
    await _play(first_round[1])

    assert assert_some(await sql_get_match(lone.id)).status == MatchStatus.WAITING
    assert await sql_get_match_by_position(tournament.id, 2, 2) is None
    assert (await _get_match(tournament.id, 2, 1)).player2_id is not None


@pytest.mark.asyncio(loop_scope="session")
async def test_five_players_auto_advance_byes(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "bye_policy", ByePolicy.AUTO_ADVANCE)
    tournament, _ = await insert_tournament_with_players(5)
    first_round = await seed_and_start(tournament.id, random.Random(8))

    lone = first_round[2]
    assert lone.is_bye
    assert lone.status == MatchStatus.FINISHED
    assert lone.winner_id == lone.player1_id

    second_round_bye = await _get_match(tournament.id, 2, 2)
    assert second_round_bye.is_bye
    assert second_round_bye.player1_id == lone.player1_id

    final = await _get_match(tournament.id, 3, 1)
    assert final.player1_id is None
    assert final.player2_id == lone.player1_id

    await _play(first_round[0])
    await _play(first_round[1])
    await _play(await _get_match(tournament.id, 2, 1))
    await _play(await _get_match(tournament.id, 3, 1), winner_slot=2)

    finished = assert_some(await sql_get_tournament(tournament.id))
    assert finished.status == TournamentStatus.FINISHED
    assert finished.champion_id == lone.player1_id

    # byes are not counted as wins
    champion = assert_some(await get_player_by_id(assert_some(lone.player1_id)))
    assert champion.wins == 1


@pytest.mark.asyncio(loop_scope="session")
async def test_auto_activate_ready_matches(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "auto_activate_ready_matches", True)
    tournament, _ = await insert_tournament_with_players(4)
    await seed_and_start(tournament.id, random.Random(2))

    await _play(await _get_match(tournament.id, 1, 1))
    assert (await _get_match(tournament.id, 2, 1)).status == MatchStatus.WAITING

    await _play(await _get_match(tournament.id, 1, 2))
    assert (await _get_match(tournament.id, 2, 1)).status == MatchStatus.ACTIVE


@pytest.mark.asyncio(loop_scope="session")
async def test_finishing_twice_is_rejected() -> None:
    tournament, _ = await insert_tournament_with_players(4)
    first_round = await seed_and_start(tournament.id, random.Random(4))
    match = first_round[0]

    await finish_match(match.id, assert_some(match.player1_id))
    with pytest.raises(MatchNotActive):
        await finish_match(match.id, assert_some(match.player2_id))

    final = await _get_match(tournament.id, 2, 1)
    assert final.player1_id == match.player1_id
    winner = assert_some(await get_player_by_id(assert_some(match.player1_id)))
    assert winner.wins == 1


@pytest.mark.asyncio(loop_scope="session")
async def test_start_preconditions() -> None:
    tournament, _ = await insert_tournament_with_players(1)
    with pytest.raises(InsufficientParticipants):
        await seed_and_start(tournament.id)

    unchanged = assert_some(await sql_get_tournament(tournament.id))
    assert unchanged.status == TournamentStatus.PLANNED
    assert unchanged.current_round == 0
    assert await sql_get_matches(tournament.id) == []

    tournament, _ = await insert_tournament_with_players(4, name="Second")
    await seed_and_start(tournament.id)
    with pytest.raises(TournamentNotReady):
        await seed_and_start(tournament.id)

    pools = await sql_create_tournament(
        TournamentBody(name="Pools", date=DUMMY_DATE, format=TournamentFormat.POOLS)
    )
    with pytest.raises(UnsupportedFormat):
        await seed_and_start(pools.id)


@pytest.mark.asyncio(loop_scope="session")
async def test_scores_are_recorded_in_history() -> None:
    tournament, _ = await insert_tournament_with_players(4)
    first_round = await seed_and_start(tournament.id, random.Random(6))
    active, waiting = first_round[0], first_round[1]

    await update_match_score(active.id, 1, 0)
    updated = await update_match_score(active.id, 2, 1)
    assert (updated.player1_score, updated.player2_score) == (2, 1)

    history = await sql_get_score_history(active.id)
    assert [(entry.player_id, entry.score) for entry in history] == [
        (active.player1_id, 1),
        (active.player2_id, 0),
        (active.player1_id, 2),
        (active.player2_id, 1),
    ]

    with pytest.raises(InvalidScore):
        await update_match_score(active.id, -1, 0)

    with pytest.raises(MatchNotActive):
        await update_match_score(waiting.id, 1, 0)

    assert len(await sql_get_score_history(active.id)) == 4


@pytest.mark.asyncio(loop_scope="session")
async def test_bracket_reads_are_stable() -> None:
    tournament, _ = await insert_tournament_with_players(6)
    await seed_and_start(tournament.id, random.Random(9))
    await _play(await _get_match(tournament.id, 1, 1))

    first_read = await get_tournament_bracket(tournament.id)
    second_read = await get_tournament_bracket(tournament.id)

    assert first_read == second_read
    assert [bracket_round.round for bracket_round in first_read.rounds] == [1, 2]
    assert [match.position for match in first_read.rounds[0].matches] == [1, 2, 3]


@pytest.mark.asyncio(loop_scope="session")
async def test_late_registration_is_part_of_the_draw(monkeypatch: pytest.MonkeyPatch) -> None:
    tournament, _ = await insert_tournament_with_players(4)
    [late_player] = await insert_players(1)
    count_participants = builder.get_participant_count

    async def count_then_register(tournament_id: TournamentId) -> int:
        count = await count_participants(tournament_id)
        await sql_register_participant(tournament_id, late_player.id)
        return count

    monkeypatch.setattr(builder, "get_participant_count", count_then_register)
    first_round = await seed_and_start(tournament.id, random.Random(1))

    started = assert_some(await sql_get_tournament(tournament.id))
    assert started.total_rounds == 3
    assert len(first_round) == 3
    assert len(await get_participants(tournament.id)) == 5
    assert late_player.id in {
        player_id for match in first_round for player_id in match.player_ids
    }


@pytest.mark.asyncio(loop_scope="session")
async def test_registration_after_start_is_rejected() -> None:
    tournament, _ = await insert_tournament_with_players(4)
    [late_player] = await insert_players(1)
    await seed_and_start(tournament.id, random.Random(1))

    with pytest.raises(TournamentNotReady):
        await sql_register_participant(tournament.id, late_player.id)

    assert len(await get_participants(tournament.id)) == 4
    assert assert_some(await sql_get_tournament(tournament.id)).total_rounds == 2


@pytest.mark.asyncio(loop_scope="session")
async def test_eight_players_siblings_share_next_match() -> None:
    tournament, _ = await insert_tournament_with_players(8)
    await seed_and_start(tournament.id, random.Random(12))

    position_3 = await _get_match(tournament.id, 1, 3)
    position_4 = await _get_match(tournament.id, 1, 4)

    await _play(position_4, winner_slot=2)
    quarter = await _get_match(tournament.id, 2, 2)
    assert quarter.player1_id is None
    assert quarter.player2_id == position_4.player2_id

    await _play(position_3, winner_slot=1)
    quarter = await _get_match(tournament.id, 2, 2)
    assert quarter.player1_id == position_3.player1_id
    assert quarter.player2_id == position_4.player2_id

    second_round = await sql_get_matches(tournament.id, round_=2)
    assert [match.position for match in second_round] == [2]


@pytest.mark.asyncio(loop_scope="session")
async def test_next_match_created_concurrently_is_updated(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    tournament, _ = await insert_tournament_with_players(4)
    await seed_and_start(tournament.id, random.Random(7))
    semi_final_1 = await _get_match(tournament.id, 1, 1)
    semi_final_2 = await _get_match(tournament.id, 1, 2)
    await _play(semi_final_1)

    assign_to_existing = matches_sql._assign_player_to_existing_match
    results: list[Match | None] = []

    async def miss_first_update(
        tournament_id: TournamentId, next_slot: NextSlot, player_id: PlayerId
    ) -> Match | None:
        # The first lookup runs as if the sibling had not inserted the row yet
        result = (
            None
            if not results
            else await assign_to_existing(tournament_id, next_slot, player_id)
        )
        results.append(result)
        return result

    monkeypatch.setattr(matches_sql, "_assign_player_to_existing_match", miss_first_update)
    await _play(semi_final_2, winner_slot=2)

    assert len(results) == 2
    assert results[0] is None
    assert results[1] is not None

    final = await _get_match(tournament.id, 2, 1)
    assert final.player1_id == semi_final_1.player1_id
    assert final.player2_id == semi_final_2.player2_id
    assert len(await sql_get_matches(tournament.id, round_=2)) == 1

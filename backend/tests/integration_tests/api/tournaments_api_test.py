import random
from http import HTTPMethod

import pytest
from starlette import status

from darts.logic.scheduling.builder import seed_and_start
from darts.sql.matches import sql_get_matches
from darts.sql.tournaments import sql_get_tournament
from tests.integration_tests.api.shared import SUCCESS_RESPONSE, send_request
from tests.integration_tests.sql import insert_players, insert_tournament_with_players


@pytest.mark.asyncio(loop_scope="session")
async def test_create_tournament() -> None:
    status_code, response = await send_request(
        HTTPMethod.POST, "tournaments", json={"name": "Autumn cup", "date": "2026-10-17"}
    )
    assert status_code == status.HTTP_200_OK
    tournament = response["data"]
    assert tournament["status"] == "PLANNED"
    assert tournament["format"] == "SINGLE_ELIMINATION"
    assert tournament["current_round"] == 0
    assert tournament["total_rounds"] is None
    assert tournament["champion_id"] is None


@pytest.mark.asyncio(loop_scope="session")
async def test_list_tournaments_with_filter() -> None:
    started, _ = await insert_tournament_with_players(2, name="Started")
    planned, _ = await insert_tournament_with_players(2, name="Planned")
    await seed_and_start(started.id, random.Random(1))

    _, response = await send_request(HTTPMethod.GET, "tournaments")
    assert {tournament["id"] for tournament in response["data"]} == {started.id, planned.id}

    _, response = await send_request(HTTPMethod.GET, "tournaments?filter=IN_PROGRESS")
    assert [tournament["id"] for tournament in response["data"]] == [started.id]

    _, response = await send_request(HTTPMethod.GET, "tournaments?filter=UPCOMING")
    assert [tournament["id"] for tournament in response["data"]] == [planned.id]

    _, response = await send_request(HTTPMethod.GET, "tournaments/current")
    assert response["data"]["id"] == started.id


@pytest.mark.asyncio(loop_scope="session")
async def test_update_only_while_planned() -> None:
    tournament, _ = await insert_tournament_with_players(2)

    status_code, response = await send_request(
        HTTPMethod.PUT, f"tournaments/{tournament.id}", json={"name": "Renamed"}
    )
    assert status_code == status.HTTP_200_OK
    assert response["data"]["name"] == "Renamed"

    await seed_and_start(tournament.id, random.Random(1))
    status_code, _ = await send_request(
        HTTPMethod.PUT, f"tournaments/{tournament.id}", json={"name": "Too late"}
    )
    assert status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.asyncio(loop_scope="session")
async def test_participant_registration() -> None:
    tournament, players = await insert_tournament_with_players(2)
    [newcomer] = await insert_players(1)

    status_code, response = await send_request(
        HTTPMethod.POST,
        f"tournaments/{tournament.id}/participants",
        json={"player_id": newcomer.id},
    )
    assert status_code == status.HTTP_200_OK
    assert response["data"]["draw_position"] is None

    status_code, response = await send_request(
        HTTPMethod.POST,
        f"tournaments/{tournament.id}/participants",
        json={"player_id": newcomer.id},
    )
    assert status_code == status.HTTP_409_CONFLICT
    assert response == {"detail": "Player is already registered for this tournament"}

    status_code, _ = await send_request(
        HTTPMethod.POST, f"tournaments/{tournament.id}/participants", json={"player_id": 999_999}
    )
    assert status_code == status.HTTP_404_NOT_FOUND

    _, response = await send_request(HTTPMethod.GET, f"tournaments/{tournament.id}/participants")
    assert {participant["player"]["id"] for participant in response["data"]} == {
        players[0].id,
        players[1].id,
        newcomer.id,
    }

    status_code, response = await send_request(
        HTTPMethod.DELETE, f"tournaments/{tournament.id}/participants/{newcomer.id}"
    )
    assert status_code == status.HTTP_200_OK
    assert response == SUCCESS_RESPONSE


@pytest.mark.asyncio(loop_scope="session")
async def test_start_tournament_and_read_bracket() -> None:
    tournament, _ = await insert_tournament_with_players(5)

    status_code, response = await send_request(
        HTTPMethod.POST, f"tournaments/{tournament.id}/start"
    )
    assert status_code == status.HTTP_200_OK
    assert [match["position"] for match in response["data"]] == [1, 2, 3]

    status_code, response = await send_request(
        HTTPMethod.POST, f"tournaments/{tournament.id}/start"
    )
    assert status_code == status.HTTP_400_BAD_REQUEST
    assert response == {"detail": "Tournament is not in the planned state"}

    status_code, response = await send_request(
        HTTPMethod.POST,
        f"tournaments/{tournament.id}/participants",
        json={"player_id": 1},
    )
    assert status_code == status.HTTP_400_BAD_REQUEST

    _, first_read = await send_request(HTTPMethod.GET, f"tournaments/{tournament.id}/bracket")
    _, second_read = await send_request(HTTPMethod.GET, f"tournaments/{tournament.id}/bracket")
    assert first_read == second_read
    assert [bracket_round["round"] for bracket_round in first_read["data"]["rounds"]] == [1]

    _, details = await send_request(HTTPMethod.GET, f"tournaments/{tournament.id}/details")
    assert details["data"]["tournament"]["status"] == "IN_PROGRESS"
    assert [
        participant["draw_position"] for participant in details["data"]["participants"]
    ] == [1, 2, 3, 4, 5]
    assert len(details["data"]["matches"]) == 3
    assert details["data"]["champion"] is None

    _, response = await send_request(
        HTTPMethod.GET, f"tournaments/{tournament.id}/matches?round=1"
    )
    assert len(response["data"]) == 3


@pytest.mark.asyncio(loop_scope="session")
async def test_start_with_too_few_participants() -> None:
    tournament, _ = await insert_tournament_with_players(1)

    status_code, response = await send_request(
        HTTPMethod.POST, f"tournaments/{tournament.id}/start"
    )
    assert status_code == status.HTTP_400_BAD_REQUEST
    assert response == {"detail": "A tournament needs at least 2 participants to start"}

    status_code, _ = await send_request(HTTPMethod.POST, "tournaments/999999/start")
    assert status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio(loop_scope="session")
async def test_delete_tournament_removes_matches() -> None:
    tournament, _ = await insert_tournament_with_players(4)
    await seed_and_start(tournament.id, random.Random(1))

    status_code, response = await send_request(
        HTTPMethod.DELETE, f"tournaments/{tournament.id}"
    )
    assert status_code == status.HTTP_200_OK
    assert response == SUCCESS_RESPONSE
    assert await sql_get_tournament(tournament.id) is None
    assert await sql_get_matches(tournament.id) == []

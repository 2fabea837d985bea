import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from enum import auto

from asyncpg.exceptions import ForeignKeyViolationError, UniqueViolationError
from starlette import status

from darts.utils.types import EnumAutoStr


class UniqueIndex(EnumAutoStr):
    participants_tournament_id_player_id_key = auto()
    matches_tournament_id_round_position_key = auto()


class ForeignKey(EnumAutoStr):
    matches_player1_id_fkey = auto()
    matches_player2_id_fkey = auto()
    matches_winner_id_fkey = auto()
    participants_player_id_fkey = auto()
    score_history_player_id_fkey = auto()


class DartsError(Exception):
    """Base class of the precondition violations raised by the bracket engine."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Invalid request"

    def __init__(self, message: str | None = None) -> None:
        self.message = message if message is not None else self.default_message
        super().__init__(self.message)


class InsufficientParticipants(DartsError):
    default_message = "A tournament needs at least 2 participants to start"


class TournamentNotReady(DartsError):
    default_message = "Tournament is not in the planned state"


class SeedingRequired(DartsError):
    default_message = "Participants have no draw position yet"


class UnsupportedFormat(DartsError):
    default_message = "Only single elimination tournaments can be run"


class InvalidTransition(DartsError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Match cannot make this transition"


class MatchNotActive(DartsError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Match is not active"


class InvalidWinner(DartsError):
    default_message = "Winner is not a player of this match"


class InvalidScore(DartsError):
    default_message = "Scores must be non-negative integers"


class PlayerNotInMatch(DartsError):
    default_message = "Player does not occupy a slot of this match"


class NoEmptySlot(DartsError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Match has no empty slot"


class NoRepechageCandidates(DartsError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "No eliminated player is available for a repechage"


class TournamentNotFound(DartsError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Could not find tournament"


class MatchNotFound(DartsError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Could not find match"


class PlayerNotFound(DartsError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Could not find player"


class PlayerAlreadyActive(DartsError):
    default_message = "Player is already active"


class PlayerReferenced(DartsError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Player is still referenced by a match, disable it instead"


class DuplicateRegistration(DartsError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Player is already registered for this tournament"


def is_unique_violation(exc: Exception) -> bool:
    if isinstance(exc, UniqueViolationError):
        return True
    return isinstance(exc, sqlite3.IntegrityError) and "UNIQUE constraint failed" in str(exc)


def is_foreign_key_violation(exc: Exception) -> bool:
    if isinstance(exc, ForeignKeyViolationError):
        return True
    return isinstance(exc, sqlite3.IntegrityError) and "FOREIGN KEY constraint failed" in str(exc)


@contextmanager
def check_unique_constraint_violation(
    expected_violations: set[UniqueIndex], error: DartsError
) -> Iterator[None]:
    try:
        yield
    except (UniqueViolationError, sqlite3.IntegrityError) as exc:
        if not is_unique_violation(exc):
            raise

        constraint_name = getattr(exc, "constraint_name", None)
        if constraint_name is not None and constraint_name not in {
            index.value for index in expected_violations
        }:
            raise

        raise error from exc


@contextmanager
def check_foreign_key_violation(
    expected_violations: set[ForeignKey], error: DartsError
) -> Iterator[None]:
    try:
        yield
    except (ForeignKeyViolationError, sqlite3.IntegrityError) as exc:
        if not is_foreign_key_violation(exc):
            raise

        constraint_name = getattr(exc, "constraint_name", None)
        if constraint_name is not None and constraint_name not in {
            key.value for key in expected_violations
        }:
            raise

        raise error from exc

"""Model registration module used by alembic autogeneration."""

from darts.schema import (  # noqa: F401
    matches,
    participants,
    players,
    score_history,
    tournaments,
)

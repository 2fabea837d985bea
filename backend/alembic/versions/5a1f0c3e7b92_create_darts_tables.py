"""create players, tournaments, participants, matches and score history tables

Revision ID: 5a1f0c3e7b92
Revises:
Create Date: 2026-10-17 00:00:00.000000
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5a1f0c3e7b92"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

player_level_enum = sa.Enum(
    "BEGINNER", "AMATEUR", "INTERMEDIATE", "SEMI_PRO", "PROFESSIONAL", name="player_level"
)
tournament_format_enum = sa.Enum(
    "SINGLE_ELIMINATION", "DOUBLE_ELIMINATION", "POOLS", name="tournament_format"
)
tournament_status_enum = sa.Enum("PLANNED", "IN_PROGRESS", "FINISHED", name="tournament_status")
match_status_enum = sa.Enum("WAITING", "ACTIVE", "FINISHED", name="match_status")


def upgrade() -> None:
    op.create_table(
        "players",
        sa.Column("id", sa.BigInteger(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("nickname", sa.String(), nullable=True),
        sa.Column("level", player_level_enum, server_default="AMATEUR", nullable=False),
        sa.Column("participations", sa.Integer(), server_default="0", nullable=False),
        sa.Column("wins", sa.Integer(), server_default="0", nullable=False),
        sa.Column("active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("created", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_players_id"), "players", ["id"], unique=False)
    op.create_index(op.f("ix_players_first_name"), "players", ["first_name"], unique=False)
    op.create_index(op.f("ix_players_last_name"), "players", ["last_name"], unique=False)
    op.create_index(op.f("ix_players_active"), "players", ["active"], unique=False)

    op.create_table(
        "tournaments",
        sa.Column("id", sa.BigInteger(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column(
            "format", tournament_format_enum, server_default="SINGLE_ELIMINATION", nullable=False
        ),
        sa.Column("status", tournament_status_enum, server_default="PLANNED", nullable=False),
        sa.Column("current_round", sa.Integer(), server_default="0", nullable=False),
        sa.Column("total_rounds", sa.Integer(), nullable=True),
        sa.Column("champion_id", sa.BigInteger(), nullable=True),
        sa.Column("created", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["champion_id"], ["players.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tournaments_id"), "tournaments", ["id"], unique=False)
    op.create_index(op.f("ix_tournaments_name"), "tournaments", ["name"], unique=False)
    op.create_index(op.f("ix_tournaments_date"), "tournaments", ["date"], unique=False)
    op.create_index(op.f("ix_tournaments_status"), "tournaments", ["status"], unique=False)

    op.create_table(
        "participants",
        sa.Column("id", sa.BigInteger(), nullable=False),
        sa.Column("tournament_id", sa.BigInteger(), nullable=False),
        sa.Column("player_id", sa.BigInteger(), nullable=False),
        sa.Column("draw_position", sa.Integer(), nullable=True),
        sa.Column("registered", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "tournament_id", "player_id", name="participants_tournament_id_player_id_key"
        ),
    )
    op.create_index(op.f("ix_participants_id"), "participants", ["id"], unique=False)
    op.create_index(
        op.f("ix_participants_tournament_id"), "participants", ["tournament_id"], unique=False
    )
    op.create_index(op.f("ix_participants_player_id"), "participants", ["player_id"], unique=False)

    op.create_table(
        "matches",
        sa.Column("id", sa.BigInteger(), nullable=False),
        sa.Column("tournament_id", sa.BigInteger(), nullable=False),
        sa.Column("round", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("player1_id", sa.BigInteger(), nullable=True),
        sa.Column("player2_id", sa.BigInteger(), nullable=True),
        sa.Column("player1_score", sa.Integer(), server_default="0", nullable=False),
        sa.Column("player2_score", sa.Integer(), server_default="0", nullable=False),
        sa.Column("winner_id", sa.BigInteger(), nullable=True),
        sa.Column("status", match_status_enum, server_default="WAITING", nullable=False),
        sa.Column("scheduled_time", sa.String(), nullable=False),
        sa.Column("is_bye", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("created", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["player1_id"], ["players.id"]),
        sa.ForeignKeyConstraint(["player2_id"], ["players.id"]),
        sa.ForeignKeyConstraint(["winner_id"], ["players.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "tournament_id",
            "round",
            "position",
            name="matches_tournament_id_round_position_key",
        ),
    )
    op.create_index(op.f("ix_matches_id"), "matches", ["id"], unique=False)
    op.create_index(op.f("ix_matches_tournament_id"), "matches", ["tournament_id"], unique=False)
    op.create_index(op.f("ix_matches_status"), "matches", ["status"], unique=False)

    op.create_table(
        "score_history",
        sa.Column("id", sa.BigInteger(), nullable=False),
        sa.Column("match_id", sa.BigInteger(), nullable=False),
        sa.Column("player_id", sa.BigInteger(), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("created", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["match_id"], ["matches.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["player_id"], ["players.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_score_history_id"), "score_history", ["id"], unique=False)
    op.create_index(
        op.f("ix_score_history_match_id"), "score_history", ["match_id"], unique=False
    )
    op.create_index(
        op.f("ix_score_history_player_id"), "score_history", ["player_id"], unique=False
    )


def downgrade() -> None:
    op.drop_table("score_history")
    op.drop_table("matches")
    op.drop_table("participants")
    op.drop_table("tournaments")
    op.drop_table("players")

    bind = op.get_bind()
    for enum in (
        match_status_enum,
        tournament_status_enum,
        tournament_format_enum,
        player_level_enum,
    ):
        enum.drop(bind, checkfirst=True)

from sqlalchemy import Column, ForeignKey, Integer, String, Table, UniqueConstraint
from sqlalchemy.orm import declarative_base  # type: ignore[attr-defined]
from sqlalchemy.sql.sqltypes import BigInteger, Boolean, Date, DateTime, Enum

Base = declarative_base()
metadata = Base.metadata
DateTimeTZ = DateTime(timezone=True)

players = Table(
    "players",
    metadata,
    Column("id", BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True),
    Column("first_name", String, nullable=False, index=True),
    Column("last_name", String, nullable=False, index=True),
    Column("nickname", String, nullable=True),
    Column(
        "level",
        Enum(
            "BEGINNER",
            "AMATEUR",
            "INTERMEDIATE",
            "SEMI_PRO",
            "PROFESSIONAL",
            name="player_level",
        ),
        nullable=False,
        server_default="AMATEUR",
    ),
    Column("participations", Integer, nullable=False, server_default="0"),
    Column("wins", Integer, nullable=False, server_default="0"),
    Column("active", Boolean, nullable=False, server_default="1", index=True),
    Column("created", DateTimeTZ, nullable=False),
)

tournaments = Table(
    "tournaments",
    metadata,
    Column("id", BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True),
    Column("name", String, nullable=False, index=True),
    Column("date", Date, nullable=False, index=True),
    Column(
        "format",
        Enum(
            "SINGLE_ELIMINATION",
            "DOUBLE_ELIMINATION",
            "POOLS",
            name="tournament_format",
        ),
        nullable=False,
        server_default="SINGLE_ELIMINATION",
    ),
    Column(
        "status",
        Enum(
            "PLANNED",
            "IN_PROGRESS",
            "FINISHED",
            name="tournament_status",
        ),
        nullable=False,
        server_default="PLANNED",
        index=True,
    ),
    Column("current_round", Integer, nullable=False, server_default="0"),
    Column("total_rounds", Integer, nullable=True),
    Column("champion_id", BigInteger, ForeignKey("players.id"), nullable=True),
    Column("created", DateTimeTZ, nullable=False),
)

participants = Table(
    "participants",
    metadata,
    Column("id", BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True),
    Column(
        "tournament_id",
        BigInteger,
        ForeignKey("tournaments.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    ),
    Column(
        "player_id",
        BigInteger,
        ForeignKey("players.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    ),
    Column("draw_position", Integer, nullable=True),
    Column("registered", DateTimeTZ, nullable=False),
    UniqueConstraint(
        "tournament_id", "player_id", name="participants_tournament_id_player_id_key"
    ),
)

matches = Table(
    "matches",
    metadata,
    Column("id", BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True),
    Column(
        "tournament_id",
        BigInteger,
        ForeignKey("tournaments.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    ),
    Column("round", Integer, nullable=False),
    Column("position", Integer, nullable=False),
    Column("player1_id", BigInteger, ForeignKey("players.id"), nullable=True),
    Column("player2_id", BigInteger, ForeignKey("players.id"), nullable=True),
    Column("player1_score", Integer, nullable=False, server_default="0"),
    Column("player2_score", Integer, nullable=False, server_default="0"),
    Column("winner_id", BigInteger, ForeignKey("players.id"), nullable=True),
    Column(
        "status",
        Enum(
            "WAITING",
            "ACTIVE",
            "FINISHED",
            name="match_status",
        ),
        nullable=False,
        server_default="WAITING",
        index=True,
    ),
    Column("scheduled_time", String, nullable=False),
    Column("is_bye", Boolean, nullable=False, server_default="0"),
    Column("created", DateTimeTZ, nullable=False),
    UniqueConstraint(
        "tournament_id", "round", "position", name="matches_tournament_id_round_position_key"
    ),
)

score_history = Table(
    "score_history",
    metadata,
    Column("id", BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True),
    Column(
        "match_id",
        BigInteger,
        ForeignKey("matches.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    ),
    Column("player_id", BigInteger, ForeignKey("players.id"), index=True, nullable=False),
    Column("score", Integer, nullable=False),
    Column("created", DateTimeTZ, nullable=False),
)

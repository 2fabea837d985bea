import fcntl
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from alembic.config import Config

from alembic import command
from darts.config import config
from darts.utils.logging import logger

BACKEND_DIR = Path(__file__).resolve().parents[2]


@contextmanager
def migration_lock(lock_path: str) -> Iterator[None]:
    """
    Serializes migrations between workers that start at the same time.
    """
    with open(lock_path, "w", encoding="utf-8") as lock_file:
        fcntl.flock(lock_file, fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file, fcntl.LOCK_UN)


def get_alembic_config() -> Config:
    alembic_config = Config(str(BACKEND_DIR / "alembic.ini"))
    alembic_config.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    return alembic_config


def alembic_run_migrations(revision: str = "head") -> None:
    with migration_lock(config.migration_lock_path):
        logger.info(f"Upgrading darts database to revision {revision}")
        command.upgrade(get_alembic_config(), revision)

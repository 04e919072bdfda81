from pathlib import Path

from alembic import command
from alembic.config import Config

ALEMBIC_DIR = Path(__file__).resolve().parents[2] / "alembic"


def build_config(database_url: str) -> Config:
    config = Config()
    config.set_main_option("script_location", str(ALEMBIC_DIR))
    config.set_main_option("sqlalchemy.url", database_url)
    return config


def upgrade_database(database_url: str, revision: str = "head") -> None:
    """Apply the Alembic revisions under ``apps/api/alembic`` up to ``revision``.

    The revisions are read from the source tree next to the package, so this
    needs a checkout or an editable install (``pip install -e .``); a regular
    wheel install does not ship them.
    """
    if not ALEMBIC_DIR.is_dir():
        raise FileNotFoundError(
            f"Alembic scripts not found at {ALEMBIC_DIR}; install the project in editable mode"
        )
    command.upgrade(build_config(database_url), revision)

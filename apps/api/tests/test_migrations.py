from alembic import command
import pytest
from sqlalchemy import create_engine, inspect

from build_api.migrations import build_config, upgrade_database


def test_upgrade_creates_jobs_and_builds_tables(tmp_path) -> None:
    database_url = f"sqlite+pysqlite:///{tmp_path / 'migrated.db'}"

    upgrade_database(database_url)

    engine = create_engine(database_url)
    inspector = inspect(engine)
    assert {"jobs", "builds", "alembic_version"} <= set(inspector.get_table_names())
    build_columns = {column["name"] for column in inspector.get_columns("builds")}
    assert build_columns == {
        "id",
        "job_id",
        "number",
        "status",
        "cause",
        "sha",
        "create_time",
        "start_time",
        "end_time",
        "meta",
    }
    index_names = {index["name"] for index in inspector.get_indexes("builds")}
    assert "ix_builds_job_id_create_time_id" in index_names
    engine.dispose()


def test_downgrade_to_base_drops_tables(tmp_path) -> None:
    database_url = f"sqlite+pysqlite:///{tmp_path / 'migrated.db'}"
    upgrade_database(database_url)

    command.downgrade(build_config(database_url), "base")

    engine = create_engine(database_url)
    assert set(inspect(engine).get_table_names()) == {"alembic_version"}
    engine.dispose()


def test_upgrade_requires_alembic_scripts(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr("build_api.migrations.ALEMBIC_DIR", tmp_path / "missing")

    with pytest.raises(FileNotFoundError):
        upgrade_database(f"sqlite+pysqlite:///{tmp_path / 'migrated.db'}")

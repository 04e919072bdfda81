from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from build_api.config import get_settings
from build_api.db import Base, get_engine
from build_api.main import app

USER_TOKEN = "user-token"
PIPELINE_TOKEN = "pipeline-token"
ADMIN_TOKEN = "admin-token"


@pytest.fixture(autouse=True)
def reset_api_caches() -> Iterator[None]:
    get_settings.cache_clear()
    get_engine.cache_clear()
    yield
    get_settings.cache_clear()
    get_engine.cache_clear()


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[TestClient]:
    sqlite_db_path = tmp_path / "api-tests.db"
    monkeypatch.setenv("API_DATABASE_URL", f"sqlite+pysqlite:///{sqlite_db_path}")
    monkeypatch.setenv("API_DB_ECHO", "false")
    monkeypatch.setenv(
        "API_TOKENS",
        f"{USER_TOKEN}=user,{PIPELINE_TOKEN}=pipeline,{ADMIN_TOKEN}=admin",
    )

    engine = get_engine()
    Base.metadata.create_all(bind=engine)

    with TestClient(app, headers={"Authorization": f"Bearer {USER_TOKEN}"}) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    engine.dispose()

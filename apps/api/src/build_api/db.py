from functools import lru_cache
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase

from build_api.config import get_settings


class Base(DeclarativeBase):
    pass


def _engine_options(database_url: str, timeout_seconds: int) -> dict[str, Any]:
    backend = make_url(database_url).get_backend_name()
    if backend == "sqlite":
        return {"connect_args": {"timeout": timeout_seconds}}
    if backend == "postgresql":
        return {
            "pool_timeout": timeout_seconds,
            "connect_args": {"connect_timeout": timeout_seconds},
        }
    return {"pool_timeout": timeout_seconds}


@lru_cache
def get_engine() -> Engine:
    settings = get_settings()
    return create_engine(
        settings.database_url,
        echo=settings.db_echo,
        pool_pre_ping=True,
        **_engine_options(settings.database_url, settings.db_timeout_seconds),
    )

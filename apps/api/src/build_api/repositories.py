from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol, Sequence

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from build_api.listing import ListingConfig, SortDirection
from build_api.models import BuildRecord, BuildStatus, JobRecord


@dataclass(frozen=True)
class Job:
    id: str
    name: str
    pipeline_id: str | None
    state: str
    create_time: datetime | None


@dataclass(frozen=True)
class Build:
    id: int
    job_id: str
    number: int
    status: BuildStatus
    cause: str | None
    sha: str | None
    create_time: datetime | None
    start_time: datetime | None
    end_time: datetime | None
    meta: dict[str, Any] | None


class JobRepository(Protocol):
    def get(self, job_id: str) -> Job | None:
        ...


class BuildRepository(Protocol):
    def list_for_job(self, job_id: str, config: ListingConfig) -> Sequence[Build]:
        """Return the job's builds ordered and windowed per ``config``."""
        ...

    def get(self, build_id: int) -> Build | None:
        ...


_SORT_COLUMNS = {
    "createTime": BuildRecord.create_time,
    "startTime": BuildRecord.start_time,
    "endTime": BuildRecord.end_time,
    "number": BuildRecord.number,
    "status": BuildRecord.status,
    "id": BuildRecord.id,
}


def _to_job(record: JobRecord) -> Job:
    return Job(
        id=record.id,
        name=record.name,
        pipeline_id=record.pipeline_id,
        state=record.state,
        create_time=record.create_time,
    )


def _to_build(record: BuildRecord) -> Build:
    return Build(
        id=record.id,
        job_id=record.job_id,
        number=record.number,
        status=record.status,
        cause=record.cause,
        sha=record.sha,
        create_time=record.create_time,
        start_time=record.start_time,
        end_time=record.end_time,
        meta=record.meta,
    )


class SqlJobRepository:
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get(self, job_id: str) -> Job | None:
        with Session(self._engine) as session:
            record = session.get(JobRecord, job_id)
            return _to_job(record) if record is not None else None


class SqlBuildRepository:
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def list_for_job(self, job_id: str, config: ListingConfig) -> Sequence[Build]:
        column = _SORT_COLUMNS.get(config.sort_by)
        if column is None:
            raise ValueError(f"unsupported sort field: {config.sort_by}")

        # build id breaks ties in the same direction so desc is the exact reverse of asc
        if config.sort_direction is SortDirection.DESC:
            order_by = [column.desc().nulls_last(), BuildRecord.id.desc()]
        else:
            order_by = [column.asc().nulls_first(), BuildRecord.id.asc()]

        stmt = select(BuildRecord).where(BuildRecord.job_id == job_id).order_by(*order_by)
        if config.pagination is not None:
            stmt = stmt.offset(config.pagination.offset).limit(config.pagination.count)

        with Session(self._engine) as session:
            return [_to_build(record) for record in session.scalars(stmt).all()]

    def get(self, build_id: int) -> Build | None:
        with Session(self._engine) as session:
            record = session.get(BuildRecord, build_id)
            return _to_build(record) if record is not None else None

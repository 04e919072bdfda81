from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
import logging
from typing import Any, TypeVar

from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from build_api.errors import FieldError, NotFoundError, ServiceError, UpstreamError, ValidationError
from build_api.listing import SortDirection, build_listing_config, parse_build_list_query
from build_api.repositories import Build, BuildRepository, Job, JobRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _to_iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


def build_view(build: Build) -> dict[str, Any]:
    return {
        "id": build.id,
        "jobId": build.job_id,
        "number": build.number,
        "status": build.status.value,
        "cause": build.cause,
        "sha": build.sha,
        "createTime": _to_iso(build.create_time),
        "startTime": _to_iso(build.start_time),
        "endTime": _to_iso(build.end_time),
        "meta": build.meta,
    }


def job_view(job: Job) -> dict[str, Any]:
    return {
        "id": job.id,
        "name": job.name,
        "pipelineId": job.pipeline_id,
        "state": job.state,
        "createTime": _to_iso(job.create_time),
    }


class BuildListingService:
    """Read-only queries over jobs and their builds.

    Holds only its collaborators and defaults, so one instance can serve
    concurrent requests. Every collaborator failure leaves as a
    ``ServiceError``; query validation runs before any collaborator call.
    """

    def __init__(
        self,
        *,
        jobs: JobRepository,
        builds: BuildRepository,
        default_sort: SortDirection = SortDirection.ASC,
        default_count: int = 50,
    ) -> None:
        self._jobs = jobs
        self._builds = builds
        self._default_sort = default_sort
        self._default_count = default_count

    def list_builds(self, job_id: str, query: Mapping[str, Any]) -> list[dict[str, Any]]:
        try:
            parsed = parse_build_list_query(query)
        except ValidationError as exc:
            logger.info("rejected build listing query job_id=%s fields=%s", job_id, exc.fields)
            raise

        self._require_job(job_id)
        config = build_listing_config(
            parsed,
            default_sort=self._default_sort,
            default_count=self._default_count,
        )
        builds = self._call(
            lambda: self._builds.list_for_job(job_id, config),
            action="list builds",
        )

        logger.debug(
            "listed builds job_id=%s count=%d sort=%s sort_by=%s pagination=%s",
            job_id,
            len(builds),
            config.sort_direction.value,
            config.sort_by,
            config.pagination,
        )
        return [build_view(build) for build in builds]

    def get_job(self, job_id: str) -> dict[str, Any]:
        return job_view(self._require_job(job_id))

    def get_build(self, build_id: str) -> dict[str, Any]:
        try:
            parsed_id = int(build_id)
        except ValueError:
            raise ValidationError(
                "invalid build id",
                fields=[FieldError(field="id", message="must be an integer")],
            ) from None

        build = self._call(lambda: self._builds.get(parsed_id), action="fetch build")
        if build is None:
            raise NotFoundError("Build does not exist")
        return build_view(build)

    def _require_job(self, job_id: str) -> Job:
        job = self._call(lambda: self._jobs.get(job_id), action="fetch job")
        if job is None:
            logger.info("job not found job_id=%s", job_id)
            raise NotFoundError("Job does not exist")
        return job

    def _call(self, operation: Callable[[], T], *, action: str) -> T:
        try:
            return operation()
        except ServiceError:
            raise
        except PoolTimeoutError as exc:
            logger.warning("timed out trying to %s", action, exc_info=True)
            raise UpstreamError(f"timed out trying to {action}") from exc
        except Exception as exc:
            logger.warning("failed to %s", action, exc_info=True)
            raise UpstreamError(f"failed to {action}") from exc

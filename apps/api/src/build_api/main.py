from typing import Annotated, Any

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from build_api.auth import require_scopes
from build_api.config import configure_logging, get_settings
from build_api.db import get_engine
from build_api.errors import ErrorKind, ServiceError
from build_api.listing import SortDirection
from build_api.repositories import SqlBuildRepository, SqlJobRepository
from build_api.service import BuildListingService

app = FastAPI(title="CI Build API", version="0.1.0")

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UPSTREAM: 502,
}

read_access = Depends(require_scopes("user", "pipeline"))


@app.on_event("startup")
def startup() -> None:
    configure_logging(get_settings().log_level)
    get_engine()


@app.exception_handler(ServiceError)
async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=STATUS_BY_KIND[exc.kind], content=exc.to_payload())


def get_build_listing_service() -> BuildListingService:
    settings = get_settings()
    engine = get_engine()
    return BuildListingService(
        jobs=SqlJobRepository(engine),
        builds=SqlBuildRepository(engine),
        default_sort=SortDirection(settings.builds_default_sort),
        default_count=settings.builds_default_count,
    )


def _query_params(request: Request) -> dict[str, Any]:
    params: dict[str, Any] = {}
    for key, value in request.query_params.multi_items():
        if key not in params:
            params[key] = value
        elif isinstance(params[key], list):
            params[key].append(value)
        else:
            params[key] = [params[key], value]
    return params


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/jobs/{job_id}", dependencies=[read_access])
def get_job(
    job_id: str,
    service: Annotated[BuildListingService, Depends(get_build_listing_service)],
) -> dict[str, Any]:
    return service.get_job(job_id)


@app.get("/jobs/{job_id}/builds", dependencies=[read_access])
def list_job_builds(
    job_id: str,
    request: Request,
    service: Annotated[BuildListingService, Depends(get_build_listing_service)],
) -> list[dict[str, Any]]:
    return service.list_builds(job_id, _query_params(request))


@app.get("/builds/{build_id}", dependencies=[read_access])
def get_build(
    build_id: str,
    service: Annotated[BuildListingService, Depends(get_build_listing_service)],
) -> dict[str, Any]:
    return service.get_build(build_id)


def run() -> None:
    import uvicorn

    uvicorn.run("build_api.main:app", host="0.0.0.0", port=8000, reload=False)


if __name__ == "__main__":
    run()

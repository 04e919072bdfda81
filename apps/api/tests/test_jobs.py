from datetime import datetime, timezone

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from build_api.db import get_engine
from build_api.models import BuildRecord, JobRecord


def test_get_job_returns_job_view(client: TestClient) -> None:
    with Session(get_engine()) as session:
        session.add(
            JobRecord(
                id="J1",
                name="PR-7",
                pipeline_id="p-1",
                state="ENABLED",
                create_time=datetime(2026, 1, 1, tzinfo=timezone.utc),
            )
        )
        session.commit()

    response = client.get("/jobs/J1")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "J1"
    assert body["name"] == "PR-7"
    assert body["pipelineId"] == "p-1"
    assert body["state"] == "ENABLED"
    assert body["createTime"].startswith("2026-01-01T00:00:00")


def test_get_job_returns_404_for_missing_job(client: TestClient) -> None:
    response = client.get("/jobs/missing")

    assert response.status_code == 404
    assert response.json() == {"kind": "not_found", "message": "Job does not exist", "fields": []}


def test_get_build_returns_build_view(client: TestClient) -> None:
    with Session(get_engine()) as session:
        session.add(JobRecord(id="J1", name="main"))
        session.add(
            BuildRecord(
                id=11,
                job_id="J1",
                number=3,
                status="RUNNING",
                sha="abc123",
                cause="Started by GitHub push",
            )
        )
        session.commit()

    response = client.get("/builds/11")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == 11
    assert body["jobId"] == "J1"
    assert body["number"] == 3
    assert body["status"] == "RUNNING"
    assert body["sha"] == "abc123"
    assert body["cause"] == "Started by GitHub push"
    assert body["startTime"] is None


def test_get_build_returns_404_for_missing_build(client: TestClient) -> None:
    response = client.get("/builds/999")

    assert response.status_code == 404
    assert response.json()["message"] == "Build does not exist"


def test_get_build_rejects_non_numeric_id(client: TestClient) -> None:
    response = client.get("/builds/not-a-number")

    assert response.status_code == 400
    assert response.json()["fields"] == [{"field": "id", "message": "must be an integer"}]

from __future__ import annotations

from typing import Any

import httpx

from build_api.config import get_settings


class CIClientError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CIClientNotFoundError(CIClientError):
    pass


class CIApiClient:
    """Thin client for the job/build read endpoints of this API."""

    def __init__(
        self,
        *,
        base_url: str,
        token: str | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout_seconds = timeout_seconds

    def get_job(self, job_id: str) -> dict[str, Any]:
        payload = self._get(f"/jobs/{job_id}")
        if not isinstance(payload, dict):
            raise CIClientError("Invalid job payload: expected an object")
        return payload

    def list_builds(
        self,
        job_id: str,
        *,
        sort: str | None = None,
        sort_by: str | None = None,
        page: int | None = None,
        count: int | None = None,
    ) -> list[dict[str, Any]]:
        params: dict[str, str | int] = {}
        if sort is not None:
            params["sort"] = sort
        if sort_by is not None:
            params["sortBy"] = sort_by
        if page is not None:
            params["page"] = page
        if count is not None:
            params["count"] = count

        payload = self._get(f"/jobs/{job_id}/builds", params=params)
        if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
            raise CIClientError("Invalid builds payload: expected a list of objects")
        return payload

    def get_build(self, build_id: int | str) -> dict[str, Any]:
        payload = self._get(f"/builds/{build_id}")
        if not isinstance(payload, dict):
            raise CIClientError("Invalid build payload: expected an object")
        return payload

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _get(self, path: str, *, params: dict[str, str | int] | None = None) -> Any:
        try:
            response = httpx.get(
                f"{self._base_url}{path}",
                params=params or None,
                headers=self._headers(),
                timeout=self._timeout_seconds,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            error_type = CIClientNotFoundError if status_code == 404 else CIClientError
            raise error_type(
                f"GET {path} failed with status {status_code}",
                status_code=status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise CIClientError(f"GET {path} failed: {exc}") from exc

        try:
            return response.json()
        except ValueError as exc:
            raise CIClientError(f"GET {path} returned invalid JSON") from exc


def get_ci_client(*, token: str | None = None) -> CIApiClient:
    settings = get_settings()
    return CIApiClient(
        base_url=settings.ci_api_base_url,
        token=token,
        timeout_seconds=settings.ci_api_timeout_seconds,
    )

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from build_api.errors import FieldError, ValidationError

SortField = Literal["createTime", "startTime", "endTime", "number", "status", "id"]

DEFAULT_SORT_BY: SortField = "createTime"

MAX_PAGE = 2**31 - 1
MAX_COUNT = 1000


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class BuildListQuery(BaseModel):
    """Recognized query options for ``GET /jobs/{id}/builds``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    sort: SortDirection | None = None
    sort_by: SortField | None = Field(default=None, alias="sortBy")
    page: int | None = Field(default=None, ge=1, le=MAX_PAGE)
    count: int | None = Field(default=None, ge=1, le=MAX_COUNT)


@dataclass(frozen=True)
class Pagination:
    page: int
    count: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.count


@dataclass(frozen=True)
class ListingConfig:
    sort_direction: SortDirection
    sort_by: str = DEFAULT_SORT_BY
    pagination: Pagination | None = None


def parse_build_list_query(params: Mapping[str, Any]) -> BuildListQuery:
    try:
        return BuildListQuery.model_validate(dict(params))
    except pydantic.ValidationError as exc:
        fields = [
            FieldError(
                field=".".join(str(part) for part in error["loc"]) or "query",
                message=error["msg"],
            )
            for error in exc.errors()
        ]
        raise ValidationError("invalid query parameters", fields=fields) from exc


def build_listing_config(
    query: BuildListQuery,
    *,
    default_sort: SortDirection,
    default_count: int,
) -> ListingConfig:
    pagination = None
    if query.page is not None or query.count is not None:
        pagination = Pagination(
            page=query.page if query.page is not None else 1,
            count=query.count if query.count is not None else min(default_count, MAX_COUNT),
        )

    return ListingConfig(
        sort_direction=query.sort or default_sort,
        sort_by=query.sort_by or DEFAULT_SORT_BY,
        pagination=pagination,
    )

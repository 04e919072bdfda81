import pytest

from build_api.errors import ValidationError
from build_api.listing import (
    MAX_COUNT,
    BuildListQuery,
    Pagination,
    SortDirection,
    build_listing_config,
    parse_build_list_query,
)


def test_parse_accepts_recognized_options() -> None:
    query = parse_build_list_query({"sort": "desc", "sortBy": "status", "page": "2", "count": "10"})

    assert query == BuildListQuery(sort=SortDirection.DESC, sortBy="status", page=2, count=10)


def test_parse_rejects_snake_case_sort_by() -> None:
    with pytest.raises(ValidationError) as exc_info:
        parse_build_list_query({"sort_by": "status"})

    assert [item.field for item in exc_info.value.fields] == ["sort_by"]


def test_parse_reports_every_bad_field() -> None:
    with pytest.raises(ValidationError) as exc_info:
        parse_build_list_query({"page": "0", "count": "x", "extra": "1"})

    assert sorted(item.field for item in exc_info.value.fields) == ["count", "extra", "page"]


def test_config_without_pagination_options_has_no_pagination() -> None:
    config = build_listing_config(
        BuildListQuery(),
        default_sort=SortDirection.ASC,
        default_count=50,
    )

    assert config.sort_direction is SortDirection.ASC
    assert config.sort_by == "createTime"
    assert config.pagination is None


def test_config_fills_missing_page_or_count() -> None:
    only_count = build_listing_config(
        parse_build_list_query({"count": "5"}),
        default_sort=SortDirection.ASC,
        default_count=50,
    )
    only_page = build_listing_config(
        parse_build_list_query({"page": "4"}),
        default_sort=SortDirection.ASC,
        default_count=50,
    )

    assert only_count.pagination == Pagination(page=1, count=5)
    assert only_page.pagination == Pagination(page=4, count=50)
    assert only_page.pagination.offset == 150


def test_config_caps_default_count() -> None:
    config = build_listing_config(
        parse_build_list_query({"page": "2"}),
        default_sort=SortDirection.ASC,
        default_count=10**9,
    )

    assert config.pagination == Pagination(page=2, count=MAX_COUNT)

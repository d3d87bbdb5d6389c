"""Tests for DataUtils sort/filter/stats helpers"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from recordhub.data.utils import DataUtils
from recordhub.models import DataRecord, DateRange, FilterConfig, SortConfig

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_record(idx, title, category="Finance", status="active", value=1.0, description="desc", days=0):
    created = BASE + timedelta(days=days)
    return DataRecord(
        id=str(idx),
        user_id="u1",
        title=title,
        description=description,
        category=category,
        value=value,
        status=status,
        created_at=created,
        updated_at=created,
    )


@pytest.fixture
def records():
    return [
        make_record(1, "Revenue", "Finance", "active", 300, "Quarterly revenue", days=0),
        make_record(2, "Budget", "Finance", "inactive", 100, "Yearly budget", days=1),
        make_record(3, "Campaign", "Marketing", "active", 200, "Spring launch", days=2),
        make_record(4, "Survey", "Marketing", "inactive", 50, "Customer feedback", days=3),
        make_record(5, "Training", "HR", "active", 75, "Onboarding sessions", days=4),
    ]


def test_sort_ascending_and_descending_are_reverses(records):
    asc = DataUtils.sort_records(records, SortConfig(key="value", direction="asc"))
    desc = DataUtils.sort_records(records, SortConfig(key="value", direction="desc"))
    assert [r.value for r in asc] == [50, 75, 100, 200, 300]
    assert [r.id for r in desc] == [r.id for r in reversed(asc)]


def test_sort_is_stable_for_ties(records):
    by_category = DataUtils.sort_records(records, SortConfig(key="category"))
    assert [r.id for r in by_category] == ["1", "2", "5", "3", "4"]
    by_category_desc = DataUtils.sort_records(records, SortConfig(key="category", direction="desc"))
    assert [r.id for r in by_category_desc] == ["3", "4", "5", "1", "2"]


def test_sort_does_not_mutate_input(records):
    original = [r.id for r in records]
    DataUtils.sort_records(records, SortConfig(key="title"))
    assert [r.id for r in records] == original


def test_sort_rejects_unknown_field():
    with pytest.raises(PydanticValidationError):
        SortConfig(key="colour")


def test_filter_is_conjunctive(records):
    result = DataUtils.filter_records(records, FilterConfig(category="Finance", status="active"))
    assert [r.id for r in result] == ["1"]


def test_empty_filter_returns_everything(records):
    assert DataUtils.filter_records(records, FilterConfig()) == records
    assert DataUtils.filter_records(records, FilterConfig(search="")) == records


def test_search_is_case_insensitive_over_title_description_category(records):
    assert [r.id for r in DataUtils.filter_records(records, FilterConfig(search="REVENUE"))] == ["1"]
    assert [r.id for r in DataUtils.filter_records(records, FilterConfig(search="feedback"))] == ["4"]
    assert [r.id for r in DataUtils.filter_records(records, FilterConfig(search="marketing"))] == ["3", "4"]


def test_date_range_is_inclusive(records):
    window = DateRange(start=BASE + timedelta(days=1), end=BASE + timedelta(days=3))
    result = DataUtils.filter_records(records, FilterConfig(date_range=window))
    assert [r.id for r in result] == ["2", "3", "4"]


def test_date_range_accepts_naive_datetimes(records):
    window = DateRange(start=datetime(2024, 1, 4), end=datetime(2024, 1, 10))
    result = DataUtils.filter_records(records, FilterConfig(date_range=window))
    assert [r.id for r in result] == ["4", "5"]


def test_unique_categories_sorted(records):
    assert DataUtils.get_unique_categories(records) == ["Finance", "HR", "Marketing"]
    assert DataUtils.get_unique_categories([]) == []


def test_record_stats_scenario(hub):
    hub.records.add_record("u1", {"title": "A", "description": "first", "category": "Ops", "value": 10, "status": "active"})
    hub.records.add_record("u1", {"title": "B", "description": "second", "category": "Ops", "value": 20, "status": "inactive"})
    stats = DataUtils.get_record_stats(hub.records.get_records_by_user_id("u1"))
    assert stats.total == 2
    assert stats.active == 1
    assert stats.inactive == 1
    assert stats.total_value == 30
    assert stats.avg_value == 15


def test_record_stats_empty():
    stats = DataUtils.get_record_stats([])
    assert (stats.total, stats.total_value, stats.avg_value) == (0, 0, 0)

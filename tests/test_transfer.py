"""Tests for spreadsheet export/import and sample data"""

from datetime import datetime, timedelta, timezone

from recordhub.data.transfer import (
    EXPORT_HEADERS,
    SAMPLE_RECORDS,
    generate_sample_data,
    import_records,
    prepare_export_data,
    select_for_export,
    validate_import_data,
)
from recordhub.models import DateRange, ExportOptions
from conftest import record_data


def test_prepare_export_data(hub):
    record = hub.records.add_record("u1", record_data(title="Report", value=12.5))
    rows = prepare_export_data([record])
    assert rows[0] == EXPORT_HEADERS
    assert rows[1][:6] == [record.id, "Report", "Quarterly numbers", "Finance", 12.5, "active"]
    assert rows[1][6] == record.created_at.isoformat()


def test_validate_import_data_reports_bad_rows():
    rows = [
        ["", "Title A", "Desc A", "Finance", "100", "active"],
        ["", "", "Desc B", "Finance", "100", "active"],
        ["", "Title C", "Desc C", "Finance", "lots", "active"],
        ["", "Title D", "Desc D", "Finance", 5, "archived"],
        ["too", "short"],
    ]
    valid, errors = validate_import_data(rows)
    assert [f.title for f in valid] == ["Title A"]
    assert valid[0].value == 100.0
    assert errors == [
        "Row 2: Invalid data format",
        "Row 3: Invalid data format",
        "Row 4: Invalid data format",
        "Row 5: Invalid data format",
    ]


def test_import_value_takes_leading_number_and_rejects_infinity():
    rows = [
        ["", "Title A", "Desc A", "Finance", "12abc", "active"],
        ["", "Title B", "Desc B", "Finance", " 3.5e1 units", "active"],
        ["", "Title C", "Desc C", "Finance", "inf", "active"],
        ["", "Title D", "Desc D", "Finance", "1e999", "active"],
        ["", "Title E", "Desc E", "Finance", float("nan"), "active"],
        ["", "Title F", "Desc F", "Finance", True, "active"],
    ]
    valid, errors = validate_import_data(rows)
    assert [(f.title, f.value) for f in valid] == [("Title A", 12.0), ("Title B", 35.0)]
    assert errors == [f"Row {n}: Invalid data format" for n in (3, 4, 5, 6)]


def test_import_skips_header_and_duplicates(hub):
    hub.records.add_record("u1", record_data(title="Existing", value=1))
    rows = [
        list(EXPORT_HEADERS),
        ["x", "Existing", "Quarterly numbers", "Finance", "1", "active"],
        ["x", "New one", "Fresh row", "Sales", "42", "inactive"],
        ["x", "New one", "Fresh row", "Sales", "42", "inactive"],
        ["x", "", "broken", "Sales", "1", "active"],
    ]
    result = import_records(hub.records, "u1", rows)
    assert result.imported == 1
    assert result.duplicates == 2
    assert result.errors == ["Row 4: Invalid data format"]
    assert result.success is False
    assert sorted(r.title for r in hub.records.get_records_by_user_id("u1")) == ["Existing", "New one"]


def test_export_then_import_into_other_user(hub):
    generate_sample_data(hub.records, "u1")
    rows = prepare_export_data(hub.records.get_records_by_user_id("u1"))
    result = import_records(hub.records, "u2", rows)
    assert result.success is True
    assert result.imported == len(SAMPLE_RECORDS)
    assert hub.records.get_user_record_count("u2") == len(SAMPLE_RECORDS)


def test_generate_sample_data(hub):
    created = generate_sample_data(hub.records, "u1")
    assert len(created) == 5
    assert {r.category for r in created} == {"Finance", "Marketing", "HR", "Technology"}
    assert all(r.user_id == "u1" for r in created)


def test_select_for_export_options(hub):
    created = generate_sample_data(hub.records, "u1")
    active_only = select_for_export(created, ExportOptions(include_inactive=False))
    assert all(r.status == "active" for r in active_only)
    assert len(active_only) == 4

    marketing = select_for_export(created, ExportOptions(categories=["Marketing"]))
    assert [r.title for r in marketing] == ["Customer Satisfaction Survey", "Product Launch Campaign"]

    now = datetime.now(timezone.utc)
    future = DateRange(start=now + timedelta(days=1), end=now + timedelta(days=2))
    assert select_for_export(created, ExportOptions(date_range=future)) == []

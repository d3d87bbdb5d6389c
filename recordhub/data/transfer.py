"""
Spreadsheet-shaped export/import and demo data.

Rows are plain lists laid out as the export header describes; turning
them into an actual workbook file is left to the client.
"""

import re
from typing import Any, List, Sequence, Tuple

from pydantic import ValidationError as PydanticValidationError

from ..models import DataForm, DataRecord, ExportOptions, FilterConfig, ImportResult
from ..utils.logger import get_logger
from .manager import DataManager
from .utils import DataUtils

logger = get_logger(__name__)

EXPORT_HEADERS = [
    "ID",
    "Title",
    "Description",
    "Category",
    "Value",
    "Status",
    "Created At",
    "Updated At",
]

SAMPLE_RECORDS = [
    {
        "title": "Monthly Revenue Report",
        "description": "Revenue analysis for Q4 2024",
        "category": "Finance",
        "value": 15000,
        "status": "active",
    },
    {
        "title": "Customer Satisfaction Survey",
        "description": "Survey results from customer feedback",
        "category": "Marketing",
        "value": 4.5,
        "status": "active",
    },
    {
        "title": "Product Launch Campaign",
        "description": "Campaign metrics and performance",
        "category": "Marketing",
        "value": 8750,
        "status": "active",
    },
    {
        "title": "Staff Training Session",
        "description": "Employee development program results",
        "category": "HR",
        "value": 2500,
        "status": "inactive",
    },
    {
        "title": "Website Analytics",
        "description": "Monthly website traffic and conversion",
        "category": "Technology",
        "value": 12300,
        "status": "active",
    },
]


def generate_sample_data(manager: DataManager, user_id: str) -> List[DataRecord]:
    return [manager.add_record(user_id, data) for data in SAMPLE_RECORDS]


def select_for_export(records: List[DataRecord], options: ExportOptions) -> List[DataRecord]:
    selected = records
    if not options.include_inactive:
        selected = [r for r in selected if r.status == "active"]
    if options.date_range:
        selected = DataUtils.filter_records(selected, FilterConfig(date_range=options.date_range))
    if options.categories:
        wanted = set(options.categories)
        selected = [r for r in selected if r.category in wanted]
    return selected


def prepare_export_data(records: List[DataRecord]) -> List[List[Any]]:
    rows: List[List[Any]] = [list(EXPORT_HEADERS)]
    for record in records:
        rows.append([
            record.id,
            record.title,
            record.description,
            record.category,
            record.value,
            record.status,
            record.created_at.isoformat(),
            record.updated_at.isoformat(),
        ])
    return rows


# Leading decimal number of a cell, trailing text ignored ("12abc" -> 12)
_NUMBER_PREFIX = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _parse_value(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("boolean is not a number")
    if isinstance(value, (int, float)):
        return float(value)
    match = _NUMBER_PREFIX.match(str(value))
    if match is None:
        raise ValueError(f"not a number: {value!r}")
    return float(match.group())


def validate_import_data(rows: Sequence[Sequence[Any]]) -> Tuple[List[DataForm], List[str]]:
    """Parse export-shaped rows; columns 1..5 hold the editable fields"""
    valid: List[DataForm] = []
    errors: List[str] = []
    for index, row in enumerate(rows):
        try:
            _, title, description, category, value, status = list(row)[:6]
            valid.append(
                DataForm(
                    title=title,
                    description=description,
                    category=category,
                    value=_parse_value(value),
                    status=status,
                )
            )
        except (ValueError, TypeError, PydanticValidationError):
            errors.append(f"Row {index + 1}: Invalid data format")
    return valid, errors


def _is_header(row: Sequence[Any]) -> bool:
    return len(row) > 1 and str(row[1]).strip().lower() == "title"


def _fingerprint(form: DataForm) -> Tuple[Any, ...]:
    return (form.title, form.description, form.category, float(form.value), form.status)


def import_records(manager: DataManager, user_id: str, rows: Sequence[Sequence[Any]]) -> ImportResult:
    """
    Validate rows and add them for user_id.

    A leading header row is skipped. Rows identical to one of the user's
    existing records (or to an earlier row) count as duplicates.
    """
    rows = list(rows)
    if rows and _is_header(rows[0]):
        rows = rows[1:]

    valid, errors = validate_import_data(rows)

    seen = {_fingerprint(r) for r in manager.get_records_by_user_id(user_id)}
    imported = 0
    duplicates = 0
    for form in valid:
        key = _fingerprint(form)
        if key in seen:
            duplicates += 1
            continue
        manager.add_record(user_id, form)
        seen.add(key)
        imported += 1

    logger.info(
        "Records imported",
        user_id=user_id,
        imported=imported,
        duplicates=duplicates,
        errors=len(errors),
    )
    return ImportResult(
        success=not errors,
        imported=imported,
        errors=errors,
        duplicates=duplicates,
    )

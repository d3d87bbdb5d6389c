"""
FastAPI routes for data records, export and import.

Prefix: /api

Regular users only see and change their own records; admins can pass
all=true to list everyone's and may edit any record.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError as PydanticValidationError

from recordhub.app import RecordHubApp
from recordhub.auth.service import has_admin_access, has_user_access
from recordhub.data.transfer import (
    generate_sample_data,
    import_records,
    prepare_export_data,
    select_for_export,
)
from recordhub.data.utils import DataUtils
from recordhub.models import (
    AuthUser,
    DataRecord,
    DateRange,
    ExportOptions,
    FilterConfig,
    ImportResult,
    RecordStats,
    SortConfig,
    validation_messages,
)
from recordhub.utils.exceptions import RecordHubError
from .auth_deps import get_current_user, get_hub, to_http_exception
from .models import ExportResponse, ImportRequest, RecordRequest

router = APIRouter(prefix="/api", tags=["records"])


def _visible_records(hub: RecordHubApp, user: AuthUser, include_all: bool) -> List[DataRecord]:
    if include_all and has_admin_access(user):
        return hub.records.get_records()
    return hub.records.get_records_by_user_id(user.id)


def _date_range(start: Optional[datetime], end: Optional[datetime]) -> Optional[DateRange]:
    if start is None and end is None:
        return None
    return DateRange(start=start or datetime.min, end=end or datetime.max)


def _owned_record(hub: RecordHubApp, user: AuthUser, record_id: str) -> DataRecord:
    record = hub.records.get_record_by_id(record_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Record not found")
    if not has_user_access(user, record.user_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your record")
    return record


@router.get("/records", response_model=List[DataRecord])
async def list_records(
    category: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    sort_key: Optional[str] = None,
    sort_dir: str = "asc",
    include_all: bool = Query(False, alias="all"),
    current_user: AuthUser = Depends(get_current_user),
    hub: RecordHubApp = Depends(get_hub),
) -> List[DataRecord]:
    """List records with optional filters (AND-ed) and sorting"""
    try:
        filters = FilterConfig(
            category=category,
            status=status_filter or None,
            date_range=_date_range(start, end),
            search=search,
        )
        sort = SortConfig(key=sort_key, direction=sort_dir) if sort_key else None
    except PydanticValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=validation_messages(e))

    records = DataUtils.filter_records(_visible_records(hub, current_user, include_all), filters)
    if sort:
        records = DataUtils.sort_records(records, sort)
    return records


@router.post("/records", response_model=DataRecord, status_code=status.HTTP_201_CREATED)
async def create_record(
    body: RecordRequest,
    current_user: AuthUser = Depends(get_current_user),
    hub: RecordHubApp = Depends(get_hub),
) -> DataRecord:
    try:
        return hub.records.add_record(current_user.id, body.model_dump(exclude_none=True))
    except RecordHubError as e:
        raise to_http_exception(e)


@router.get("/records/stats", response_model=RecordStats)
async def record_stats(
    include_all: bool = Query(False, alias="all"),
    current_user: AuthUser = Depends(get_current_user),
    hub: RecordHubApp = Depends(get_hub),
) -> RecordStats:
    return DataUtils.get_record_stats(_visible_records(hub, current_user, include_all))


@router.get("/records/categories", response_model=List[str])
async def record_categories(
    include_all: bool = Query(False, alias="all"),
    current_user: AuthUser = Depends(get_current_user),
    hub: RecordHubApp = Depends(get_hub),
) -> List[str]:
    return DataUtils.get_unique_categories(_visible_records(hub, current_user, include_all))


@router.post("/records/sample", response_model=List[DataRecord], status_code=status.HTTP_201_CREATED)
async def create_sample_records(
    current_user: AuthUser = Depends(get_current_user),
    hub: RecordHubApp = Depends(get_hub),
) -> List[DataRecord]:
    return generate_sample_data(hub.records, current_user.id)


@router.get("/records/{record_id}", response_model=DataRecord)
async def get_record(
    record_id: str,
    current_user: AuthUser = Depends(get_current_user),
    hub: RecordHubApp = Depends(get_hub),
) -> DataRecord:
    return _owned_record(hub, current_user, record_id)


@router.put("/records/{record_id}", response_model=DataRecord)
async def update_record(
    record_id: str,
    body: RecordRequest,
    current_user: AuthUser = Depends(get_current_user),
    hub: RecordHubApp = Depends(get_hub),
) -> DataRecord:
    _owned_record(hub, current_user, record_id)
    try:
        updated = hub.records.update_record(record_id, body.model_dump(exclude_unset=True))
    except RecordHubError as e:
        raise to_http_exception(e)
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Record not found")
    return hub.records.get_record_by_id(record_id)


@router.delete("/records/{record_id}")
async def delete_record(
    record_id: str,
    current_user: AuthUser = Depends(get_current_user),
    hub: RecordHubApp = Depends(get_hub),
) -> Dict[str, Any]:
    _owned_record(hub, current_user, record_id)
    if not hub.records.delete_record(record_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Record not found")
    return {"status": "success", "id": record_id}


@router.get("/export", response_model=ExportResponse)
async def export_records(
    include_inactive: bool = True,
    categories: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    include_all: bool = Query(False, alias="all"),
    current_user: AuthUser = Depends(get_current_user),
    hub: RecordHubApp = Depends(get_hub),
) -> ExportResponse:
    """Spreadsheet rows (header first) for the caller's records"""
    options = ExportOptions(
        include_inactive=include_inactive,
        date_range=_date_range(start, end),
        categories=[c.strip() for c in categories.split(",") if c.strip()] if categories else None,
    )
    records = select_for_export(_visible_records(hub, current_user, include_all), options)
    return ExportResponse(rows=prepare_export_data(records))


@router.post("/import", response_model=ImportResult)
async def import_rows(
    body: ImportRequest,
    current_user: AuthUser = Depends(get_current_user),
    hub: RecordHubApp = Depends(get_hub),
) -> ImportResult:
    return import_records(hub.records, current_user.id, body.rows)

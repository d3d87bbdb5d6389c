"""
Admin dashboard routes: statistics, user management with cascading
deletes, and moderation of any record.

Prefix: /api/admin
"""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, status

from recordhub.app import RecordHubApp
from recordhub.models import AdminStats, AuthUser, DataRecord
from recordhub.utils.exceptions import RecordHubError
from recordhub.utils.logger import get_logger
from .auth_deps import get_hub, require_admin, to_http_exception
from .models import UserUpdateRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/stats", response_model=AdminStats)
async def admin_stats(
    admin: AuthUser = Depends(require_admin),
    hub: RecordHubApp = Depends(get_hub),
) -> AdminStats:
    return hub.admin.get_admin_stats()


@router.get("/users")
async def list_users(
    admin: AuthUser = Depends(require_admin),
    hub: RecordHubApp = Depends(get_hub),
) -> List[Dict[str, Any]]:
    """All users with how many records each owns"""
    return hub.admin.list_users_with_counts()


@router.get("/records", response_model=List[DataRecord])
async def list_all_records(
    admin: AuthUser = Depends(require_admin),
    hub: RecordHubApp = Depends(get_hub),
) -> List[DataRecord]:
    return hub.records.get_records()


@router.patch("/users/{user_id}")
async def update_user(
    user_id: str,
    body: UserUpdateRequest,
    admin: AuthUser = Depends(require_admin),
    hub: RecordHubApp = Depends(get_hub),
) -> Dict[str, Any]:
    updates = body.model_dump(exclude_none=True)
    try:
        if updates and not hub.admin.update_user(user_id, updates):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    except RecordHubError as e:
        raise to_http_exception(e)

    user = hub.users.find_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    logger.info("Admin updated user", admin_id=admin.id, user_id=user_id)
    return user.model_dump(mode="json")


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    admin: AuthUser = Depends(require_admin),
    hub: RecordHubApp = Depends(get_hub),
) -> Dict[str, Any]:
    """Delete a user along with all of their records"""
    try:
        removed = hub.admin.delete_user(user_id)
    except RecordHubError as e:
        raise to_http_exception(e)
    logger.info("Admin deleted user", admin_id=admin.id, user_id=user_id)
    return {"status": "success", "id": user_id, "records_removed": removed}


@router.delete("/records/{record_id}")
async def delete_record(
    record_id: str,
    admin: AuthUser = Depends(require_admin),
    hub: RecordHubApp = Depends(get_hub),
) -> Dict[str, Any]:
    if not hub.records.delete_record(record_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Record not found")
    return {"status": "success", "id": record_id}

"""
Data record storage.

Records are scoped by the owning user id; the link is not enforced, so a
record can outlive its owner unless the admin cascade removes it.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..models import DataForm, DataRecord, next_timestamp_id, touch, utcnow, validation_messages
from ..store import RECORDS_KEY, KeyValueStore
from ..utils.exceptions import StorageError, ValidationError
from ..utils.logger import get_logger

logger = get_logger(__name__)

_EDITABLE_FIELDS = set(DataForm.model_fields)


def _invalid(exc: PydanticValidationError) -> ValidationError:
    messages = validation_messages(exc)
    return ValidationError(messages[0], messages)


class DataManager:
    """CRUD over the data-records collection"""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def get_records(self) -> List[DataRecord]:
        raw = self.store.get(RECORDS_KEY) or []
        try:
            return [DataRecord(**item) for item in raw]
        except (PydanticValidationError, TypeError) as e:
            raise StorageError(f"Failed to load records: {str(e)}")

    def _write(self, records: List[DataRecord]) -> None:
        self.store.set(RECORDS_KEY, [r.model_dump(mode="json") for r in records])

    def add_record(self, user_id: str, data: Union[DataForm, Dict[str, Any]]) -> DataRecord:
        if isinstance(data, DataForm):
            form = data
        else:
            try:
                form = DataForm(**data)
            except PydanticValidationError as e:
                raise _invalid(e)

        with self.store.lock(RECORDS_KEY):
            records = self.get_records()
            now = utcnow()
            record = DataRecord(
                id=next_timestamp_id(r.id for r in records),
                user_id=user_id,
                created_at=now,
                updated_at=now,
                **form.model_dump(),
            )
            records.append(record)
            self._write(records)

        logger.info("Record added", record_id=record.id, user_id=user_id)
        return record

    def update_record(self, record_id: str, updates: Dict[str, Any]) -> bool:
        """Merge editable fields and refresh updated_at; False if missing"""
        with self.store.lock(RECORDS_KEY):
            records = self.get_records()
            for i, record in enumerate(records):
                if record.id != record_id:
                    continue
                merged = record.model_dump()
                merged.update({k: v for k, v in updates.items() if k in _EDITABLE_FIELDS})
                merged["updated_at"] = touch(record.updated_at)
                try:
                    records[i] = DataRecord(**merged)
                except PydanticValidationError as e:
                    raise _invalid(e)
                self._write(records)
                logger.info("Record updated", record_id=record_id, fields=sorted(updates))
                return True
        return False

    def delete_record(self, record_id: str) -> bool:
        with self.store.lock(RECORDS_KEY):
            records = self.get_records()
            remaining = [r for r in records if r.id != record_id]
            if len(remaining) == len(records):
                return False
            self._write(remaining)
        logger.info("Record deleted", record_id=record_id)
        return True

    def delete_records_by_user_id(self, user_id: str) -> int:
        """Drop every record owned by user_id; returns how many went"""
        with self.store.lock(RECORDS_KEY):
            records = self.get_records()
            remaining = [r for r in records if r.user_id != user_id]
            removed = len(records) - len(remaining)
            if removed:
                self._write(remaining)
        return removed

    def get_records_by_user_id(self, user_id: str) -> List[DataRecord]:
        return [r for r in self.get_records() if r.user_id == user_id]

    def get_record_by_id(self, record_id: str) -> Optional[DataRecord]:
        return next((r for r in self.get_records() if r.id == record_id), None)

    def get_user_record_count(self, user_id: str) -> int:
        return len(self.get_records_by_user_id(user_id))

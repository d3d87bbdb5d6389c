"""Pure helpers over an in-memory list of records: sort, filter, stats."""

from functools import cmp_to_key
from typing import Any, List

from ..models import DataRecord, FilterConfig, RecordStats, SortConfig, as_utc


def _natural_compare(a: Any, b: Any) -> int:
    # Values that cannot be ordered (None, mixed types) compare equal
    try:
        if a < b:
            return -1
        if a > b:
            return 1
    except TypeError:
        pass
    return 0


class DataUtils:

    @staticmethod
    def sort_records(records: List[DataRecord], config: SortConfig) -> List[DataRecord]:
        """Stable sort on one field; ties keep their input order in both directions"""
        sign = -1 if config.direction == "desc" else 1

        def compare(x: DataRecord, y: DataRecord) -> int:
            return sign * _natural_compare(getattr(x, config.key), getattr(y, config.key))

        return sorted(records, key=cmp_to_key(compare))

    @staticmethod
    def filter_records(records: List[DataRecord], config: FilterConfig) -> List[DataRecord]:
        """AND of every filter that is set; empty filters match everything"""
        search = config.search.lower() if config.search else None

        def matches(record: DataRecord) -> bool:
            if config.category and record.category != config.category:
                return False
            if config.status and record.status != config.status:
                return False
            if config.date_range:
                created = as_utc(record.created_at)
                if created < config.date_range.start or created > config.date_range.end:
                    return False
            if search:
                text = f"{record.title} {record.description} {record.category}".lower()
                if search not in text:
                    return False
            return True

        return [r for r in records if matches(r)]

    @staticmethod
    def get_unique_categories(records: List[DataRecord]) -> List[str]:
        return sorted({r.category for r in records})

    @staticmethod
    def get_record_stats(records: List[DataRecord]) -> RecordStats:
        total = len(records)
        total_value = sum(r.value for r in records)
        return RecordStats(
            total=total,
            active=sum(1 for r in records if r.status == "active"),
            inactive=sum(1 for r in records if r.status == "inactive"),
            total_value=total_value,
            avg_value=total_value / total if total > 0 else 0,
        )

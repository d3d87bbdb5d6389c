"""Business data records: storage, query helpers and spreadsheet transfer."""

from .manager import DataManager
from .transfer import (
    generate_sample_data,
    import_records,
    prepare_export_data,
    select_for_export,
    validate_import_data,
)
from .utils import DataUtils

__all__ = [
    "DataManager",
    "DataUtils",
    "generate_sample_data",
    "import_records",
    "prepare_export_data",
    "select_for_export",
    "validate_import_data",
]

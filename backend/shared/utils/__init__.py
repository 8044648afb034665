"""
Utilities module: Exceptions, helpers.
"""

from shared.utils.exceptions import (
    AppException,
    NotFoundError,
    ValidationError,
    ConflictError,
    StoreError,
    UnsupportedReportTypeError,
)
from shared.utils.helpers import (
    round2,
    utc_now,
    utc_now_iso,
    parse_timestamp,
    generate_id,
    sort_records,
)

__all__ = [
    # exceptions
    "AppException",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "StoreError",
    "UnsupportedReportTypeError",
    # helpers
    "round2",
    "utc_now",
    "utc_now_iso",
    "parse_timestamp",
    "generate_id",
    "sort_records",
]

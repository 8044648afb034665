"""
Small helpers shared by the services: money rounding, timestamps,
sequential ids and in-memory sorting of records.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Mapping, Sequence


_TWO_PLACES = Decimal("0.01")


def round2(value: float | int | str | Decimal | None) -> float:
    """
    Round a money/percentage value to 2 decimals, half-up.

    Binary floats are rounded through their shortest repr so that
    ``round2(1.005) == 1.01`` like a human would expect.
    """
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


# =============================================================================
# Timestamps
# =============================================================================


def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current time as an ISO-8601 string, the persisted timestamp format."""
    return utc_now().isoformat()


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """
    Parse a persisted timestamp or date.

    Accepts ISO-8601 strings (with or without a trailing ``Z``) and plain
    ``YYYY-MM-DD`` dates. Naive values are taken as UTC. Returns None for
    empty or unparseable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip())
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# =============================================================================
# Ids
# =============================================================================


def generate_id(prefix: str, existing_ids: Iterable[str]) -> str:
    """
    Return ``<prefix><n>`` for the smallest integer n >= 1 not yet used.

    Ids that do not follow the ``<prefix><digits>`` format are ignored.

    Example:
        generate_id("cat_", ["cat_1", "cat_3"])  # -> "cat_2"
    """
    pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")
    used = set()
    for existing in existing_ids:
        match = pattern.match(str(existing))
        if match:
            used.add(int(match.group(1)))

    n = 1
    while n in used:
        n += 1
    return f"{prefix}{n}"


# =============================================================================
# Sorting
# =============================================================================


def _sort_key(value: Any) -> tuple:
    # None sorts last in ascending order; strings compare case-insensitively
    if value is None:
        return (2, "")
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float)):
        return (0, value)
    return (1, str(value).lower())


def sort_records(
    records: Sequence[Mapping[str, Any]] | Sequence[Any],
    sort_by: str,
    sort_order: str = "asc",
) -> list:
    """
    Sort dicts or pydantic models by one field.

    Strings compare case-insensitively. Records missing the field go last
    when ascending. The sort is stable.
    """

    def key(record: Any) -> tuple:
        if isinstance(record, Mapping):
            value = record.get(sort_by)
        else:
            value = getattr(record, sort_by, None)
        return _sort_key(value)

    return sorted(records, key=key, reverse=sort_order.lower() == "desc")

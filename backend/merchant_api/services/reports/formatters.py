"""
Report serialization: pretty JSON and CSV.

CSV output quotes every field and uses "\\n" line endings.

- Inventory rows become a fixed 10-column table (INVENTORY_CSV_HEADERS).
- Any other report is flattened into one header row and one value row,
  nested objects joined with dots (``summary.total_orders``). Lists are
  written as JSON text into a single cell, so tabular detail inside a
  report does not survive the CSV form.
"""

from __future__ import annotations

import csv
import io
import json
from typing import Any, Iterable, Mapping

from shared.config.constants import INVENTORY_CSV_HEADERS, ReportType

# Row keys in the same order as INVENTORY_CSV_HEADERS
INVENTORY_CSV_FIELDS = [
    "dish_id",
    "dish_name",
    "current_stock",
    "alert_threshold",
    "stock_status",
    "supplier",
    "cost",
    "total_value",
    "expiry_date",
    "last_updated",
]


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def _write_rows(rows: Iterable[Iterable[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for row in rows:
        writer.writerow([_cell(value) for value in row])
    return buffer.getvalue()


def _inventory_cell(row: Mapping[str, Any], field: str) -> Any:
    value = row.get(field)
    if field == "total_value" and isinstance(value, (int, float)):
        return f"{value:.2f}"
    return value


def inventory_csv(rows: Iterable[Mapping[str, Any]]) -> str:
    """Header row plus one row per inventory item. Total value keeps two decimals."""
    return _write_rows([
        INVENTORY_CSV_HEADERS,
        *([_inventory_cell(row, field) for field in INVENTORY_CSV_FIELDS] for row in rows),
    ])


def flatten(obj: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested dicts into dotted keys. Lists and scalars are leaves."""
    flat: dict[str, Any] = {}
    for key, value in obj.items():
        if isinstance(value, Mapping):
            flat.update(flatten(value, f"{prefix}{key}."))
        else:
            flat[f"{prefix}{key}"] = value
    return flat


def object_csv(obj: Mapping[str, Any]) -> str:
    flat = flatten(obj)
    return _write_rows([list(flat.keys()), list(flat.values())])


def to_csv(data: Any, report_type: str) -> str:
    if report_type == ReportType.INVENTORY and isinstance(data, list):
        return inventory_csv(data)
    if isinstance(data, list):
        return object_csv({str(index): item for index, item in enumerate(data)})
    return object_csv(data)

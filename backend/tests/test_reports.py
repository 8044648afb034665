"""
Tests for report generation and export.

Tests cover:
- CSV formatting (inventory table and flattened objects)
- Report structures per type
- Artifacts written under the reports directory
- Artifact lookup for downloads
"""

import csv
import io
import json
from datetime import datetime, timezone

import pytest

from merchant_api.services.reports import ReportService
from merchant_api.services.reports import formatters
from shared.utils.exceptions import NotFoundError, UnsupportedReportTypeError, ValidationError

NOW = datetime(2024, 5, 20, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def report_service(store, tmp_path):
    return ReportService(store, reports_dir=tmp_path / "reports")


def _parse_csv(content):
    return list(csv.reader(io.StringIO(content)))


class TestFormatters:
    """Tests for flatten() and the CSV writers"""

    def test_flatten_nested_dicts(self):
        flat = formatters.flatten({"summary": {"total": 3, "inner": {"a": 1}}, "items": [1, 2]})
        assert flat == {"summary.total": 3, "summary.inner.a": 1, "items": [1, 2]}

    def test_object_csv_quotes_every_field(self):
        content = formatters.object_csv({"a": 1, "b": {"c": None, "d": True}})
        assert content == '"a","b.c","b.d"\n"1","","true"\n'

    def test_lists_become_json_cells(self):
        rows = _parse_csv(formatters.object_csv({"top": [{"dish_id": "dish_1"}]}))
        assert json.loads(rows[1][0]) == [{"dish_id": "dish_1"}]

    def test_inventory_csv_header_only(self):
        rows = _parse_csv(formatters.inventory_csv([]))
        assert len(rows) == 1
        assert len(rows[0]) == 10
        assert rows[0][0] == "Dish ID"

    def test_inventory_total_value_has_two_decimals(self):
        rows = _parse_csv(formatters.inventory_csv([
            {"dish_id": "dish_1", "cost": 2.5, "total_value": 58.0},
            {"dish_id": "dish_2", "cost": 0.1, "total_value": 0.3},
        ]))

        assert [row[6] for row in rows[1:]] == ["2.5", "0.1"]
        assert [row[7] for row in rows[1:]] == ["58.00", "0.30"]

    def test_embedded_quotes_are_escaped(self):
        content = formatters.object_csv({"name": 'The "Big" One'})
        assert content.splitlines()[1] == '"The ""Big"" One"'


class TestReportGeneration:
    """Tests for generate_report()"""

    def test_sales_report(self, report_service, seeded_store):
        report = report_service.generate_report("sales", {"period": "week"}, now=NOW)

        assert report["summary"]["report_type"] == "Sales Report"
        assert report["summary"]["period"] == "week"
        assert report["summary"]["total_orders"] == 50
        assert report["summary"]["generated_at"] == NOW.isoformat()
        assert report["trends"] == {"revenue_growth": 25.0, "order_growth": 25.0}
        assert report["category_breakdown"][0]["category_name"] == "Mains"

    def test_report_type_is_case_insensitive(self, report_service, seeded_store):
        report = report_service.generate_report("SALES", now=NOW)
        assert report["summary"]["period"] == "current"

    def test_inventory_report_rows(self, report_service, seeded_store):
        rows = report_service.generate_report("inventory", now=NOW)

        assert [row["dish_id"] for row in rows] == ["dish_4", "dish_3", "dish_2", "dish_1"]
        row = rows[3]
        assert row["dish_name"] == "Empanada"
        assert row["stock_status"] == "Normal"
        assert row["total_value"] == 30.0
        assert rows[2]["stock_status"] == "Low Stock"

    def test_reviews_report(self, report_service, seeded_store):
        report = report_service.generate_report("reviews", now=NOW)

        assert report["summary"]["satisfaction_rate"] == 80.0
        assert report["insights"]["top_rated_dish"]["dish_id"] == "dish_2"
        assert report["trends"][-1]["month"] == "2024-04"

    def test_promotions_report(self, report_service, seeded_store):
        report = report_service.generate_report("promotions", now=NOW)

        assert report["summary"]["active_promotions"] == 1
        assert report["summary"]["completed_promotions"] == 1
        assert report["insights"]["effectiveness_score"] == 85.0

    def test_unsupported_type(self, report_service, seeded_store):
        with pytest.raises(UnsupportedReportTypeError) as exc:
            report_service.generate_report("payroll")

        assert isinstance(exc.value, ValidationError)
        assert exc.value.status_code == 400


class TestReportExport:
    """Tests for export_report() and resolve_artifact()"""

    def test_json_export_carries_data(self, report_service, seeded_store, tmp_path):
        result = report_service.export_report("sales", "json", now=NOW)

        assert result.success is True
        assert result.record_count == 1
        assert result.filename == "sales_report_2024-05-20.json"
        written = json.loads((tmp_path / "reports" / result.filename).read_text(encoding="utf-8"))
        assert written == result.data

    def test_csv_inventory_export(self, report_service, seeded_store):
        result = report_service.export_report("inventory", "csv", now=NOW)

        assert result.data is None
        assert result.record_count == 4
        rows = _parse_csv(report_service.resolve_artifact(result.filename).read_text(encoding="utf-8"))
        assert len(rows) == 5
        assert all(len(row) == 10 for row in rows)
        assert rows[4] == [
            "dish_1", "Empanada", "20", "5", "Normal", "Andes Bakery",
            "1.5", "30.00", "", "2024-05-01T10:00:00+00:00",
        ]

    def test_csv_object_export_is_two_rows(self, report_service, seeded_store):
        result = report_service.export_report("promotions", "CSV", now=NOW)

        rows = _parse_csv(report_service.resolve_artifact(result.filename).read_text(encoding="utf-8"))
        assert len(rows) == 2
        assert "summary.active_promotions" in rows[0]

    def test_same_day_export_replaces_artifact(self, report_service, seeded_store, tmp_path):
        report_service.export_report("reviews", "json", now=NOW)
        report_service.export_report("reviews", "json", now=NOW)

        assert len(list((tmp_path / "reports").glob("reviews_report_*"))) == 1

    def test_unknown_format(self, report_service, seeded_store):
        with pytest.raises(ValidationError):
            report_service.export_report("sales", "xlsx")

    def test_resolve_rejects_path_components(self, report_service):
        with pytest.raises(ValidationError):
            report_service.resolve_artifact("../data/dishes.json")

    def test_resolve_missing_artifact(self, report_service):
        with pytest.raises(NotFoundError):
            report_service.resolve_artifact("sales_report_2024-05-20.csv")

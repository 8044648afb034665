"""
Report Service.

Generates a report, serializes it and persists it as an artifact under
settings.reports_dir, named ``<type>_report_<YYYY-MM-DD>.<ext>``. A second
export of the same type and format on the same day replaces the first.

Usage:
    from merchant_api.services.reports import ReportService

    service = ReportService(store)
    result = service.export_report("inventory", "csv")
    path = service.resolve_artifact(result.filename)
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Mapping

from merchant_api.models import ExportResult
from merchant_api.repositories import DishRepository
from merchant_api.services.analytics.service import AnalyticsService
from merchant_api.services.base_service import BaseService
from merchant_api.services.domain.inventory_service import InventoryService
from merchant_api.services.reports import formatters, generators
from shared.config.constants import ExportFormat, ReportType
from shared.config.logging import StructuredLogger, reports_logger
from shared.config.settings import settings
from shared.infrastructure.store import EntityStore
from shared.utils.exceptions import (
    InternalError,
    NotFoundError,
    UnsupportedReportTypeError,
    ValidationError,
)
from shared.utils.helpers import utc_now
from shared.utils.validators import is_report_filename


class ReportService(BaseService):
    """
    Service for report export.

    Business rules:
    - Report type is case-insensitive: sales, inventory, reviews, promotions
    - JSON results carry the report data; CSV results only the artifact path
    - record_count is the row count for list reports, 1 otherwise
    """

    def __init__(
        self,
        store: EntityStore,
        *,
        reports_dir: Path | str | None = None,
        logger: StructuredLogger | None = None,
    ):
        super().__init__(store, logger=logger or reports_logger)
        self._reports_dir = Path(reports_dir) if reports_dir is not None else settings.reports_dir
        self._analytics = AnalyticsService(store, logger=self._logger)
        self._inventory = InventoryService(store, logger=self._logger)
        self._dishes = DishRepository(store)
        self._generators: dict[str, Callable[[Mapping[str, Any], datetime], Any]] = {
            ReportType.SALES: self._generate_sales,
            ReportType.INVENTORY: self._generate_inventory,
            ReportType.REVIEWS: self._generate_reviews,
            ReportType.PROMOTIONS: self._generate_promotions,
        }

    @property
    def reports_dir(self) -> Path:
        return self._reports_dir

    # =========================================================================
    # Export
    # =========================================================================

    def generate_report(
        self,
        report_type: str,
        options: Mapping[str, Any] | None = None,
        *,
        now: datetime | None = None,
    ) -> Any:
        """
        Build the report structure without persisting it.

        Raises:
            UnsupportedReportTypeError: Unknown report type.
        """
        generator = self._generators.get(report_type.lower())
        if generator is None:
            raise UnsupportedReportTypeError(report_type)
        return generator(options or {}, now or utc_now())

    def export_report(
        self,
        report_type: str,
        export_format: str = ExportFormat.JSON,
        options: Mapping[str, Any] | None = None,
        *,
        now: datetime | None = None,
    ) -> ExportResult:
        """
        Generate, serialize and persist a report.

        Raises:
            UnsupportedReportTypeError: Unknown report type.
            ValidationError: Unknown export format.
            InternalError: The artifact could not be written.
        """
        export_format = (export_format or ExportFormat.JSON).lower()
        if export_format not in ExportFormat.ALL:
            raise ValidationError(
                f"Unsupported export format: {export_format}",
                report_type=report_type,
            )

        now = now or utc_now()
        data = self.generate_report(report_type, options, now=now)
        type_key = report_type.lower()

        if export_format == ExportFormat.CSV:
            content = formatters.to_csv(data, type_key)
        else:
            content = formatters.to_json(data)

        filename = f"{type_key}_report_{now.date().isoformat()}.{export_format}"
        path = self._write_artifact(filename, content)
        record_count = len(data) if isinstance(data, list) else 1

        self._logger.info(
            "Report exported",
            report_type=type_key,
            format=export_format,
            file_path=str(path),
            record_count=record_count,
        )
        return ExportResult(
            success=True,
            format=export_format,
            file_path=str(path),
            record_count=record_count,
            data=data if export_format == ExportFormat.JSON else None,
        )

    def resolve_artifact(self, filename: str) -> Path:
        """
        Path of a previously exported artifact.

        Raises:
            ValidationError: Not a report artifact name.
            NotFoundError: No such artifact.
        """
        if not is_report_filename(filename):
            raise ValidationError("Invalid report filename", filename=filename)
        path = self._reports_dir / filename
        if not path.is_file():
            raise NotFoundError("Report file", filename)
        return path

    # =========================================================================
    # Generators
    # =========================================================================

    def _generate_sales(self, options: Mapping[str, Any], now: datetime) -> dict[str, Any]:
        order_statistics = self._analytics.order_statistics()
        return generators.sales_report(
            order_statistics,
            self._analytics.sales_category_breakdown(order_statistics["top_dishes"]),
            generated_at=now.isoformat(),
            period=options.get("period") or "current",
        )

    def _generate_inventory(self, options: Mapping[str, Any], now: datetime) -> list[dict[str, Any]]:
        return generators.inventory_report(self._inventory.get_inventory(), self._dishes.as_map())

    def _generate_reviews(self, options: Mapping[str, Any], now: datetime) -> dict[str, Any]:
        return generators.reviews_report(
            self._analytics.review_statistics(),
            generated_at=now.isoformat(),
        )

    def _generate_promotions(self, options: Mapping[str, Any], now: datetime) -> dict[str, Any]:
        return generators.promotions_report(
            self._analytics.promotion_statistics(),
            generated_at=now.isoformat(),
        )

    # =========================================================================
    # Internals
    # =========================================================================

    def _write_artifact(self, filename: str, content: str) -> Path:
        path = self._reports_dir / filename
        try:
            self._reports_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise InternalError("Failed to write report file", filename=filename, error=str(e))
        return path

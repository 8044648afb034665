"""
Reporting endpoints: statistics, dashboard, custom analytics and exports.

Statistics are derived on every request from the stored snapshots and the
current menu. Exports are written to settings.reports_dir and can be
fetched again through /downloads/{filename}.
"""

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import FileResponse

from merchant_api.routers._common import envelope
from merchant_api.routers.merchant_schemas import CustomAnalyticsRequest
from merchant_api.services.analytics.service import AnalyticsService
from merchant_api.services.reports import ReportService
from shared.config.constants import PROMOTION_ID_PATTERN, ExportFormat
from shared.infrastructure.store import EntityStore, get_store


router = APIRouter(tags=["merchant-reports"])

MEDIA_TYPES = {
    ExportFormat.JSON: "application/json",
    ExportFormat.CSV: "text/csv",
}


def _get_analytics_service(store: EntityStore) -> AnalyticsService:
    """Get AnalyticsService instance."""
    return AnalyticsService(store)


def _get_report_service(store: EntityStore) -> ReportService:
    """Get ReportService instance."""
    return ReportService(store)


# =============================================================================
# Statistics
# =============================================================================


@router.get("/orders/statistics")
def get_order_statistics(
    period: str = Query(default="today", max_length=20),
    store: EntityStore = Depends(get_store),
) -> dict:
    """Order snapshot with growth, conversion and peak-hour metrics."""
    stats = _get_analytics_service(store).order_statistics()
    return envelope(
        stats,
        period=period,
        data_points={
            "orders": stats["today_orders"],
            "revenue": stats["today_revenue"],
            "top_dishes": len(stats["top_dishes"]),
        },
    )


@router.get("/promotions/statistics")
def get_promotion_statistics(store: EntityStore = Depends(get_store)) -> dict:
    stats = _get_analytics_service(store).promotion_statistics()
    return envelope(
        stats,
        active_promotions=len(stats["active_promotions"]),
        completed_promotions=len(stats["completed_promotions"]),
        total_promotional_revenue=stats["overall_stats"]["total_promotional_revenue"],
    )


@router.get("/promotion/{promotion_id}/analytics")
def get_promotion_analytics(
    promotion_id: str = Path(pattern=PROMOTION_ID_PATTERN),
    store: EntityStore = Depends(get_store),
) -> dict:
    """ROI, per-day rates and effectiveness of a single promotion."""
    analytics = _get_analytics_service(store).promotion_analytics(promotion_id)
    return envelope(
        analytics,
        promotion_id=promotion_id,
        is_active=analytics["is_active"],
        effectiveness_score=analytics["analytics"]["effectiveness_score"],
    )


@router.get("/reviews/statistics")
def get_review_statistics(store: EntityStore = Depends(get_store)) -> dict:
    stats = _get_analytics_service(store).review_statistics()
    return envelope(
        stats,
        total_reviews=stats["total_reviews"],
        average_rating=stats["average_rating"],
        satisfaction_rate=stats["metrics"]["satisfaction_rate"],
        dishes_reviewed=len(stats["dish_reviews"]),
    )


@router.get("/dashboard/summary")
def get_dashboard_summary(store: EntityStore = Depends(get_store)) -> dict:
    summary = _get_analytics_service(store).dashboard_summary()
    return envelope(summary, message="Dashboard summary generated successfully")


@router.post("/analytics/custom")
def run_custom_analytics(
    body: CustomAnalyticsRequest,
    store: EntityStore = Depends(get_store),
) -> dict:
    """
    Compute a chosen set of metrics.

    Dimensions, date range, filters and aggregation are echoed back as the
    request parameters; metrics are computed over the current snapshots.
    """
    analytics = _get_analytics_service(store).custom_analytics(body.metrics)
    return envelope(
        {
            "analytics": analytics,
            "parameters": body.model_dump(mode="json"),
        },
        message="Custom analytics generated successfully",
        metrics_count=len(body.metrics),
    )


# =============================================================================
# Export / download
# =============================================================================


@router.get("/reports/export")
def export_report(
    report_type: str = Query(alias="type", min_length=1, max_length=50),
    export_format: str = Query(default=ExportFormat.JSON, alias="format", max_length=10),
    period: str | None = Query(default=None, max_length=20),
    store: EntityStore = Depends(get_store),
) -> dict:
    """
    Generate and persist a report.

    JSON exports return the report itself; CSV exports return where the
    artifact can be downloaded.
    """
    result = _get_report_service(store).export_report(
        report_type,
        export_format,
        {"period": period} if period else None,
    )

    if result.format == ExportFormat.CSV:
        return envelope(
            {
                "download_url": f"/api/merchant/downloads/{result.filename}",
                "file_path": result.file_path,
                "format": result.format,
                "record_count": result.record_count,
            },
            message="Report exported successfully",
            type=report_type,
            format=result.format,
        )

    return envelope(
        result.data,
        message="Report generated successfully",
        type=report_type,
        format=result.format,
        record_count=result.record_count,
        file_path=result.file_path,
    )


@router.get("/downloads/{filename}")
def download_report(
    filename: str,
    store: EntityStore = Depends(get_store),
) -> FileResponse:
    """Serve a previously exported report artifact."""
    path = _get_report_service(store).resolve_artifact(filename)
    return FileResponse(
        path,
        media_type=MEDIA_TYPES.get(path.suffix.lstrip("."), "application/octet-stream"),
        filename=path.name,
    )

"""
Inventory endpoints: stock levels, manual adjustments, alerts and expiry.

Thin router over InventoryService. Every stock write is mirrored onto the
dish by the service.
"""

from fastapi import APIRouter, Depends, Path, Query

from merchant_api.routers._common import envelope
from merchant_api.routers.merchant_schemas import (
    AlertThresholdUpdate,
    BatchStockEntry,
    InventorySortField,
    SortOrder,
    StockAdjustment,
    StockUpdate,
)
from merchant_api.services.domain import InventoryService
from shared.config.constants import DISH_ID_PATTERN, Limits
from shared.config.settings import settings
from shared.infrastructure.store import EntityStore, get_store
from shared.utils.exceptions import ValidationError


router = APIRouter(tags=["merchant-inventory"])


def _get_service(store: EntityStore) -> InventoryService:
    """Get InventoryService instance."""
    return InventoryService(store)


# =============================================================================
# Stock writes
# =============================================================================


@router.put("/dish/{dish_id}/stock")
def update_stock(
    body: StockUpdate,
    dish_id: str = Path(pattern=DISH_ID_PATTERN),
    store: EntityStore = Depends(get_store),
) -> dict:
    """Set the stock of a dish, creating its inventory record if missing."""
    service = _get_service(store)
    previous = service.find_inventory(dish_id)

    record = service.update_stock(
        dish_id,
        body.stock,
        alert_threshold=body.alert_threshold,
        supplier=body.supplier,
        cost=body.cost,
        expiry_date=body.expiry_date,
    )
    return envelope(
        record,
        message="Stock updated successfully",
        previous_stock=previous.stock if previous is not None else None,
        new_stock=record.stock,
    )


@router.post("/dish/{dish_id}/adjust-stock")
def adjust_stock(
    body: StockAdjustment,
    dish_id: str = Path(pattern=DISH_ID_PATTERN),
    store: EntityStore = Depends(get_store),
) -> dict:
    """
    Add a signed delta to the stock.

    The result never goes below zero; applied_adjustment tells how much of
    the requested delta was actually applied.
    """
    record = _get_service(store).adjust_stock(dish_id, body.adjustment, body.reason or "")
    return envelope(
        record,
        message="Stock adjusted successfully",
        adjustment=body.adjustment,
        applied_adjustment=record.applied_adjustment,
        reason=body.reason or "No reason provided",
        new_stock=record.stock,
    )


@router.put("/inventory/batch-update")
def batch_update_stock(
    body: list[BatchStockEntry],
    store: EntityStore = Depends(get_store),
) -> dict:
    """Update several stocks. Entries that fail are skipped and reported in meta."""
    if not body:
        raise ValidationError("At least one stock update is required")
    if len(body) > settings.max_batch_size:
        raise ValidationError(
            f"Batch size cannot exceed {settings.max_batch_size} items",
            requested=len(body),
        )

    result = _get_service(store).batch_update_stock(
        [entry.model_dump(exclude_none=True) for entry in body]
    )
    return envelope(
        result.items,
        message="Batch stock update completed",
        updated=result.succeeded,
        requested=result.requested,
    )


@router.put("/dish/{dish_id}/alert-threshold")
def update_alert_threshold(
    body: AlertThresholdUpdate,
    dish_id: str = Path(pattern=DISH_ID_PATTERN),
    store: EntityStore = Depends(get_store),
) -> dict:
    record = _get_service(store).update_alert_threshold(dish_id, body.alert_threshold)
    return envelope(
        record,
        message="Alert threshold updated successfully",
        new_threshold=body.alert_threshold,
        current_stock=record.stock,
        alert_status="triggered" if record.is_low_stock else "normal",
    )


@router.post("/inventory/sync")
def synchronize_inventory(store: EntityStore = Depends(get_store)) -> dict:
    """Repair drift between dishes and inventory. Dish stock wins."""
    result = _get_service(store).synchronize_inventory()
    return envelope(result, message="Inventory synchronization completed")


# =============================================================================
# Queries
# =============================================================================


@router.get("/inventory")
def list_inventory(
    low_stock: bool = False,
    out_of_stock: bool = False,
    supplier: str | None = Query(default=None, max_length=Limits.MAX_SUPPLIER_LENGTH),
    sort_by: InventorySortField = "last_updated",
    sort_order: SortOrder = "desc",
    store: EntityStore = Depends(get_store),
) -> dict:
    records = _get_service(store).get_inventory(
        low_stock=low_stock,
        out_of_stock=out_of_stock,
        supplier=supplier,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    filters = {
        "low_stock": low_stock,
        "out_of_stock": out_of_stock,
        "supplier": supplier,
        "sort_by": sort_by,
        "sort_order": sort_order,
    }
    return envelope(
        records,
        total=len(records),
        filters={k: v for k, v in filters.items() if v is not None},
    )


@router.get("/dish/{dish_id}/inventory")
def get_dish_inventory(
    dish_id: str = Path(pattern=DISH_ID_PATTERN),
    store: EntityStore = Depends(get_store),
) -> dict:
    record = _get_service(store).get_inventory_by_dish(dish_id)
    return envelope(
        record,
        stock_status=record.stock_status,
        days_until_expiry=record.days_until_expiry(),
    )


@router.get("/dishes/low-stock")
def list_low_stock_dishes(
    threshold: int | None = Query(default=None, ge=0),
    store: EntityStore = Depends(get_store),
) -> dict:
    """
    Dishes at or below their alert threshold, lowest stock first.

    ``threshold`` overrides every record's own threshold; 0 is valid.
    """
    rows = _get_service(store).get_low_stock_dishes(threshold)
    return envelope(
        rows,
        total=len(rows),
        threshold=threshold if threshold is not None else "default",
        urgent_items=sum(1 for row in rows if row["stock"] == 0),
    )


@router.get("/dishes/out-of-stock")
def list_out_of_stock_dishes(store: EntityStore = Depends(get_store)) -> dict:
    rows = _get_service(store).get_out_of_stock_dishes()
    return envelope(
        rows,
        total=len(rows),
        message="Immediate attention required" if rows else "All dishes in stock",
    )


@router.get("/inventory/summary")
def get_inventory_summary(store: EntityStore = Depends(get_store)) -> dict:
    summary = _get_service(store).get_inventory_summary()
    return envelope(summary, message="Inventory summary generated successfully")


@router.get("/inventory/expiring")
def list_expiring_items(
    days: int = Query(
        default=settings.default_expiring_window_days,
        ge=Limits.MIN_EXPIRY_WINDOW_DAYS,
        le=Limits.MAX_EXPIRY_WINDOW_DAYS,
    ),
    store: EntityStore = Depends(get_store),
) -> dict:
    """Items expiring between now and ``days`` from now."""
    records = _get_service(store).get_expiring_items(days)
    return envelope(
        records,
        total=len(records),
        within_days=days,
        message="Items require attention" if records else "No items expiring soon",
    )

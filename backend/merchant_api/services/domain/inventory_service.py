"""
Inventory Service.

Stock levels, alert thresholds, expiry windows and the dish.stock mirror.

InventoryRecord.stock is authoritative; every write here is mirrored to
Dish.stock. The one exception is synchronize_inventory(), which treats the
dish value as the source of truth to repair drift.

Usage:
    from merchant_api.services.domain import InventoryService

    service = InventoryService(store)
    service.update_stock("dish_1", 40, supplier="Fresh Farms")
    service.adjust_stock("dish_1", -3, reason="Spoiled")
    low = service.get_low_stock_dishes()
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Iterable, Mapping

from pydantic import ValidationError as PydanticValidationError

from merchant_api.models import BatchResult, Dish, InventoryRecord
from merchant_api.repositories import DishRepository, InventoryRepository
from merchant_api.services.analytics.enrichment import dish_fields
from merchant_api.services.base_service import BaseService
from shared.config.constants import Limits
from shared.config.logging import StructuredLogger, inventory_logger
from shared.config.settings import settings
from shared.infrastructure.store import EntityStore
from shared.utils.exceptions import AppException, InventoryNotFoundError, StoreError, ValidationError
from shared.utils.helpers import parse_timestamp, round2, sort_records, utc_now, utc_now_iso


def dish_details(dish: Dish | None) -> dict[str, Any]:
    """Dish fields attached to inventory rows. Missing dishes get placeholders."""
    details = dish_fields(dish)
    details["dish_status"] = dish.status.value if dish is not None else "unknown"
    return details


class InventoryService(BaseService):
    """
    Service for stock management.

    Business rules:
    - Stock is a non-negative integer
    - Low stock means stock <= alert_threshold (inclusive)
    - Out of stock means stock == 0
    - Manual adjustments clamp at zero and record what was asked and
      what was applied
    - Mirroring to Dish.stock is a secondary effect: failures are logged
    """

    def __init__(self, store: EntityStore, *, logger: StructuredLogger | None = None):
        super().__init__(store, logger=logger or inventory_logger)
        self._repo = InventoryRepository(store)
        self._dishes = DishRepository(store)

    # =========================================================================
    # Query Methods
    # =========================================================================

    def get_inventory(
        self,
        *,
        low_stock: bool = False,
        out_of_stock: bool = False,
        supplier: str | None = None,
        sort_by: str = "last_updated",
        sort_order: str = "desc",
    ) -> list[InventoryRecord]:
        """
        List inventory records.

        Args:
            low_stock: Only records with stock <= alert_threshold.
            out_of_stock: Only records with stock == 0.
            supplier: Case-insensitive substring match on supplier.
        """
        records = self._repo.find_all()
        if low_stock:
            records = [r for r in records if r.is_low_stock]
        if out_of_stock:
            records = [r for r in records if r.is_out_of_stock]
        if supplier:
            needle = supplier.lower()
            records = [r for r in records if r.supplier and needle in r.supplier.lower()]
        return sort_records(records, sort_by, sort_order)

    def get_inventory_by_dish(self, dish_id: str) -> InventoryRecord:
        """
        Raises:
            InventoryNotFoundError: No record for the dish.
        """
        record = self._repo.find_by_key(dish_id)
        if record is None:
            raise InventoryNotFoundError(dish_id)
        return record

    def find_inventory(self, dish_id: str) -> InventoryRecord | None:
        """Record for the dish, or None when it has none yet."""
        return self._repo.find_by_key(dish_id)

    def get_low_stock_dishes(self, custom_threshold: int | None = None) -> list[dict[str, Any]]:
        """
        Records at or below their threshold, lowest stock first.

        ``custom_threshold`` replaces every record's own alert_threshold
        when given; 0 is a valid custom threshold.
        """
        records = [
            r for r in self._repo.find_all()
            if r.stock <= (custom_threshold if custom_threshold is not None else r.alert_threshold)
        ]
        rows = self._enrich(records)
        rows.sort(key=lambda row: row["stock"])
        self._logger.info("Low stock query", count=len(rows), threshold=custom_threshold)
        return rows

    def get_out_of_stock_dishes(self) -> list[dict[str, Any]]:
        rows = self._enrich([r for r in self._repo.find_all() if r.is_out_of_stock])
        self._logger.info("Out of stock query", count=len(rows))
        return rows

    def get_expiring_items(self, days: int, *, now: datetime | None = None) -> list[InventoryRecord]:
        """
        Records whose expiry_date falls within [now, now + days].

        Raises:
            ValidationError: days outside 1..365.
        """
        if not Limits.MIN_EXPIRY_WINDOW_DAYS <= days <= Limits.MAX_EXPIRY_WINDOW_DAYS:
            raise ValidationError(
                f"days must be between {Limits.MIN_EXPIRY_WINDOW_DAYS} "
                f"and {Limits.MAX_EXPIRY_WINDOW_DAYS}",
                days=days,
            )
        return self._expiring(self._repo.find_all(), days, now or utc_now())

    def get_inventory_summary(self, *, now: datetime | None = None) -> dict[str, Any]:
        """Totals over the whole inventory."""
        records = self._repo.find_all()
        now = now or utc_now()

        total_items = len(records)
        total_stock = sum(r.stock for r in records)
        low_stock_items = sum(1 for r in records if r.is_low_stock)
        out_of_stock_items = sum(1 for r in records if r.is_out_of_stock)
        total_value = sum(r.stock * r.cost for r in records)
        expiring_items = len(self._expiring(records, settings.expiring_soon_days, now))

        return {
            "total_items": total_items,
            "total_stock": total_stock,
            "low_stock_items": low_stock_items,
            "out_of_stock_items": out_of_stock_items,
            "expiring_items": expiring_items,
            "total_value": round2(total_value),
            "average_stock_per_item": round2(total_stock / total_items) if total_items else 0,
            "stock_status": {
                "healthy": total_items - low_stock_items,
                "low_stock": low_stock_items,
                "out_of_stock": out_of_stock_items,
            },
            "last_updated": now.isoformat(),
        }

    # =========================================================================
    # Command Methods
    # =========================================================================

    def ensure_record(self, dish_id: str, initial_stock: int = 0) -> InventoryRecord:
        """Create the record for a new dish unless one already exists."""
        with self._repo.lock():
            records = self._repo.find_all()
            index = self._repo.index_of(records, dish_id)
            if index is not None:
                return records[index]
            record = self._new_record(dish_id, initial_stock)
            records.append(record)
            self._repo.save_all(records)

        self._logger.info("Inventory entry created", dish_id=dish_id, stock=initial_stock)
        return record

    def update_stock(
        self,
        dish_id: str,
        new_stock: int,
        *,
        alert_threshold: int | None = None,
        supplier: str | None = None,
        cost: float | None = None,
        expiry_date: str | None = None,
    ) -> InventoryRecord:
        """
        Set the stock of a dish, creating its record if missing.

        Optional fields are applied only when given. Dish.stock is updated
        to the same value. A warning is logged when the result is low stock.
        """
        changes: dict[str, Any] = {
            "alert_threshold": alert_threshold,
            "supplier": supplier,
            "cost": cost,
            "expiry_date": expiry_date,
        }
        return self._write_stock(
            dish_id,
            new_stock,
            {k: v for k, v in changes.items() if v is not None},
        )

    def adjust_stock(self, dish_id: str, delta: int, reason: str = "") -> InventoryRecord:
        """
        Add ``delta`` (may be negative) to the current stock.

        The result is clamped at zero: new stock = max(0, stock + delta).
        last_adjustment keeps the requested delta, applied_adjustment the
        delta actually applied.

        Raises:
            InventoryNotFoundError: No record for the dish.
        """
        with self._repo.lock():
            current = self.get_inventory_by_dish(dish_id)
            new_stock = max(0, current.stock + delta)
            applied = new_stock - current.stock

            if applied != delta:
                self._logger.warning(
                    "Stock adjustment clamped at zero",
                    dish_id=dish_id,
                    requested=delta,
                    applied=applied,
                )

            record = self._write_stock(
                dish_id,
                new_stock,
                {
                    "adjustment_reason": reason,
                    "last_adjustment": delta,
                    "applied_adjustment": applied,
                    "last_adjustment_date": utc_now_iso(),
                },
            )

        self._logger.info(
            "Stock adjusted",
            dish_id=dish_id,
            adjustment=delta,
            reason=reason,
            new_stock=new_stock,
        )
        return record

    def batch_update_stock(self, entries: Iterable[Mapping[str, Any]]) -> BatchResult:
        """
        Apply update_stock to each entry.

        Entries without dish_id or stock are skipped; entries that fail are
        logged and skipped. Returns what succeeded against what was asked.
        """
        entries = list(entries)
        result = BatchResult(requested=len(entries))

        for entry in entries:
            dish_id = entry.get("dish_id")
            stock = entry.get("stock")
            if not dish_id or stock is None:
                self._logger.warning("Skipping invalid stock update", entry=dict(entry))
                continue
            try:
                record = self.update_stock(
                    dish_id,
                    stock,
                    alert_threshold=entry.get("alert_threshold"),
                    supplier=entry.get("supplier"),
                    cost=entry.get("cost"),
                    expiry_date=entry.get("expiry_date"),
                )
            except AppException as e:
                self._logger.error("Stock update failed in batch", dish_id=dish_id, error=str(e))
                continue
            result.items.append(record)

        result.succeeded = len(result.items)
        self._logger.info(
            "Batch stock update",
            succeeded=result.succeeded,
            requested=result.requested,
        )
        return result

    def update_alert_threshold(self, dish_id: str, value: int) -> InventoryRecord:
        """
        Raises:
            ValidationError: value < 0.
            InventoryNotFoundError: No record for the dish.
        """
        if value < 0:
            raise ValidationError("Alert threshold must be non-negative", dish_id=dish_id)

        with self._repo.lock():
            records = self._repo.find_all()
            index = self._repo.index_of(records, dish_id)
            if index is None:
                raise InventoryNotFoundError(dish_id)
            record = records[index]
            record.alert_threshold = value
            record.last_updated = utc_now_iso()
            self._repo.save_all(records)

        self._logger.info("Alert threshold updated", dish_id=dish_id, alert_threshold=value)
        return record

    def synchronize_inventory(self) -> dict[str, Any]:
        """
        Repair drift between dishes and inventory, dish values winning.

        Creates records for dishes that have none and overwrites record
        stock where it differs from the dish. Running it twice in a row
        changes nothing the second time.
        """
        created = 0
        updated = 0

        with self._repo.lock():
            dishes = self._dishes.find_all()
            records = self._repo.find_all()
            by_dish = self._repo.as_map(records)

            for dish in dishes:
                record = by_dish.get(dish.id)
                if record is None:
                    record = self._new_record(dish.id, dish.stock or 0)
                    records.append(record)
                    by_dish[dish.id] = record
                    created += 1
                elif record.stock != dish.stock:
                    record.stock = dish.stock
                    record.last_updated = utc_now_iso()
                    updated += 1

            if created or updated:
                self._repo.save_all(records)

        message = f"Synchronized inventory: {created} created, {updated} updated"
        self._logger.info("Inventory synchronization completed", created=created, updated=updated)
        return {
            "created": created,
            "updated": updated,
            "total": len(records),
            "message": message,
        }

    # =========================================================================
    # Internals
    # =========================================================================

    def _new_record(self, dish_id: str, stock: int) -> InventoryRecord:
        return InventoryRecord(
            dish_id=dish_id,
            stock=stock,
            alert_threshold=settings.default_alert_threshold,
            supplier="",
            cost=0.0,
            expiry_date=None,
        )

    def _write_stock(self, dish_id: str, new_stock: int, changes: dict[str, Any]) -> InventoryRecord:
        if new_stock < 0:
            raise ValidationError("Stock must be a non-negative integer", dish_id=dish_id)

        with self._repo.lock():
            records = self._repo.find_all()
            index = self._repo.index_of(records, dish_id)
            if index is None:
                record = self._new_record(dish_id, new_stock)
                records.append(record)
                created = True
            else:
                record = records[index]
                created = False

            data = {**record.model_dump(), **changes, "stock": new_stock, "last_updated": utc_now_iso()}
            try:
                record = InventoryRecord.model_validate(data)
            except PydanticValidationError as e:
                raise ValidationError("Invalid inventory data", dish_id=dish_id, error=str(e))
            if created:
                records[-1] = record
            else:
                records[index] = record
            self._repo.save_all(records)

        self._mirror_dish_stock(dish_id, new_stock)

        if record.is_low_stock:
            self._logger.warning(
                "Low stock alert",
                dish_id=dish_id,
                stock=new_stock,
                alert_threshold=record.alert_threshold,
            )
        self._logger.info(
            "Inventory entry created" if created else "Stock updated",
            dish_id=dish_id,
            stock=new_stock,
        )
        return record

    def _mirror_dish_stock(self, dish_id: str, stock: int) -> None:
        """Copy stock onto Dish.stock. Secondary effect: never raises."""
        try:
            with self._dishes.lock():
                dishes = self._dishes.find_all()
                index = self._dishes.index_of(dishes, dish_id)
                if index is None:
                    return
                dishes[index].stock = stock
                dishes[index].touch()
                self._dishes.save_all(dishes)
        except StoreError as e:
            self._logger.error("Failed to mirror stock onto dish", dish_id=dish_id, error=str(e))

    def _enrich(self, records: list[InventoryRecord]) -> list[dict[str, Any]]:
        dishes = self._dishes.as_map()
        return [
            {**record.to_record(), **dish_details(dishes.get(record.dish_id))}
            for record in records
        ]

    @staticmethod
    def _expiring(records: list[InventoryRecord], days: int, now: datetime) -> list[InventoryRecord]:
        horizon = now + timedelta(days=days)
        expiring = []
        for record in records:
            expiry = parse_timestamp(record.expiry_date)
            if expiry is not None and now <= expiry <= horizon:
                expiring.append(record)
        return expiring

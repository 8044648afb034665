"""
Join statistic line items with the current menu.

Stat snapshots reference dishes by id only. These helpers attach the dish's
name, price and category so responses and reports are readable. A dish that
no longer exists is rendered with placeholders instead of failing the join.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from merchant_api.models import Dish
from shared.config.constants import UNKNOWN_DISH_NAME


def dish_fields(dish: Dish | None) -> dict[str, Any]:
    """Display fields for a dish, or placeholders when it is missing."""
    if dish is None:
        return {"dish_name": UNKNOWN_DISH_NAME, "dish_price": 0, "category_id": None}
    return {"dish_name": dish.name, "dish_price": dish.price, "category_id": dish.category_id}


def enrich_with_dish(
    items: Iterable[Mapping[str, Any]],
    dishes: Mapping[str, Dish],
) -> list[dict[str, Any]]:
    """Copy each item (keyed by ``dish_id``) and add the dish display fields."""
    return [{**item, **dish_fields(dishes.get(item.get("dish_id")))} for item in items]


def with_dish_names(
    promotions: Iterable[Mapping[str, Any]],
    dishes: Mapping[str, Dish],
) -> list[dict[str, Any]]:
    """Add ``applicable_dish_names`` in the same order as ``applicable_dishes``."""
    enriched = []
    for promotion in promotions:
        names = [
            dishes[dish_id].name if dish_id in dishes else UNKNOWN_DISH_NAME
            for dish_id in promotion.get("applicable_dishes", [])
        ]
        enriched.append({**promotion, "applicable_dish_names": names})
    return enriched


def resolve_applicable_dishes(
    dish_ids: Iterable[str],
    dishes: Mapping[str, Dish],
) -> list[dict[str, Any]]:
    """Summaries of the dishes a promotion applies to. Unknown ids are dropped."""
    resolved = []
    for dish_id in dish_ids:
        dish = dishes.get(dish_id)
        if dish is None:
            continue
        resolved.append({
            "id": dish.id,
            "name": dish.name,
            "price": dish.price,
            "category_id": dish.category_id,
        })
    return resolved

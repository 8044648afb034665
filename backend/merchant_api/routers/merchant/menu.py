"""
Menu management endpoints: categories and dishes.

Thin router that delegates to CategoryService and DishService.
Business rules (category references, soft delete, id assignment) live in
merchant_api/services/domain/.
"""

from fastapi import APIRouter, Depends, Path, Query, status

from merchant_api.routers._common import envelope
from merchant_api.routers.merchant_schemas import (
    CategoryCreate,
    CategorySortField,
    CategorySortItem,
    CategoryUpdate,
    DishBatchStatusUpdate,
    DishCreate,
    DishImageUpload,
    DishSortField,
    DishStatusUpdate,
    DishUpdate,
    SortOrder,
)
from merchant_api.services.domain import CategoryService, DishService
from shared.config.constants import CATEGORY_ID_PATTERN, DISH_ID_PATTERN, DishStatus
from shared.infrastructure.store import EntityStore, get_store
from shared.utils.exceptions import ValidationError


router = APIRouter(tags=["merchant-menu"])


def _get_category_service(store: EntityStore) -> CategoryService:
    """Get CategoryService instance."""
    return CategoryService(store)


def _get_dish_service(store: EntityStore) -> DishService:
    """Get DishService instance."""
    return DishService(store)


# =============================================================================
# Categories
# =============================================================================


@router.get("/categories")
def list_categories(
    is_active: bool | None = None,
    sort_by: CategorySortField = "sort_order",
    sort_order: SortOrder = "asc",
    store: EntityStore = Depends(get_store),
) -> dict:
    """List categories, ordered by sort_order unless asked otherwise."""
    categories = _get_category_service(store).list_categories(
        is_active=is_active,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return envelope(categories, total=len(categories))


@router.get("/category/{category_id}")
def get_category(
    category_id: str = Path(pattern=CATEGORY_ID_PATTERN),
    store: EntityStore = Depends(get_store),
) -> dict:
    return envelope(_get_category_service(store).get_category(category_id))


@router.post("/category", status_code=status.HTTP_201_CREATED)
def create_category(
    body: CategoryCreate,
    store: EntityStore = Depends(get_store),
) -> dict:
    category = _get_category_service(store).create_category(
        body.model_dump(exclude_none=True)
    )
    return envelope(category, message="Category created successfully")


@router.put("/category/{category_id}")
def update_category(
    body: CategoryUpdate,
    category_id: str = Path(pattern=CATEGORY_ID_PATTERN),
    store: EntityStore = Depends(get_store),
) -> dict:
    category = _get_category_service(store).update_category(
        category_id,
        body.model_dump(exclude_unset=True, exclude_none=True),
    )
    return envelope(category, message="Category updated successfully")


@router.delete("/category/{category_id}")
def delete_category(
    category_id: str = Path(pattern=CATEGORY_ID_PATTERN),
    store: EntityStore = Depends(get_store),
) -> dict:
    """
    Soft delete a category.

    Refused with 409 while any dish, on or off, still references it.
    """
    _get_category_service(store).delete_category(category_id)
    return envelope({"deleted": True}, message="Category deleted successfully")


@router.put("/categories/sort")
def sort_categories(
    body: list[CategorySortItem],
    store: EntityStore = Depends(get_store),
) -> dict:
    """Apply new sort orders. Unknown ids are ignored."""
    if not body:
        raise ValidationError("At least one category sort item is required")
    categories = _get_category_service(store).reorder_categories(
        [item.model_dump() for item in body]
    )
    return envelope(
        categories,
        message="Categories sort order updated successfully",
        updated=len(body),
    )


# =============================================================================
# Dishes
# =============================================================================


@router.get("/dishes")
def list_dishes(
    category_id: str | None = Query(default=None, pattern=CATEGORY_ID_PATTERN),
    status_filter: DishStatus | None = Query(default=None, alias="status"),
    is_vegetarian: bool | None = None,
    is_spicy: bool | None = None,
    sort_by: DishSortField = "name",
    sort_order: SortOrder = "asc",
    store: EntityStore = Depends(get_store),
) -> dict:
    """List dishes with optional filters. Default order: name ascending."""
    dishes = _get_dish_service(store).list_dishes(
        category_id=category_id,
        status=status_filter.value if status_filter else None,
        is_vegetarian=is_vegetarian,
        is_spicy=is_spicy,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    filters = {
        "category_id": category_id,
        "status": status_filter.value if status_filter else None,
        "is_vegetarian": is_vegetarian,
        "is_spicy": is_spicy,
        "sort_by": sort_by,
        "sort_order": sort_order,
    }
    return envelope(
        dishes,
        total=len(dishes),
        filters={k: v for k, v in filters.items() if v is not None},
    )


@router.get("/dish/{dish_id}")
def get_dish(
    dish_id: str = Path(pattern=DISH_ID_PATTERN),
    store: EntityStore = Depends(get_store),
) -> dict:
    return envelope(_get_dish_service(store).get_dish(dish_id))


@router.post("/dish", status_code=status.HTTP_201_CREATED)
def create_dish(
    body: DishCreate,
    store: EntityStore = Depends(get_store),
) -> dict:
    """
    Create a dish.

    The dish's inventory record is created with the initial stock.
    """
    dish = _get_dish_service(store).create_dish(
        body.model_dump(mode="json", exclude_none=True)
    )
    return envelope(dish, message="Dish created successfully")


@router.put("/dish/{dish_id}")
def update_dish(
    body: DishUpdate,
    dish_id: str = Path(pattern=DISH_ID_PATTERN),
    store: EntityStore = Depends(get_store),
) -> dict:
    dish = _get_dish_service(store).update_dish(
        dish_id,
        body.model_dump(mode="json", exclude_unset=True, exclude_none=True),
    )
    return envelope(dish, message="Dish updated successfully")


@router.delete("/dish/{dish_id}")
def delete_dish(
    dish_id: str = Path(pattern=DISH_ID_PATTERN),
    store: EntityStore = Depends(get_store),
) -> dict:
    """Soft delete: the dish is switched off and kept."""
    _get_dish_service(store).delete_dish(dish_id)
    return envelope({"deleted": True}, message="Dish deleted successfully")


@router.put("/dish/{dish_id}/status")
def update_dish_status(
    body: DishStatusUpdate,
    dish_id: str = Path(pattern=DISH_ID_PATTERN),
    store: EntityStore = Depends(get_store),
) -> dict:
    dish = _get_dish_service(store).set_dish_status(dish_id, body.status.value)
    return envelope(dish, message=f"Dish status updated to {body.status.value}")


@router.put("/dishes/batch-status")
def update_dishes_status_batch(
    body: DishBatchStatusUpdate,
    store: EntityStore = Depends(get_store),
) -> dict:
    """Set the status of several dishes. Unknown ids are skipped."""
    dishes = _get_dish_service(store).batch_set_dish_status(body.dish_ids, body.status.value)
    return envelope(
        dishes,
        message=f"Updated status for {len(dishes)} dishes to {body.status.value}",
        updated=len(dishes),
        requested=len(body.dish_ids),
    )


@router.post("/upload/dish-image")
def upload_dish_image(
    body: DishImageUpload,
    store: EntityStore = Depends(get_store),
) -> dict:
    """
    Simulated image upload.

    No bytes are transferred: the image metadata is validated and a URL is
    synthesized and stored on the dish.
    """
    result = _get_dish_service(store).upload_dish_image(
        body.dish_id,
        filename=body.filename,
        mimetype=body.mimetype,
        size=body.size,
    )
    return envelope(result, message="Image uploaded successfully")

"""
Merchant API router - combines all merchant sub-routers.

Endpoints organized by domain:

- menu: Category and dish CRUD, dish status, simulated image upload
- inventory: Stock updates and adjustments, alerts, expiry, sync
- reports: Statistics, dashboard, custom analytics, report export

All routes are prefixed with /api/merchant
"""

from fastapi import APIRouter

from .menu import router as menu_router
from .inventory import router as inventory_router
from .reports import router as reports_router


router = APIRouter(prefix="/api/merchant")

router.include_router(menu_router)
router.include_router(inventory_router)
router.include_router(reports_router)

__all__ = ["router"]

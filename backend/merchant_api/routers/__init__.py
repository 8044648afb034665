"""
HTTP routers.

- public: health checks
- merchant: menu, inventory and reporting under /api/merchant
- merchant_schemas: request bodies shared by the merchant routers
"""

from .merchant import router as merchant_router
from .public import health_router

__all__ = ["merchant_router", "health_router"]

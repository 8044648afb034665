"""
Standard response envelope for the merchant routers.

Every successful response has the shape ``{"data": ..., "meta": {...}}``
where meta always carries the response timestamp.

Usage:
    from merchant_api.routers._common import envelope

    @router.get("/categories")
    def list_categories(...):
        categories = service.list_categories()
        return envelope(categories, total=len(categories))
"""

from typing import Any

from shared.utils.helpers import utc_now_iso


def envelope(data: Any, **meta: Any) -> dict[str, Any]:
    """Wrap data with meta information. None-valued meta keys are kept."""
    return {
        "data": data,
        "meta": {**meta, "timestamp": utc_now_iso()},
    }

"""
Infrastructure module: entity store and request correlation.

Provides:
- JSON collection storage (store.py)
- Correlation id middleware / logging filter (correlation.py)
"""

from shared.infrastructure.store import (
    EntityStore,
    get_entity_store,
    get_store,
)
from shared.infrastructure.correlation import (
    CorrelationIdMiddleware,
    CorrelationIdFilter,
    get_request_id,
)

__all__ = [
    # store
    "EntityStore",
    "get_entity_store",
    "get_store",
    # correlation
    "CorrelationIdMiddleware",
    "CorrelationIdFilter",
    "get_request_id",
]

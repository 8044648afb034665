"""
Shared module for common utilities used by the merchant API and the CLI.

STRUCTURE:
- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging
  - constants.py: Collection names, dish/category states, report types

- shared.infrastructure: Storage and request plumbing
  - store.py: JSON entity store, per-collection write locks
  - correlation.py: X-Request-ID middleware and logging filter

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - helpers.py: Money rounding, timestamps, id generation, sorting

IMPORT EXAMPLES:
    from shared.config.settings import settings
    from shared.config.constants import Collections, DishStatus
    from shared.infrastructure.store import EntityStore, get_store
    from shared.utils.exceptions import NotFoundError, ConflictError
    from shared.utils.helpers import round2, utc_now_iso
"""

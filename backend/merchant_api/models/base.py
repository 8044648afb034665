"""
Base classes for the persisted models.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from shared.utils.helpers import utc_now_iso


class StoredModel(BaseModel):
    """Base class for every record kept in the entity store."""

    model_config = {"extra": "ignore", "validate_assignment": True}

    def to_record(self) -> dict:
        """JSON-ready dict, the shape written to disk."""
        return self.model_dump(mode="json")


class TimestampMixin(BaseModel):
    """
    Creation / modification timestamps.

    Stored as ISO-8601 strings so the files stay readable and diff-friendly.
    """

    created_at: str = Field(default_factory=utc_now_iso)
    updated_at: str = Field(default_factory=utc_now_iso)

    def touch(self) -> None:
        self.updated_at = utc_now_iso()

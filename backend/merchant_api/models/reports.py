"""
Report Models: ExportResult.
"""

from __future__ import annotations

from pathlib import PurePath
from typing import Any

from pydantic import BaseModel


class ExportResult(BaseModel):
    """
    Outcome of a report export.

    ``data`` carries the report itself for JSON exports only; CSV callers
    download the artifact at ``file_path``.
    """

    success: bool = True
    format: str
    file_path: str
    record_count: int
    data: Any = None

    @property
    def filename(self) -> str:
        return PurePath(self.file_path).name

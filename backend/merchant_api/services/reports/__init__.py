"""
Report export pipeline: generators, CSV/JSON formatters, ReportService.
"""

from .service import ReportService

__all__ = ["ReportService"]

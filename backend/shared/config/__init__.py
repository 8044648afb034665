"""
Configuration module: Settings, logging, constants.
"""

from shared.config.settings import settings, get_settings
from shared.config.logging import get_logger, setup_logging
from shared.config.constants import (
    Collections,
    DishStatus,
    CategoryStatus,
    ReportType,
    ExportFormat,
    Limits,
)

__all__ = [
    # settings
    "settings",
    "get_settings",
    # logging
    "get_logger",
    "setup_logging",
    # constants
    "Collections",
    "DishStatus",
    "CategoryStatus",
    "ReportType",
    "ExportFormat",
    "Limits",
]

"""
Core module for application infrastructure.
"""
from app.core.config import Settings, settings
from app.core.errors import (
    ExamDataError,
    NotFoundError,
    StoreNotInitializedError,
    UnsupportedExportFormatError,
    ConfigurationError
)
from app.core.logging_config import configure_logging

__all__ = [
    "Settings",
    "settings",
    "ExamDataError",
    "NotFoundError",
    "StoreNotInitializedError",
    "UnsupportedExportFormatError",
    "ConfigurationError",
    "configure_logging"
]

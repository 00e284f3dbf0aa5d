"""Exception types raised by the exam data services."""
from typing import Optional


class ExamDataError(Exception):
    """Base class for service errors"""


class NotFoundError(ExamDataError):
    """A required record (submission, version record, assignment...) does not exist"""

    def __init__(self, entity: str, entity_id: Optional[str] = None, message: Optional[str] = None):
        self.entity = entity
        self.entity_id = entity_id
        if message is None:
            message = f"{entity} {entity_id} not found" if entity_id else f"{entity} not found"
        super().__init__(message)


class StoreNotInitializedError(ExamDataError):
    """The document store was used before init() or after close()"""

    def __init__(self, message: str = "Document store is not initialized. Check the database configuration."):
        super().__init__(message)


class UnsupportedExportFormatError(ExamDataError):
    """Requested export format is not implemented"""

    def __init__(self, export_format: str):
        self.export_format = export_format
        super().__init__(f"Unsupported export format: {export_format}")


class ConfigurationError(ExamDataError):
    """Invalid runtime configuration"""

"""
Error taxonomy for the data layer.

Every failure aborts the write and propagates to the immediate caller:
- ValidationError: a field failed a type/shape/required/format check
- UniqueConstraintError: a unique index rejected the write
- ConfigurationError: required configuration (DATABASE_URL) is missing
- DatabaseConnectionError: the database could not be reached
"""

from typing import Optional, Sequence


class EventlyError(Exception):
    """Base class for all data layer errors."""


class ValidationError(EventlyError, ValueError):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class UniqueConstraintError(EventlyError):
    def __init__(self, message: str, fields: Sequence[str] = ()):
        super().__init__(message)
        self.message = message
        self.fields = tuple(fields)


class ConfigurationError(EventlyError):
    pass


class DatabaseConnectionError(EventlyError, ConnectionError):
    pass

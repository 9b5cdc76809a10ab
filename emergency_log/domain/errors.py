"""Error taxonomy for the emergency event log."""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"
    STORAGE_READ_FAILED = "STORAGE_READ_FAILED"
    STORAGE_WRITE_FAILED = "STORAGE_WRITE_FAILED"
    VALIDATION_FAILED = "VALIDATION_FAILED"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class StorageError(DomainError):
    """Base for failures raised by the event repository."""


class StorageUnavailable(StorageError):
    """The store could not be opened or its schema created. Fatal."""

    code = ErrorCode.STORAGE_UNAVAILABLE


class StorageReadError(StorageError):
    """Listing or reading events failed. The caller may retry."""

    code = ErrorCode.STORAGE_READ_FAILED


class StorageWriteError(StorageError):
    """An insert, update or delete failed and was not applied."""

    code = ErrorCode.STORAGE_WRITE_FAILED


class ValidationError(DomainError):
    """Required draft fields are empty. Never reaches storage."""

    code = ErrorCode.VALIDATION_FAILED

    def __init__(self, missing_fields: list[str]) -> None:
        super().__init__(
            "Title, date and photo are required "
            f"(missing: {', '.join(missing_fields)})"
        )
        self.missing_fields = missing_fields

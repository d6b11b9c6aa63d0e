from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    STORAGE = "storage"
    IMPORT = "import"


class HealthLogError(Exception):
    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.VALIDATION,
        detail: Optional[str] = None,
    ) -> None:
        self.message = message
        self.category = category
        self.detail = detail
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.category.value}] {self.message}"]
        if self.detail:
            parts.append(self.detail)
        return " | ".join(parts)


class ValidationError(HealthLogError):
    def __init__(self, message: str, detail: Optional[str] = None) -> None:
        super().__init__(message, ErrorCategory.VALIDATION, detail)


class StorageUnavailable(HealthLogError):
    def __init__(self, message: str, detail: Optional[str] = None) -> None:
        super().__init__(message, ErrorCategory.STORAGE, detail)


class ImportAborted(StorageUnavailable):
    """A storage failure stopped a bulk import; earlier items stay committed."""

    def __init__(self, message: str, imported: int = 0, detail: Optional[str] = None) -> None:
        super().__init__(message, detail)
        self.category = ErrorCategory.IMPORT
        self.imported = imported

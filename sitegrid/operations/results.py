"""Result types returned by user-facing operations."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from sitegrid.core.exceptions import (
    ConflictError,
    DuplicateError,
    NotFoundError,
    SiteGridError,
    SnapshotImportError,
    ValidationError,
)


class ResultStatus(Enum):
    """Outcome category of an operation."""

    SUCCESS = "success"
    VALIDATION_FAILED = "validation_failed"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    DUPLICATE = "duplicate"
    IMPORT_FAILED = "import_failed"

    def is_success(self) -> bool:
        return self is ResultStatus.SUCCESS

    def is_failure(self) -> bool:
        return not self.is_success()


_STATUS_BY_ERROR: tuple[tuple[type[SiteGridError], ResultStatus], ...] = (
    (ValidationError, ResultStatus.VALIDATION_FAILED),
    (NotFoundError, ResultStatus.NOT_FOUND),
    (ConflictError, ResultStatus.CONFLICT),
    (DuplicateError, ResultStatus.DUPLICATE),
    (SnapshotImportError, ResultStatus.IMPORT_FAILED),
)


@dataclass
class OperationResult:
    """What an operation did, or why it refused to."""

    status: ResultStatus
    message: str
    entity_id: str | None = None
    entity: Any = None
    timestamp: datetime = field(default_factory=datetime.now)

    # Failure details
    errors: list[str] | None = None
    validation_errors: dict[str, str] | None = None

    @property
    def success(self) -> bool:
        return self.status.is_success()

    @classmethod
    def ok(
        cls, message: str, entity_id: str | None = None, entity: Any = None
    ) -> "OperationResult":
        return cls(
            status=ResultStatus.SUCCESS,
            message=message,
            entity_id=entity_id,
            entity=entity,
        )

    @classmethod
    def from_error(
        cls, error: SiteGridError, entity_id: str | None = None
    ) -> "OperationResult":
        """Turn a collection error into a failed result."""
        status = next(
            (s for kind, s in _STATUS_BY_ERROR if isinstance(error, kind)),
            ResultStatus.CONFLICT,
        )

        result = cls(status=status, message=error.user_message, entity_id=entity_id)
        if isinstance(error, ValidationError):
            result.validation_errors = dict(error.errors)
            result.message = "Validation failed"
        elif isinstance(error, SnapshotImportError):
            result.errors = list(error.problems) or None
        elif isinstance(error, ConflictError):
            details = [
                *(f"missing: {i}" for i in error.missing),
                *(f"extra: {i}" for i in error.extra),
                *(f"duplicate: {i}" for i in error.duplicates),
            ]
            result.errors = details or None
        return result

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form used by JSON output."""
        result: dict[str, Any] = {
            "status": self.status.value,
            "message": self.message,
            "entity_id": self.entity_id,
            "timestamp": self.timestamp.isoformat(),
        }

        if self.errors:
            result["errors"] = self.errors

        if self.validation_errors:
            result["validation_errors"] = [
                {"field": name, "message": message}
                for name, message in self.validation_errors.items()
            ]

        return result

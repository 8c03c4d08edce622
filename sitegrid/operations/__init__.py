"""User-facing operations that return results instead of raising."""

from .results import OperationResult, ResultStatus
from .snapshots import SnapshotOperations
from .tags import TagOperations
from .websites import WebsiteOperations

__all__ = [
    "OperationResult",
    "ResultStatus",
    "SnapshotOperations",
    "TagOperations",
    "WebsiteOperations",
]

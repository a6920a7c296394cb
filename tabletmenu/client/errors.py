from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Where a remote call went wrong."""
    TRANSPORT = "transport"  # connection refused, timeout, DNS, ...
    HTTP = "http"  # non-2xx answer
    MALFORMED = "malformed"  # body could not be parsed


class MenuApiError(Exception):
    """
    Single error type surfaced by the sync layer.

    All failure kinds carry a human-readable ``message``; callers that only
    show an error state never need to look at ``kind``.
    """

    def __init__(self, message: str, kind: ErrorKind, status_code: Optional[int] = None):
        self.message = message
        self.kind = kind
        self.status_code = status_code
        super().__init__(message)


class CategoryDeleteRejected(MenuApiError):
    """Raised when the store refuses to delete a category (dishes still attached)."""

    def __init__(self, category_id: str, message: str, status_code: Optional[int] = 400):
        self.category_id = category_id
        super().__init__(message, ErrorKind.HTTP, status_code)

"""Custom exceptions for the job cache cleanup service."""
from typing import Optional


class StoreError(Exception):
    """Raised when a store primitive fails; the session has already been rolled back."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause

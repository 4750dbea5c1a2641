"""Typed errors for the Sunrise DA adapter."""

from typing import List, Optional


class SunriseDAError(Exception):
    """Base exception for all adapter errors."""


class InvalidIdentifierError(SunriseDAError, ValueError):
    """Raised when an identifier cannot be encoded, decoded or dereferenced."""


class PublishError(SunriseDAError):
    """Raised when publishing a blob to the remote service fails."""


class FetchError(SunriseDAError):
    """Raised when fetching a blob from the remote service fails."""

    def __init__(self, message: str, locator: Optional[str] = None):
        self.locator = locator
        super().__init__(message)


class BlobTooLargeError(SunriseDAError, ValueError):
    """Raised when a submitted blob exceeds the adapter's max blob size."""

    def __init__(self, index: int, size: int, limit: int):
        self.index = index
        self.size = size
        self.limit = limit
        super().__init__(f"Blob {index} is {size} bytes, max blob size is {limit}")


class SubmissionError(SunriseDAError):
    """Raised when at least one blob of a batch could not be published.

    Submission is all-or-nothing: no identifiers are returned to the caller
    even if some blobs were stored remotely.
    """

    def __init__(self, errors: List[Exception], batch_size: int):
        self.errors = list(errors)
        self.batch_size = batch_size
        super().__init__(
            f"Failed to publish {len(self.errors)} of {batch_size} blobs: {self.errors[0]}"
        )

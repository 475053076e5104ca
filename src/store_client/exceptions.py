"""Custom exception hierarchy for the data store client."""

from __future__ import annotations


class StoreClientError(Exception):
    """Base exception for all store_client errors."""


class NotFoundError(StoreClientError):
    """A lookup on a connected store returned nothing. Recoverable."""

    def __init__(self, entity: str, key: object) -> None:
        super().__init__(f"No {entity} found for {key}")
        self.entity = entity
        self.key = key


class StorageError(StoreClientError):
    """The backend failed or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StorageRateLimitError(StorageError):
    """HTTP 429 — too many requests, retries exhausted."""

    def __init__(self, message: str = "Rate limited by data store") -> None:
        super().__init__(message, status_code=429)

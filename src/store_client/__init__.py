"""Data store client — all storage I/O for the session engine lives here."""

from store_client.base import DataStore
from store_client.blending import blend_metrics
from store_client.channel import ConnectionChannel
from store_client.exceptions import (
    NotFoundError,
    StorageError,
    StorageRateLimitError,
    StoreClientError,
)
from store_client.memory import InMemoryDataStore
from store_client.rest import RestDataStore

__all__ = [
    "ConnectionChannel",
    "DataStore",
    "InMemoryDataStore",
    "NotFoundError",
    "RestDataStore",
    "StorageError",
    "StorageRateLimitError",
    "StoreClientError",
    "blend_metrics",
]

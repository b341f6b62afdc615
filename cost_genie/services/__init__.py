"""Services package."""

from cost_genie.services.storage import (
    AuditStorageInterface,
    CostStorageInterface,
    DuplicateError,
    InMemoryAuditStorage,
    InMemoryCostStorage,
    InMemoryProfileStorage,
    NotFoundError,
    ProfileStorageInterface,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    # Storage interfaces
    "AuditStorageInterface",
    "CostStorageInterface",
    "ProfileStorageInterface",
    # Storage errors
    "DuplicateError",
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
    # In-memory backends
    "InMemoryAuditStorage",
    "InMemoryCostStorage",
    "InMemoryProfileStorage",
]

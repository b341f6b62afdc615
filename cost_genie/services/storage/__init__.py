"""
Storage Services Package

Abstract interfaces plus two implementations: in-memory (default) and
Google Sheets. The Google Sheets backend is imported lazily so the
in-memory setup does not need gspread credentials at import time.
"""

from cost_genie.services.storage.interface import (
    AuditStorageInterface,
    CostStorageInterface,
    DuplicateError,
    NotFoundError,
    ProfileStorageInterface,
    StorageConnectionError,
    StorageError,
)
from cost_genie.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryCostStorage,
    InMemoryProfileStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "CostStorageInterface",
    "ProfileStorageInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryCostStorage",
    "InMemoryProfileStorage",
]

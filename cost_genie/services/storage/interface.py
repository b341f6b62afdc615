"""
Abstract Storage Interface

The calculation core never touches storage. These interfaces describe the
collaborators that the orchestrator uses to fetch and mutate data:
1. Cost entries (queried by owner, optionally filtered by tag)
2. Income profiles (one per user)
3. The append-only audit log

Backends: in-memory (default, used by tests) and Google Sheets.
The interface is intentionally small: just the operations the
application needs, not a general query layer.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from cost_genie.models.audit import AuditEvent
from cost_genie.models.cost import (
    CostEntry,
    CostEntryUpdate,
    ProfileUpdate,
    UserProfile,
)


class CostStorageInterface(ABC):
    """
    Abstract interface for cost entry storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    async def add_cost(self, entry: CostEntry) -> CostEntry:
        """
        Store a new cost entry.

        Returns:
            The stored entry

        Raises:
            DuplicateError: An entry with the same ID already exists
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def get_cost(self, cost_id: UUID) -> Optional[CostEntry]:
        """
        Retrieve a cost entry by its ID.

        Returns:
            The entry if found, None otherwise
        """
        pass

    @abstractmethod
    async def update_cost(self, cost_id: UUID, update: CostEntryUpdate) -> CostEntry:
        """
        Apply a partial update to a cost entry.

        Returns:
            The updated entry

        Raises:
            NotFoundError: If the entry doesn't exist
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete_cost(self, cost_id: UUID) -> bool:
        """
        Delete a cost entry.

        Returns:
            True if an entry was deleted, False if none matched
        """
        pass

    @abstractmethod
    async def set_tags(
        self,
        cost_id: UUID,
        favorite: Optional[bool] = None,
        need: Optional[bool] = None,
    ) -> CostEntry:
        """
        Set the want/need flags of an entry in a single write.

        Flags left as None are not touched.

        Raises:
            NotFoundError: If the entry doesn't exist
        """
        pass

    @abstractmethod
    async def list_costs(
        self,
        user_id: str,
        favorite: Optional[bool] = None,
        need: Optional[bool] = None,
    ) -> list[CostEntry]:
        """
        List a user's cost entries, newest first.

        Args:
            user_id: Owner to filter by (always applied)
            favorite: Only entries whose favorite flag equals this
            need: Only entries whose need flag equals this
        """
        pass

    async def set_favorite(self, cost_id: UUID, favorite: bool) -> CostEntry:
        return await self.set_tags(cost_id, favorite=favorite)

    async def set_need(self, cost_id: UUID, need: bool) -> CostEntry:
        return await self.set_tags(cost_id, need=need)


class ProfileStorageInterface(ABC):
    """Abstract interface for income profile storage. One profile per user."""

    @abstractmethod
    async def save_profile(self, profile: UserProfile) -> UserProfile:
        """Create or replace the profile for `profile.user_id`."""
        pass

    @abstractmethod
    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Return the user's profile, or None if they have not set one up."""
        pass

    @abstractmethod
    async def update_profile(self, user_id: str, update: ProfileUpdate) -> UserProfile:
        """
        Apply a partial update to a profile.

        Raises:
            NotFoundError: If the user has no profile
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """Get all events of one user action, in chronological order."""
        pass

    @abstractmethod
    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """Get all events for a specific entity, in chronological order."""
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get the most recent audit events (newest first)."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass

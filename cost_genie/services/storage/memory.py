"""
In-Memory Storage Implementation

Process-local dictionaries behind the storage interfaces. Used as the
default backend for local development and by the test suite.
Nothing survives a restart.
"""

from typing import Optional
from uuid import UUID

from cost_genie.models.audit import AuditEvent
from cost_genie.models.cost import (
    CostEntry,
    CostEntryUpdate,
    ProfileUpdate,
    UserProfile,
)
from cost_genie.services.storage.interface import (
    AuditStorageInterface,
    CostStorageInterface,
    DuplicateError,
    NotFoundError,
    ProfileStorageInterface,
)


class InMemoryCostStorage(CostStorageInterface):
    """Cost entries keyed by ID."""

    def __init__(self):
        self._costs: dict[UUID, CostEntry] = {}

    async def add_cost(self, entry: CostEntry) -> CostEntry:
        if entry.id in self._costs:
            raise DuplicateError(f"Cost already exists: {entry.id}")
        self._costs[entry.id] = entry
        return entry

    async def get_cost(self, cost_id: UUID) -> Optional[CostEntry]:
        return self._costs.get(cost_id)

    def _require(self, cost_id: UUID) -> CostEntry:
        entry = self._costs.get(cost_id)
        if entry is None:
            raise NotFoundError(f"Cost not found: {cost_id}")
        return entry

    async def update_cost(self, cost_id: UUID, update: CostEntryUpdate) -> CostEntry:
        entry = update.apply_to(self._require(cost_id))
        self._costs[cost_id] = entry
        return entry

    async def delete_cost(self, cost_id: UUID) -> bool:
        return self._costs.pop(cost_id, None) is not None

    async def set_tags(
        self,
        cost_id: UUID,
        favorite: Optional[bool] = None,
        need: Optional[bool] = None,
    ) -> CostEntry:
        update = CostEntryUpdate(favorite=favorite, need=need)
        return await self.update_cost(cost_id, update)

    async def list_costs(
        self,
        user_id: str,
        favorite: Optional[bool] = None,
        need: Optional[bool] = None,
    ) -> list[CostEntry]:
        costs = [
            entry for entry in self._costs.values()
            if entry.user_id == user_id
            and (favorite is None or entry.favorite == favorite)
            and (need is None or entry.need == need)
        ]
        costs.sort(key=lambda e: e.created_at, reverse=True)
        return costs


class InMemoryProfileStorage(ProfileStorageInterface):
    """Income profiles keyed by user ID."""

    def __init__(self):
        self._profiles: dict[str, UserProfile] = {}

    async def save_profile(self, profile: UserProfile) -> UserProfile:
        self._profiles[profile.user_id] = profile
        return profile

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        return self._profiles.get(user_id)

    async def update_profile(self, user_id: str, update: ProfileUpdate) -> UserProfile:
        profile = self._profiles.get(user_id)
        if profile is None:
            raise NotFoundError(f"Profile not found: {user_id}")
        profile = update.apply_to(profile)
        self._profiles[user_id] = profile
        return profile


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.correlation_id == correlation_id]
        return sorted(events, key=lambda e: e.timestamp)

    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        events = [
            e for e in self._events
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]
        return sorted(events, key=lambda e: e.timestamp)

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        # Append order is chronological
        return self._events[::-1][:limit]

"""
Tests for storage backends.

The in-memory backend is exercised end to end. The Google Sheets backend is
run against fake worksheets; no spreadsheet is contacted.
"""

import asyncio
import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

from cost_genie.models.audit import AuditEventBuilder
from cost_genie.models.cost import (
    CostEntry,
    CostEntryUpdate,
    Frequency,
    ProfileUpdate,
    UserProfile,
)
from cost_genie.services.storage import (
    DuplicateError,
    InMemoryAuditStorage,
    InMemoryCostStorage,
    InMemoryProfileStorage,
    NotFoundError,
    StorageError,
)


def make_entry(user_id="alice", minutes_ago=0, **fields) -> CostEntry:
    defaults = {
        "description": "Coffee",
        "amount": Decimal("4.50"),
        "frequency": Frequency.DAILY,
    }
    defaults.update(fields)
    return CostEntry(
        user_id=user_id,
        created_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
        **defaults,
    )


class TestInMemoryCostStorage:
    """Tests for the in-memory cost backend."""

    def test_add_and_get(self):
        storage = InMemoryCostStorage()
        entry = make_entry()

        asyncio.run(storage.add_cost(entry))

        assert asyncio.run(storage.get_cost(entry.id)) == entry

    def test_get_missing_returns_none(self):
        assert asyncio.run(InMemoryCostStorage().get_cost(uuid4())) is None

    def test_duplicate_rejected(self):
        storage = InMemoryCostStorage()
        entry = make_entry()
        asyncio.run(storage.add_cost(entry))

        with pytest.raises(DuplicateError):
            asyncio.run(storage.add_cost(entry))

    def test_update(self):
        storage = InMemoryCostStorage()
        entry = make_entry()
        asyncio.run(storage.add_cost(entry))

        updated = asyncio.run(storage.update_cost(
            entry.id, CostEntryUpdate(description="Latte", amount=Decimal("5")),
        ))

        assert updated.description == "Latte"
        assert asyncio.run(storage.get_cost(entry.id)).amount == Decimal("5")

    def test_update_missing_raises(self):
        with pytest.raises(NotFoundError):
            asyncio.run(InMemoryCostStorage().update_cost(uuid4(), CostEntryUpdate(amount=1)))

    def test_delete(self):
        storage = InMemoryCostStorage()
        entry = make_entry()
        asyncio.run(storage.add_cost(entry))

        assert asyncio.run(storage.delete_cost(entry.id)) is True
        assert asyncio.run(storage.delete_cost(entry.id)) is False

    def test_set_tags_leaves_unset_flag_alone(self):
        storage = InMemoryCostStorage()
        entry = make_entry(need=True)
        asyncio.run(storage.add_cost(entry))

        updated = asyncio.run(storage.set_favorite(entry.id, True))

        assert updated.favorite is True
        assert updated.need is True

    def test_list_filters_by_user_and_tag_newest_first(self):
        storage = InMemoryCostStorage()
        old_need = make_entry(minutes_ago=10, need=True)
        new_need = make_entry(minutes_ago=1, need=True)
        want = make_entry(minutes_ago=5, favorite=True)
        other_user = make_entry(user_id="bob", need=True)
        for entry in (old_need, new_need, want, other_user):
            asyncio.run(storage.add_cost(entry))

        needs = asyncio.run(storage.list_costs("alice", need=True))
        everything = asyncio.run(storage.list_costs("alice"))

        assert [e.id for e in needs] == [new_need.id, old_need.id]
        assert [e.id for e in everything] == [new_need.id, want.id, old_need.id]


class TestInMemoryProfileStorage:
    """Tests for the in-memory profile backend."""

    def test_save_and_get(self):
        storage = InMemoryProfileStorage()
        profile = UserProfile(user_id="alice", yearly_salary=Decimal("60000"))

        asyncio.run(storage.save_profile(profile))

        assert asyncio.run(storage.get_profile("alice")) == profile
        assert asyncio.run(storage.get_profile("bob")) is None

    def test_update(self):
        storage = InMemoryProfileStorage()
        asyncio.run(storage.save_profile(
            UserProfile(user_id="alice", yearly_salary=Decimal("60000"), state="Texas"),
        ))

        updated = asyncio.run(storage.update_profile("alice", ProfileUpdate(state="Oregon")))

        assert updated.state == "Oregon"
        assert updated.yearly_salary == Decimal("60000")

    def test_update_missing_raises(self):
        with pytest.raises(NotFoundError):
            asyncio.run(InMemoryProfileStorage().update_profile("bob", ProfileUpdate(state="Ohio")))


class TestInMemoryAuditStorage:
    """Tests for the in-memory audit backend."""

    def test_query_by_correlation_and_entity(self):
        storage = InMemoryAuditStorage()
        correlation_id = uuid4()
        cost_id = uuid4()
        added = AuditEventBuilder.cost_added("alice", cost_id, "Rent", "1200", "monthly", correlation_id)
        deleted = AuditEventBuilder.cost_deleted("alice", cost_id)
        other = AuditEventBuilder.profile_saved("alice", None)
        for event in (added, deleted, other):
            asyncio.run(storage.append_event(event))

        by_correlation = asyncio.run(storage.get_events_by_correlation_id(correlation_id))
        by_entity = asyncio.run(storage.get_events_by_entity("cost", str(cost_id)))
        recent = asyncio.run(storage.get_recent_events(limit=2))

        assert by_correlation == [added]
        assert by_entity == [added, deleted]
        assert len(recent) == 2


class TestGoogleSheetsRows:
    """Row conversion for the Google Sheets backend."""

    def test_cost_row_round_trip(self):
        from cost_genie.services.storage.google_sheets import (
            COST_COLUMNS,
            GoogleSheetsCostStorage,
        )

        entry = make_entry(favorite=True)
        row = GoogleSheetsCostStorage.cost_to_row(entry)

        assert len(row) == len(COST_COLUMNS)
        assert GoogleSheetsCostStorage.row_to_cost(row) == entry

    def test_profile_row_round_trip(self):
        from cost_genie.services.storage.google_sheets import GoogleSheetsProfileStorage

        profile = UserProfile(user_id="alice", yearly_salary=Decimal("72000.50"), state="Ohio")
        row = GoogleSheetsProfileStorage.profile_to_row(profile)

        assert GoogleSheetsProfileStorage.row_to_profile(row) == profile

    def test_audit_row_round_trip(self):
        from cost_genie.services.storage.google_sheets import GoogleSheetsAuditStorage

        event = AuditEventBuilder.tag_toggled("alice", uuid4(), "need", True, uuid4())
        restored = GoogleSheetsAuditStorage.row_to_event(event.to_sheets_row())

        assert restored.event_id == event.event_id
        assert restored.event_type == event.event_type
        assert restored.details == event.details
        assert restored.is_user_action is True


class FakeWorksheet:
    """In-memory stand-in for a gspread worksheet."""

    def __init__(self, header: list[str], rows: list[list[str]] = ()):
        self.rows = [list(header)] + [list(row) for row in rows]

    def get_all_values(self) -> list[list[str]]:
        return [list(row) for row in self.rows]

    def append_row(self, row, value_input_option=None):
        self.rows.append([str(cell) for cell in row])

    def update(self, range_name, values):
        idx = int(range_name.split(":")[0][1:])
        self.rows[idx - 1] = [str(cell) for cell in values[0]]

    def delete_rows(self, idx):
        del self.rows[idx - 1]


class FakeSheetsClient:
    """Serves fake worksheets in place of GoogleSheetsClient."""

    def __init__(self, costs=(), profiles=(), audit=()):
        from cost_genie.services.storage.google_sheets import (
            AUDIT_COLUMNS,
            COST_COLUMNS,
            PROFILE_COLUMNS,
        )

        self.costs = FakeWorksheet(COST_COLUMNS, costs)
        self.profiles = FakeWorksheet(PROFILE_COLUMNS, profiles)
        self.audit = FakeWorksheet(AUDIT_COLUMNS, audit)

    def get_costs_sheet(self):
        return self.costs

    def get_profiles_sheet(self):
        return self.profiles

    def get_audit_sheet(self):
        return self.audit


MALFORMED_COST_ROW = ["not-a-uuid", "alice", "x", "abc", "hourly", "True", "False", "yesterday"]


class TestGoogleSheetsStorage:
    """CRUD and query paths of the Google Sheets backend against fake worksheets."""

    def test_cost_lifecycle(self):
        from cost_genie.services.storage.google_sheets import GoogleSheetsCostStorage

        storage = GoogleSheetsCostStorage(FakeSheetsClient())
        entry = make_entry(need=True)

        asyncio.run(storage.add_cost(entry))
        tagged = asyncio.run(storage.set_tags(entry.id, favorite=True))

        assert tagged.favorite is True
        assert tagged.need is True
        assert asyncio.run(storage.get_cost(entry.id)) == tagged
        assert asyncio.run(storage.delete_cost(entry.id)) is True
        assert asyncio.run(storage.get_cost(entry.id)) is None
        assert asyncio.run(storage.delete_cost(entry.id)) is False

    def test_duplicate_rejected(self):
        from cost_genie.services.storage.google_sheets import GoogleSheetsCostStorage

        storage = GoogleSheetsCostStorage(FakeSheetsClient())
        entry = make_entry()
        asyncio.run(storage.add_cost(entry))

        with pytest.raises(DuplicateError):
            asyncio.run(storage.add_cost(entry))

    def test_list_skips_malformed_rows(self):
        from cost_genie.services.storage.google_sheets import GoogleSheetsCostStorage

        client = FakeSheetsClient(costs=[MALFORMED_COST_ROW])
        storage = GoogleSheetsCostStorage(client)
        entry = make_entry(favorite=True)
        asyncio.run(storage.add_cost(entry))

        assert asyncio.run(storage.list_costs("alice")) == [entry]
        assert asyncio.run(storage.list_costs("alice", favorite=True)) == [entry]

    def test_malformed_profile_raises_storage_error(self):
        from cost_genie.services.storage.google_sheets import GoogleSheetsProfileStorage

        client = FakeSheetsClient(profiles=[["alice", "", "lots", ""]])
        storage = GoogleSheetsProfileStorage(client)

        with pytest.raises(StorageError):
            asyncio.run(storage.get_profile("alice"))

    def test_profile_save_is_upsert(self):
        from cost_genie.services.storage.google_sheets import GoogleSheetsProfileStorage

        client = FakeSheetsClient()
        storage = GoogleSheetsProfileStorage(client)
        asyncio.run(storage.save_profile(UserProfile(user_id="alice", yearly_salary=Decimal("50000"))))

        updated = asyncio.run(storage.update_profile("alice", ProfileUpdate(state="Texas")))

        assert updated.state == "Texas"
        assert len(client.profiles.rows) == 2
        assert asyncio.run(storage.get_profile("alice")) == updated

    def test_audit_queries_skip_malformed_rows(self):
        from cost_genie.services.storage.google_sheets import GoogleSheetsAuditStorage

        client = FakeSheetsClient(audit=[["not-a-uuid", "then", "nonsense"]])
        storage = GoogleSheetsAuditStorage(client)
        event = AuditEventBuilder.cost_deleted("alice", uuid4())
        asyncio.run(storage.append_event(event))

        recent = asyncio.run(storage.get_recent_events())

        assert [e.event_id for e in recent] == [event.event_id]

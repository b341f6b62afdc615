"""
Google Sheets Storage Implementation

Stores cost entries, income profiles and the audit log as rows in three
worksheets of one spreadsheet, so users can look at their own data
directly in Sheets.

TRADEOFFS:
- Not suitable for high-volume data (fine for personal use)
- No transactions (writes are single-row)
- Limited query capabilities (we filter in Python)
- gspread is synchronous: the async methods block the event loop while
  a request is in flight
- Rows edited by hand that no longer parse are skipped when listing

Follows the abstract interfaces, so business logic does not change when
the backend does.
"""

import json
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

import gspread
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from cost_genie.config import get_settings
from cost_genie.models.audit import AuditEvent, AuditEventType, AuditSeverity
from cost_genie.models.cost import (
    CostEntry,
    CostEntryUpdate,
    Frequency,
    ProfileUpdate,
    UserProfile,
)
from cost_genie.services.storage.interface import (
    AuditStorageInterface,
    CostStorageInterface,
    DuplicateError,
    NotFoundError,
    ProfileStorageInterface,
    StorageConnectionError,
    StorageError,
)


COST_COLUMNS = [
    "id",
    "user_id",
    "description",
    "amount",
    "frequency",
    "favorite",
    "need",
    "created_at",
]

PROFILE_COLUMNS = [
    "user_id",
    "email",
    "yearly_salary",
    "state",
]

AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "user_id",
    "entity_type",
    "entity_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
    "is_user_action",
]


def _cell(row: list, index: int, default: str = "") -> str:
    """Read a cell, tolerating short rows."""
    try:
        return row[index] if row[index] else default
    except IndexError:
        return default


def _column_letter(count: int) -> str:
    """Spreadsheet column letter for a 1-based column count (<= 26)."""
    return chr(ord("A") + count - 1)


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise StorageConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise StorageConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create_sheet(self, title: str, columns: list[str], rows: int) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_costs_sheet(self) -> gspread.Worksheet:
        return self._get_or_create_sheet(
            self._settings.costs_sheet_name, COST_COLUMNS, rows=1000
        )

    def get_profiles_sheet(self) -> gspread.Worksheet:
        return self._get_or_create_sheet(
            self._settings.profiles_sheet_name, PROFILE_COLUMNS, rows=100
        )

    def get_audit_sheet(self) -> gspread.Worksheet:
        return self._get_or_create_sheet(
            self._settings.audit_sheet_name, AUDIT_COLUMNS, rows=5000
        )


class GoogleSheetsCostStorage(CostStorageInterface):
    """
    Google Sheets implementation of cost storage.

    One cost entry per row, identified by the `id` column.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    @staticmethod
    def cost_to_row(entry: CostEntry) -> list:
        """Convert a CostEntry to a spreadsheet row."""
        return [
            str(entry.id),
            entry.user_id,
            entry.description,
            str(entry.amount),
            entry.frequency.value,
            str(entry.favorite),
            str(entry.need),
            entry.created_at.isoformat(),
        ]

    @staticmethod
    def row_to_cost(row: list) -> CostEntry:
        """Convert a spreadsheet row to a CostEntry."""
        return CostEntry(
            id=UUID(_cell(row, 0)),
            user_id=_cell(row, 1),
            description=_cell(row, 2),
            amount=Decimal(_cell(row, 3, "0")),
            frequency=Frequency(_cell(row, 4)),
            favorite=_cell(row, 5).lower() == "true",
            need=_cell(row, 6).lower() == "true",
            created_at=datetime.fromisoformat(_cell(row, 7)),
        )

    def _find_row(self, sheet: gspread.Worksheet, cost_id: UUID) -> tuple[int, list]:
        """Return (1-based sheet row index, row values) for a cost ID."""
        all_rows = sheet.get_all_values()
        for idx, row in enumerate(all_rows[1:], start=2):  # row 1 is the header
            if row and row[0] == str(cost_id):
                return idx, row
        raise NotFoundError(f"Cost not found: {cost_id}")

    def _write_row(self, sheet: gspread.Worksheet, idx: int, entry: CostEntry) -> None:
        last = _column_letter(len(COST_COLUMNS))
        sheet.update(
            range_name=f"A{idx}:{last}{idx}",
            values=[self.cost_to_row(entry)],
        )

    @retry(
        retry=retry_if_not_exception_type(DuplicateError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def add_cost(self, entry: CostEntry) -> CostEntry:
        """Append a cost entry to the sheet."""
        if await self.get_cost(entry.id) is not None:
            raise DuplicateError(f"Cost already exists: {entry.id}")
        try:
            sheet = self._client.get_costs_sheet()
            sheet.append_row(self.cost_to_row(entry), value_input_option="RAW")
            return entry
        except Exception as e:
            raise StorageError(f"Failed to save cost: {e}")

    async def get_cost(self, cost_id: UUID) -> Optional[CostEntry]:
        try:
            sheet = self._client.get_costs_sheet()
            for row in sheet.get_all_values()[1:]:
                if row and row[0] == str(cost_id):
                    return self.row_to_cost(row)
            return None
        except Exception as e:
            raise StorageError(f"Failed to get cost: {e}")

    async def update_cost(self, cost_id: UUID, update: CostEntryUpdate) -> CostEntry:
        try:
            sheet = self._client.get_costs_sheet()
            idx, row = self._find_row(sheet, cost_id)
            entry = update.apply_to(self.row_to_cost(row))
            self._write_row(sheet, idx, entry)
            return entry
        except NotFoundError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update cost: {e}")

    async def delete_cost(self, cost_id: UUID) -> bool:
        try:
            sheet = self._client.get_costs_sheet()
            idx, _ = self._find_row(sheet, cost_id)
            sheet.delete_rows(idx)
            return True
        except NotFoundError:
            return False
        except Exception as e:
            raise StorageError(f"Failed to delete cost: {e}")

    async def set_tags(
        self,
        cost_id: UUID,
        favorite: Optional[bool] = None,
        need: Optional[bool] = None,
    ) -> CostEntry:
        return await self.update_cost(
            cost_id, CostEntryUpdate(favorite=favorite, need=need)
        )

    async def list_costs(
        self,
        user_id: str,
        favorite: Optional[bool] = None,
        need: Optional[bool] = None,
    ) -> list[CostEntry]:
        try:
            sheet = self._client.get_costs_sheet()
            all_rows = sheet.get_all_values()[1:]  # Skip header
        except Exception as e:
            raise StorageError(f"Failed to list costs: {e}")

        costs = []
        for row in all_rows:
            if not row or not row[0] or _cell(row, 1) != user_id:
                continue

            try:
                entry = self.row_to_cost(row)
            except Exception:
                continue  # Skip malformed rows

            if favorite is not None and entry.favorite != favorite:
                continue
            if need is not None and entry.need != need:
                continue
            costs.append(entry)

        # Newest first
        costs.sort(key=lambda e: e.created_at, reverse=True)
        return costs


class GoogleSheetsProfileStorage(ProfileStorageInterface):
    """Google Sheets implementation of income profile storage."""

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    @staticmethod
    def profile_to_row(profile: UserProfile) -> list:
        return [
            profile.user_id,
            profile.email or "",
            str(profile.yearly_salary),
            profile.state or "",
        ]

    @staticmethod
    def row_to_profile(row: list) -> UserProfile:
        return UserProfile(
            user_id=_cell(row, 0),
            email=_cell(row, 1) or None,
            yearly_salary=Decimal(_cell(row, 2)),
            state=_cell(row, 3) or None,
        )

    def _find_row(self, sheet: gspread.Worksheet, user_id: str) -> Optional[tuple[int, list]]:
        for idx, row in enumerate(sheet.get_all_values()[1:], start=2):
            if row and row[0] == user_id:
                return idx, row
        return None

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def save_profile(self, profile: UserProfile) -> UserProfile:
        try:
            sheet = self._client.get_profiles_sheet()
            found = self._find_row(sheet, profile.user_id)
            if found is None:
                sheet.append_row(self.profile_to_row(profile), value_input_option="RAW")
            else:
                idx, _ = found
                last = _column_letter(len(PROFILE_COLUMNS))
                sheet.update(
                    range_name=f"A{idx}:{last}{idx}",
                    values=[self.profile_to_row(profile)],
                )
            return profile
        except Exception as e:
            raise StorageError(f"Failed to save profile: {e}")

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        try:
            sheet = self._client.get_profiles_sheet()
            found = self._find_row(sheet, user_id)
        except Exception as e:
            raise StorageError(f"Failed to get profile: {e}")
        if found is None:
            return None
        try:
            return self.row_to_profile(found[1])
        except Exception as e:
            raise StorageError(f"Malformed profile row for {user_id}: {e}")

    async def update_profile(self, user_id: str, update: ProfileUpdate) -> UserProfile:
        profile = await self.get_profile(user_id)
        if profile is None:
            raise NotFoundError(f"Profile not found: {user_id}")
        return await self.save_profile(update.apply_to(profile))


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    @staticmethod
    def row_to_event(row: list) -> AuditEvent:
        """Convert a spreadsheet row to an AuditEvent."""
        return AuditEvent(
            event_id=UUID(_cell(row, 0)),
            timestamp=datetime.fromisoformat(_cell(row, 1)),
            event_type=AuditEventType(_cell(row, 2)),
            severity=AuditSeverity(_cell(row, 3)),
            user_id=_cell(row, 4) or None,
            entity_type=_cell(row, 5) or None,
            entity_id=_cell(row, 6) or None,
            correlation_id=UUID(_cell(row, 7)) if _cell(row, 7) else None,
            description=_cell(row, 8),
            details=json.loads(_cell(row, 9)) if _cell(row, 9) else {},
            error_message=_cell(row, 10) or None,
            is_user_action=_cell(row, 11).lower() == "true",
        )

    def _load_events(self) -> list[AuditEvent]:
        try:
            all_rows = self._client.get_audit_sheet().get_all_values()[1:]
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}")

        events = []
        for row in all_rows:
            if not row or not row[0]:  # Skip empty rows
                continue
            try:
                events.append(self.row_to_event(row))
            except Exception:
                continue  # Skip malformed rows
        return events

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        try:
            sheet = self._client.get_audit_sheet()
            sheet.append_row(event.to_sheets_row(), value_input_option="RAW")
            return True
        except Exception as e:
            raise StorageError(f"Failed to write audit event: {e}")

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._load_events() if e.correlation_id == correlation_id]
        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        events = [
            e for e in self._load_events()
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        events = self._load_events()
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]

# ============================================================================
# SHARED TEST FIXTURES
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Tests - In-memory fakes for repositories and history
# PURPOSE: Let recorder/dispatcher/service tests run without Postgres or Redis
# CREATED: 12 OCT 2026
# ============================================================================
"""
Shared fixtures.

FakeHealthRepo and FakeHistoryStore implement the subset of the
repository/history APIs used by the health engine, backed by dicts.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple
from uuid import UUID, uuid4

import pytest

from core.contracts import IntegrationType
from core.models.health import HealthHistoryEntry, IntegrationHealthRecord
from health.alerts import AlertSink, HealthAlert


WORKSPACE_ID = UUID("11111111-2222-3333-4444-555555555555")
FIXED_NOW = datetime(2026, 10, 12, 12, 0, 0, tzinfo=timezone.utc)

# 64 hex chars = 32 byte master key
TEST_ENCRYPTION_KEY = "0123456789abcdef" * 4


class FakeHealthRepo:
    """Dict-backed HealthRecordRepository."""

    def __init__(self):
        self.records: Dict[Tuple[UUID, IntegrationType], IntegrationHealthRecord] = {}
        self.upserts = 0

    def seed(self, record: IntegrationHealthRecord) -> IntegrationHealthRecord:
        self.records[(record.workspace_id, record.integration_type)] = record.model_copy(deep=True)
        return record

    async def get(self, workspace_id, integration_type) -> Optional[IntegrationHealthRecord]:
        record = self.records.get((workspace_id, IntegrationType(integration_type)))
        return record.model_copy(deep=True) if record else None

    async def list_for_workspace(self, workspace_id) -> List[IntegrationHealthRecord]:
        return [
            r.model_copy(deep=True)
            for (ws, _), r in self.records.items()
            if ws == workspace_id
        ]

    async def upsert(self, record: IntegrationHealthRecord) -> IntegrationHealthRecord:
        self.upserts += 1
        key = (record.workspace_id, record.integration_type)
        existing = self.records.get(key)
        stored = record.model_copy(deep=True)
        if existing is not None:
            stored.id = existing.id
            stored.created_at = existing.created_at
        self.records[key] = stored
        return stored.model_copy(deep=True)


class FakeHistoryStore:
    """Dict-backed HealthHistoryStore. Set fail=True to simulate Redis being down."""

    def __init__(self):
        self.entries: Dict[str, List[Tuple[int, HealthHistoryEntry]]] = {}
        self.fail = False

    def key(self, workspace_id, integration_type) -> str:
        return f"integration-health:history:{workspace_id}:{IntegrationType(integration_type).value}"

    def _check(self):
        if self.fail:
            raise ConnectionError("redis unavailable")

    def _bucket(self, workspace_id, integration_type):
        return self.entries.setdefault(self.key(workspace_id, integration_type), [])

    async def append(self, workspace_id, integration_type, entry, score_ms):
        self._check()
        bucket = self._bucket(workspace_id, integration_type)
        bucket.append((score_ms, entry))
        bucket.sort(key=lambda item: item[0])

    async def range_since(self, workspace_id, integration_type, min_score_ms):
        self._check()
        return [e for s, e in self._bucket(workspace_id, integration_type) if s >= min_score_ms]

    async def latest(self, workspace_id, integration_type, limit):
        self._check()
        bucket = self._bucket(workspace_id, integration_type)
        return [e for _, e in reversed(bucket)][:limit]

    async def prune_before(self, workspace_id, integration_type, cutoff_ms):
        self._check()
        bucket = self._bucket(workspace_id, integration_type)
        kept = [(s, e) for s, e in bucket if s >= cutoff_ms]
        removed = len(bucket) - len(kept)
        bucket[:] = kept
        return removed

    async def trim(self, workspace_id, integration_type, max_entries):
        self._check()
        bucket = self._bucket(workspace_id, integration_type)
        removed = max(0, len(bucket) - max_entries)
        del bucket[:removed]
        return removed


class RecordingAlertSink(AlertSink):
    """Keeps emitted alerts in a list."""

    def __init__(self):
        self.alerts: List[HealthAlert] = []

    async def emit(self, alert: HealthAlert) -> None:
        self.alerts.append(alert)


class SteppingClock:
    """Clock that starts at FIXED_NOW and can be advanced by tests."""

    def __init__(self, start: datetime = FIXED_NOW):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_record(
    integration_type: IntegrationType = IntegrationType.SLACK,
    status: str = "healthy",
    workspace_id: UUID = WORKSPACE_ID,
    **overrides,
) -> IntegrationHealthRecord:
    """Create a test IntegrationHealthRecord."""
    return IntegrationHealthRecord(
        workspace_id=workspace_id,
        integration_type=integration_type,
        integration_id=overrides.pop("integration_id", uuid4()),
        status=status,
        checked_at=FIXED_NOW,
        created_at=FIXED_NOW,
        updated_at=FIXED_NOW,
        **overrides,
    )


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def health_repo():
    return FakeHealthRepo()


@pytest.fixture
def history_store():
    return FakeHistoryStore()


@pytest.fixture
def alert_sink():
    return RecordingAlertSink()


@pytest.fixture
def clock():
    return SteppingClock()

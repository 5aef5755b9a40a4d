# ============================================================================
# HEALTH HISTORY STORE TESTS
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Tests - Redis sorted-set history
# PURPOSE: Verify key layout, Redis commands and entry parsing
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health History Store Tests

The Redis client is an AsyncMock; assertions are on the commands issued.

Run with:
    pytest tests/test_history_store.py -v
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from core.contracts import IntegrationHealthStatus, IntegrationType
from core.models.health import HealthHistoryEntry
from repositories.history_store import HealthHistoryStore

from conftest import WORKSPACE_ID


KEY = f"integration-health:history:{WORKSPACE_ID}:slack"


@pytest.fixture
def redis_client():
    return AsyncMock()


@pytest.fixture
def store(redis_client):
    return HealthHistoryStore(redis_client)


class TestHistoryStore:

    def test_key_layout(self, store):
        assert store.key(WORKSPACE_ID, IntegrationType.SLACK) == KEY
        assert store.key(str(WORKSPACE_ID), "slack") == KEY

    def test_append_zadd_with_camel_case_member(self, store, redis_client):
        entry = HealthHistoryEntry(
            timestamp="2026-10-12T12:00:00.000Z",
            status=IntegrationHealthStatus.HEALTHY,
            response_time_ms=45,
        )

        asyncio.run(store.append(WORKSPACE_ID, IntegrationType.SLACK, entry, 1760270400000))

        key, mapping = redis_client.zadd.await_args.args
        assert key == KEY
        (member, score), = mapping.items()
        assert score == 1760270400000
        assert json.loads(member) == {
            "timestamp": "2026-10-12T12:00:00.000Z",
            "status": "healthy",
            "responseTimeMs": 45,
        }

    def test_latest_uses_zrevrange_and_skips_garbage(self, store, redis_client):
        redis_client.zrevrange.return_value = [
            '{"timestamp":"t2","status":"unhealthy","responseTimeMs":10,"error":"x"}',
            "not json",
            '{"timestamp":"t1","status":"bogus","responseTimeMs":5}',
            '{"timestamp":"t0","status":"healthy","responseTimeMs":3}',
        ]

        entries = asyncio.run(store.latest(WORKSPACE_ID, IntegrationType.SLACK, 50))

        redis_client.zrevrange.assert_awaited_once_with(KEY, 0, 49)
        assert [e.timestamp for e in entries] == ["t2", "t0"]
        assert entries[0].error == "x"

    def test_range_since(self, store, redis_client):
        redis_client.zrangebyscore.return_value = []
        asyncio.run(store.range_since(WORKSPACE_ID, IntegrationType.SLACK, 1000))
        redis_client.zrangebyscore.assert_awaited_once_with(KEY, 1000, "+inf")

    def test_prune_before_is_exclusive(self, store, redis_client):
        redis_client.zremrangebyscore.return_value = 3
        removed = asyncio.run(store.prune_before(WORKSPACE_ID, IntegrationType.SLACK, 5000))
        redis_client.zremrangebyscore.assert_awaited_once_with(KEY, "-inf", "(5000")
        assert removed == 3

    def test_trim_keeps_newest(self, store, redis_client):
        redis_client.zremrangebyrank.return_value = 0
        asyncio.run(store.trim(WORKSPACE_ID, IntegrationType.SLACK, 8640))
        redis_client.zremrangebyrank.assert_awaited_once_with(KEY, 0, -8641)

    def test_redis_errors_propagate(self, store, redis_client):
        redis_client.zrevrange.side_effect = ConnectionError("down")
        with pytest.raises(ConnectionError):
            asyncio.run(store.latest(WORKSPACE_ID, IntegrationType.SLACK, 10))

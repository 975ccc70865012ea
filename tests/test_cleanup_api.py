"""HTTP contract of the cleanup trigger."""
from datetime import datetime, timezone

import pytest
from httpx import AsyncClient

from jobsweep.services.sweep_service import SweepOutcome
from tests.conftest import add_link, add_posting, add_search_term, days

pytestmark = pytest.mark.asyncio

CLEANUP_URL = "/api/v1/cleanup-jobs"


def _assert_cors(response):
    assert response.headers["access-control-allow-origin"] == "*"
    assert "content-type" in response.headers["access-control-allow-headers"]


class TestCleanupEndpoint:
    async def test_returns_summary(self, client: AsyncClient, db_session):
        now = datetime.now(timezone.utc)
        await add_posting(db_session, now - days(1))
        live = await add_posting(db_session, now + days(1))
        await add_posting(db_session, now + days(10))
        await add_search_term(db_session, "cobol", now - days(70))
        linked = await add_search_term(db_session, "python", now - days(70))
        await add_link(db_session, live, linked)

        response = await client.post(CLEANUP_URL)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        _assert_cors(response)
        assert response.json() == {
            "success": True,
            "deletedExpiredJobs": 1,
            "resetStaleSearchTerms": 0,
            "deletedOrphanedTerms": 1,
            "oldCacheDeleted": 0,
            "currentStats": {"totalJobs": 2, "totalSearchTerms": 1, "totalLinks": 1},
        }

    async def test_empty_store_reports_zeros(self, client: AsyncClient):
        response = await client.get(CLEANUP_URL)

        assert response.status_code == 200
        data = response.json()
        assert data["deletedExpiredJobs"] == 0
        assert data["currentStats"] == {"totalJobs": 0, "totalSearchTerms": 0, "totalLinks": 0}

    async def test_fatal_failure_returns_message(self, client: AsyncClient, monkeypatch):
        async def failing_sweep(*args, **kwargs):
            return SweepOutcome(error="delete from jobs failed: permission denied")

        monkeypatch.setattr("jobsweep.routers.cleanup.run_sweep", failing_sweep)

        response = await client.post(CLEANUP_URL)

        assert response.status_code == 500
        assert response.json() == {"message": "delete from jobs failed: permission denied"}
        _assert_cors(response)

    async def test_preflight_has_no_body(self, client: AsyncClient):
        response = await client.options(
            CLEANUP_URL,
            headers={"Origin": "https://app.example.com", "Access-Control-Request-Method": "POST"},
        )

        assert response.status_code == 200
        assert response.content == b""
        _assert_cors(response)


class TestHealth:
    async def test_health_ok(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        _assert_cors(response)

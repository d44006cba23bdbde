"""Tests for the health endpoint and health checks."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from aiohttp.test_utils import TestClient, TestServer

from sentinel_bot.adapters.github import GitHubAPIError
from sentinel_bot.config.schema import BotConfig, DiscordConfig, GitHubConfig
from sentinel_bot.utils.health import (
    STATUS_MESSAGE,
    CheckResult,
    HealthChecker,
    HealthReport,
    HealthServer,
    HealthStatus,
    create_health_app,
)


@pytest.fixture
def config() -> BotConfig:
    return BotConfig(
        discord=DiscordConfig(token="discord-test-token", client_id=111, guild_id=222),
        github=GitHubConfig(token="ghp_test"),
        environment="test",
    )


@pytest.fixture
def github() -> AsyncMock:
    stub = AsyncMock()
    stub.get_rate_limit.return_value = {"limit": 5000, "remaining": 4999}
    return stub


class TestHealthEndpoint:
    """Tests for the liveness app."""

    @pytest.mark.parametrize(
        ("method", "path"), [("GET", "/"), ("GET", "/healthz"), ("POST", "/x/y")]
    )
    async def test_any_request_answers_ok(self, method: str, path: str) -> None:
        """Test every method and path gets the same status object."""
        async with TestClient(TestServer(create_health_app("production"))) as client:
            resp = await client.request(method, path)
            assert resp.status == 200
            data = await resp.json()

        assert data == {"status": "ok", "message": STATUS_MESSAGE, "environment": "production"}

    async def test_server_start_stop(self) -> None:
        """Test the server can be started and stopped twice safely."""
        server = HealthServer("127.0.0.1", 0, environment="test")

        await server.start()
        await server.start()
        await server.stop()
        await server.stop()


class TestHealthReport:
    """Tests for HealthReport."""

    def test_to_dict(self) -> None:
        timestamp = datetime(2026, 2, 4, 12, 0, 0, tzinfo=UTC)
        report = HealthReport(
            healthy=True,
            status=HealthStatus.DEGRADED,
            timestamp=timestamp,
            checks=[
                CheckResult(
                    name="github_credentials",
                    status=HealthStatus.DEGRADED,
                    message="No token",
                )
            ],
            details={"environment": "test"},
        )

        result = report.to_dict()

        assert result["status"] == "degraded"
        assert result["timestamp"] == "2026-02-04T12:00:00+00:00"
        assert result["checks"][0] == {
            "name": "github_credentials",
            "status": "degraded",
            "message": "No token",
            "latency_ms": None,
            "details": {},
        }


class TestHealthChecker:
    """Tests for HealthChecker."""

    async def test_all_healthy(self, config: BotConfig, github: AsyncMock) -> None:
        report = await HealthChecker(config, github).run_all_checks()

        assert report.healthy is True
        assert report.status == HealthStatus.HEALTHY
        assert [c.name for c in report.checks] == [
            "discord_config",
            "github_credentials",
            "github_api",
        ]
        assert report.details["environment"] == "test"
        github.close.assert_not_awaited()

    async def test_missing_token_degrades(self, config: BotConfig, github: AsyncMock) -> None:
        """Test a read-only deployment is degraded but still healthy."""
        config.github = GitHubConfig(token=None)

        report = await HealthChecker(config, github).run_all_checks()

        assert report.healthy is True
        assert report.status == HealthStatus.DEGRADED

    async def test_api_failure_unhealthy(self, config: BotConfig, github: AsyncMock) -> None:
        github.get_rate_limit.side_effect = GitHubAPIError("Bad credentials", status=401)

        report = await HealthChecker(config, github).run_all_checks()

        assert report.healthy is False
        assert report.status == HealthStatus.UNHEALTHY
        api = report.checks[2]
        assert api.status == HealthStatus.UNHEALTHY
        assert "Bad credentials" in api.message

    async def test_rate_limit_exhausted(self, config: BotConfig, github: AsyncMock) -> None:
        github.get_rate_limit.return_value = {"limit": 60, "remaining": 0}

        report = await HealthChecker(config, github).run_all_checks()

        assert report.checks[2].status == HealthStatus.DEGRADED
        assert report.checks[2].details == {"limit": 60, "remaining": 0}

    async def test_unexpected_exception(self, config: BotConfig, github: AsyncMock) -> None:
        github.get_rate_limit.side_effect = RuntimeError("boom")

        report = await HealthChecker(config, github).run_all_checks()

        assert report.healthy is False
        assert report.checks[2].name == "unknown"

"""Health endpoint and health checks.

This module provides two things:
- HealthServer: the liveness endpoint, answering every request with a
  fixed JSON status object
- HealthChecker: an on-demand check of configuration and GitHub
  reachability, used by ``--health-check``
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import structlog
from aiohttp import web

if TYPE_CHECKING:
    from sentinel_bot.adapters.github import GitHubClient
    from sentinel_bot.config.schema import BotConfig

log = structlog.get_logger()

STATUS_MESSAGE = "Sentinel is running"


def create_health_app(environment: str) -> web.Application:
    """Build the aiohttp app that answers any method on any path."""
    body = {"status": "ok", "message": STATUS_MESSAGE, "environment": environment}

    async def status(_request: web.Request) -> web.Response:
        return web.json_response(body)

    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", status)
    return app


class HealthServer:
    """Runs the health app on a TCP port alongside the bot.

    Example:
        server = HealthServer("0.0.0.0", 8080, environment="production")
        await server.start()
        ...
        await server.stop()
    """

    def __init__(self, host: str, port: int, environment: str) -> None:
        self._host = host
        self._port = port
        self._app = create_health_app(environment)
        self._runner: web.AppRunner | None = None

    @property
    def app(self) -> web.Application:
        return self._app

    async def start(self) -> None:
        if self._runner is not None:
            return

        self._runner = web.AppRunner(self._app, access_log=None)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._host, self._port)
        await site.start()
        log.info("health_server_started", host=self._host, port=self._port)

    async def stop(self) -> None:
        if self._runner is None:
            return

        await self._runner.cleanup()
        self._runner = None
        log.info("health_server_stopped")


class HealthStatus(StrEnum):
    """Health check status values."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class CheckResult:
    """Result of a single health check."""

    name: str
    status: HealthStatus
    message: str
    latency_ms: float | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class HealthReport:
    """Overall health report."""

    healthy: bool
    status: HealthStatus
    timestamp: datetime
    checks: list[CheckResult]
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "healthy": self.healthy,
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
            "checks": [
                {
                    "name": c.name,
                    "status": c.status.value,
                    "message": c.message,
                    "latency_ms": c.latency_ms,
                    "details": c.details,
                }
                for c in self.checks
            ],
            "details": self.details,
        }


class HealthChecker:
    """Checks the bot's configuration and its GitHub connectivity.

    A missing GitHub token is DEGRADED rather than UNHEALTHY: the bot
    still serves read-only commands without one.

    Example:
        checker = HealthChecker(config)
        report = await checker.run_all_checks()
        if not report.healthy:
            print(report.to_dict())
    """

    def __init__(self, config: BotConfig, github: GitHubClient | None = None) -> None:
        """Initialize the health checker.

        Args:
            config: Application configuration
            github: Client used for the connectivity check; one is
                created (and closed) per run when omitted
        """
        self._config = config
        self._github = github

    async def run_all_checks(self) -> HealthReport:
        """Run all health checks and return a report."""
        log.info("health_check_start")
        start_time = datetime.now(UTC)

        results = await asyncio.gather(
            self._check_discord_config(),
            self._check_github_credentials(),
            self._check_github_api(),
            return_exceptions=True,
        )

        checks: list[CheckResult] = []
        for result in results:
            if isinstance(result, BaseException):
                checks.append(
                    CheckResult(
                        name="unknown",
                        status=HealthStatus.UNHEALTHY,
                        message=f"Check failed with exception: {result}",
                    )
                )
            else:
                checks.append(result)

        if all(c.status == HealthStatus.HEALTHY for c in checks):
            overall_status = HealthStatus.HEALTHY
            healthy = True
        elif any(c.status == HealthStatus.UNHEALTHY for c in checks):
            overall_status = HealthStatus.UNHEALTHY
            healthy = False
        else:
            overall_status = HealthStatus.DEGRADED
            healthy = True

        report = HealthReport(
            healthy=healthy,
            status=overall_status,
            timestamp=start_time,
            checks=checks,
            details={
                "environment": self._config.environment,
                "total_checks": len(checks),
                "healthy_checks": sum(1 for c in checks if c.status == HealthStatus.HEALTHY),
                "degraded_checks": sum(1 for c in checks if c.status == HealthStatus.DEGRADED),
                "unhealthy_checks": sum(1 for c in checks if c.status == HealthStatus.UNHEALTHY),
            },
        )

        log.info(
            "health_check_complete",
            healthy=healthy,
            status=overall_status.value,
            checks_run=len(checks),
        )
        return report

    async def _check_discord_config(self) -> CheckResult:
        """Check the Discord settings are present (not that the token is valid)."""
        discord_config = self._config.discord
        if not discord_config.token:
            return CheckResult(
                name="discord_config",
                status=HealthStatus.UNHEALTHY,
                message="Discord bot token not configured",
            )

        return CheckResult(
            name="discord_config",
            status=HealthStatus.HEALTHY,
            message="Discord configured",
            details={
                "client_id": discord_config.client_id,
                "guild_id": discord_config.guild_id,
            },
        )

    async def _check_github_credentials(self) -> CheckResult:
        if self._config.github.token is None:
            return CheckResult(
                name="github_credentials",
                status=HealthStatus.DEGRADED,
                message="No GitHub token configured; mutating commands are disabled",
            )

        return CheckResult(
            name="github_credentials",
            status=HealthStatus.HEALTHY,
            message="GitHub token configured",
        )

    async def _check_github_api(self) -> CheckResult:
        """Check the GitHub API answers, reporting the remaining rate limit."""
        from sentinel_bot.adapters.github import GitHubAPIError, GitHubClient

        github = self._github or GitHubClient(self._config.github)
        start = time.monotonic()

        try:
            rate = await github.get_rate_limit()
        except GitHubAPIError as e:
            return CheckResult(
                name="github_api",
                status=HealthStatus.UNHEALTHY,
                message=f"GitHub API check failed: {e}",
                latency_ms=(time.monotonic() - start) * 1000,
            )
        finally:
            if self._github is None:
                await github.close()

        latency = (time.monotonic() - start) * 1000
        remaining = rate.get("remaining")
        status = HealthStatus.DEGRADED if remaining == 0 else HealthStatus.HEALTHY

        return CheckResult(
            name="github_api",
            status=status,
            message="GitHub API reachable"
            if status == HealthStatus.HEALTHY
            else "GitHub API rate limit exhausted",
            latency_ms=latency,
            details={"limit": rate.get("limit"), "remaining": remaining},
        )

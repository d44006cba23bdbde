"""Bot orchestrator that coordinates all components.

This module implements the Bot class, the runtime entry point. It:
- Registers command definitions with the chat provider and connects it
- Runs one task per incoming interaction, so handlers execute concurrently
- Serves the health endpoint
- Handles graceful shutdown on signals (SIGTERM, SIGINT)
"""

from __future__ import annotations

import asyncio
import contextlib
import signal
from typing import TYPE_CHECKING

import structlog

from .dispatcher import Dispatcher
from .registry import CommandRegistry, build_registry

if TYPE_CHECKING:
    from ..adapters.github import GitHubClient
    from ..config.schema import BotConfig
    from ..interfaces.chat import ChatProvider
    from ..utils.health import HealthServer
    from .interaction import InteractionRequest

log = structlog.get_logger()


class BotError(Exception):
    """Base exception for bot errors."""


class StartupError(BotError):
    """Failed to start the bot."""


class Bot:
    """Main orchestrator that coordinates all components.

    There is no concurrency limit: interactions are independent and
    each one only awaits its own network calls.

    Example:
        bot = Bot(config, chat, github, registry)
        await bot.start()  # Blocks until shutdown signal
    """

    DEFAULT_SHUTDOWN_TIMEOUT = 30

    def __init__(
        self,
        config: BotConfig,
        chat: ChatProvider,
        github: GitHubClient,
        registry: CommandRegistry,
        health_server: HealthServer | None = None,
    ) -> None:
        """Initialize the Bot.

        Args:
            config: Application configuration
            chat: Chat provider adapter
            github: GitHub REST client shared by all handlers
            registry: Frozen command registry
            health_server: Health endpoint to run alongside, if enabled
        """
        self._config = config
        self._chat = chat
        self._github = github
        self._registry = registry
        self._health_server = health_server
        self._dispatcher = Dispatcher(registry, github)

        self._active_tasks: set[asyncio.Task[None]] = set()

        # Lifecycle state
        self._running = False
        self._shutdown_event: asyncio.Event | None = None
        self._stopped_event: asyncio.Event | None = None
        self._listen_task: asyncio.Task[None] | None = None

        self._interactions_handled = 0

    @property
    def is_running(self) -> bool:
        """Return True if the bot is currently running."""
        return self._running

    @property
    def stats(self) -> dict[str, int]:
        return {
            "interactions_handled": self._interactions_handled,
            "active_tasks": len(self._active_tasks),
        }

    async def start(self) -> None:
        """Start the bot and block until shutdown.

        Raises:
            StartupError: If startup fails
        """
        if self._running:
            log.warning("bot_already_running")
            return

        log.info(
            "bot_starting",
            environment=self._config.environment,
            commands=[d.name for d in self._registry.definitions],
        )

        shutdown_event = self._shutdown_event = asyncio.Event()
        stopped_event = self._stopped_event = asyncio.Event()

        try:
            if self._health_server is not None:
                await self._health_server.start()

            self._chat.register_commands(self._registry.definitions)
            log.info("connecting_to_chat_provider")
            await self._chat.connect()
            log.info("chat_provider_connected")

            self._setup_signal_handlers()

            self._running = True
            log.info("bot_started")

            self._listen_task = asyncio.create_task(
                self._listen_for_interactions(), name="listen_for_interactions"
            )
            await self._listen_task

        except asyncio.CancelledError:
            log.info("bot_listener_stopped")
        except Exception as e:
            log.exception("bot_startup_failed", error=str(e))
            await self._cleanup()
            self._running = False
            raise StartupError(f"Failed to start bot: {e}") from e

        # The listener also ends when stop() cancels it; return only once
        # stop() has released every resource.
        if shutdown_event.is_set():
            await stopped_event.wait()
        else:
            await self.stop()

    async def stop(self) -> None:
        """Gracefully stop the bot.

        Stops accepting interactions, waits for in-flight handlers (with
        timeout), then disconnects and releases resources.
        """
        if not self._running:
            log.warning("bot_not_running")
            return

        if self._shutdown_event and self._shutdown_event.is_set():
            log.debug("bot_already_stopping")
            if self._stopped_event:
                await self._stopped_event.wait()
            return

        log.info("bot_stopping", active_tasks=len(self._active_tasks))

        if self._shutdown_event:
            self._shutdown_event.set()

        await self._wait_for_tasks()
        await self._cleanup()

        self._running = False
        if self._stopped_event:
            self._stopped_event.set()
        log.info("bot_stopped", interactions_handled=self._interactions_handled)

    async def handle_interaction(self, request: InteractionRequest) -> None:
        """Dispatch a single interaction."""
        await self._dispatcher.dispatch(request)
        self._interactions_handled += 1

    async def _listen_for_interactions(self) -> None:
        log.info("starting_interaction_listener")

        try:
            async for request in self._chat.listen():
                if self._shutdown_event and self._shutdown_event.is_set():
                    log.info("shutdown_signal_received_stopping_listener")
                    break

                task = asyncio.create_task(
                    self.handle_interaction(request),
                    name=f"interaction_{request.interaction_id}",
                )
                self._active_tasks.add(task)
                task.add_done_callback(self._active_tasks.discard)

        except asyncio.CancelledError:
            log.info("interaction_listener_cancelled")
        except Exception as e:
            log.exception("interaction_listener_error", error=str(e))
            raise

    async def _wait_for_tasks(self) -> None:
        """Wait for active tasks to complete with timeout."""
        if not self._active_tasks:
            return

        log.info("waiting_for_active_tasks", count=len(self._active_tasks))

        done, pending = await asyncio.wait(
            set(self._active_tasks),
            timeout=self.DEFAULT_SHUTDOWN_TIMEOUT,
        )

        if pending:
            log.warning("cancelling_pending_tasks", count=len(pending))
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        log.info("tasks_completed", completed=len(done), cancelled=len(pending))

    async def _cleanup(self) -> None:
        """Clean up resources."""
        log.debug("cleaning_up_resources")

        if self._listen_task and not self._listen_task.done():
            self._listen_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._listen_task

        try:
            await self._chat.disconnect()
            log.info("chat_provider_disconnected")
        except Exception as e:
            log.warning("chat_disconnect_error", error=str(e))

        await self._github.close()

        if self._health_server is not None:
            await self._health_server.stop()

        self._active_tasks.clear()

    def _setup_signal_handlers(self) -> None:
        """Set up signal handlers for graceful shutdown."""
        loop = asyncio.get_running_loop()

        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(
                sig,
                lambda s: asyncio.create_task(self._handle_signal(s)),
                sig,
            )
            log.debug("signal_handler_registered", signal=sig.name)

    async def _handle_signal(self, sig: signal.Signals) -> None:
        log.info("received_signal", signal=sig.name)
        await self.stop()


def create_bot(config: BotConfig) -> Bot:
    """Factory function to create a Bot with all dependencies.

    Args:
        config: Application configuration

    Returns:
        Configured Bot instance
    """
    from ..adapters.discord import DiscordAdapter
    from ..adapters.github import GitHubClient
    from ..utils.health import HealthServer
    from ..utils.security import mask_secret

    registry = build_registry()
    chat = DiscordAdapter(config.discord)
    github = GitHubClient(config.github)

    health_server = None
    if config.health.enabled:
        health_server = HealthServer(
            config.health.host, config.health.port, environment=config.environment
        )

    log.info(
        "bot_created",
        github_write_access=github.has_write_credentials,
        github_token=mask_secret(config.github.token),
        health_enabled=config.health.enabled,
    )
    return Bot(config, chat, github, registry, health_server)

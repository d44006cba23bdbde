"""Entry point for running Sentinel.

This module handles:
- Configuration loading (environment or YAML file)
- Logging setup with secret sanitization
- Dry-run validation and on-demand health checks
- Bot lifecycle management
"""

import argparse
import asyncio
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

from sentinel_bot._version import __version__

log = structlog.get_logger()


def setup_logging(debug: bool = False, log_format: str = "console") -> None:
    """Configure structured logging with secret sanitization.

    Args:
        debug: Enable debug logging if True
        log_format: Output format ("json" or "console")
    """
    from sentinel_bot.utils.logging import configure_logging

    configure_logging(level="DEBUG" if debug else "INFO", log_format=log_format)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="sentinel-bot",
        description="Sentinel - GitHub slash commands for Discord",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to a YAML configuration file (default: read the environment)",
    )

    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate configuration and command definitions without connecting",
    )

    parser.add_argument(
        "--format",
        choices=["json", "console"],
        default="console",
        help="Log output format (default: console)",
    )

    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Run health check and exit",
    )

    return parser.parse_args(argv)


async def run_bot(
    config_path: Path | None,
    dry_run: bool = False,
    health_check: bool = False,
    debug: bool = False,
) -> int:
    """Run Sentinel.

    Args:
        config_path: YAML configuration file, or None to use the environment
        dry_run: If True, only validate config and commands
        health_check: If True, run health check and exit
        debug: Keep debug logging even if the config asks for less

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    log.info(
        "starting_sentinel",
        version=__version__,
        config_path=str(config_path) if config_path else None,
    )

    try:
        from sentinel_bot.config.loader import load_config

        config = load_config(config_path)
        log.info("configuration_loaded", environment=config.environment)

        # Reconfigure logging from config settings
        from sentinel_bot.utils.logging import configure_logging

        configure_logging(
            level="DEBUG" if debug else config.logging.level,
            log_format=config.logging.format,
            file_path=config.logging.file.path if config.logging.file.enabled else None,
            secrets=(config.discord.token, config.github.token),
        )

        if dry_run:
            from sentinel_bot.core.registry import build_registry

            registry = build_registry()
            log.info(
                "dry_run_mode_config_valid",
                commands=[d.name for d in registry.definitions],
            )
            return 0

        if health_check:
            from sentinel_bot.utils.health import HealthChecker

            checker = HealthChecker(config)
            report = await checker.run_all_checks()

            if report.healthy:
                log.info("health_check_passed", details=report.details)
                return 0
            log.error("health_check_failed", report=report.to_dict())
            return 1

        from sentinel_bot.core.bot import create_bot

        bot = create_bot(config)
        await bot.start()
        return 0

    except FileNotFoundError as e:
        log.error("configuration_file_not_found", path=str(config_path), error=str(e))
        return 1
    except ValidationError as e:
        log.error("configuration_invalid", errors=e.errors(include_url=False, include_input=False))
        return 1
    except ValueError as e:
        log.error("configuration_invalid", error=str(e))
        return 1
    except Exception as e:
        log.exception("fatal_error", error=str(e))
        return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    setup_logging(debug=args.debug, log_format=args.format)

    try:
        return asyncio.run(run_bot(args.config, args.dry_run, args.health_check, args.debug))
    except KeyboardInterrupt:
        log.info("shutting_down_gracefully")
        return 0


if __name__ == "__main__":
    sys.exit(main())

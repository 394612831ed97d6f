"""CLI entry point for Balance Alerts.

Reads ledger entries joined with their customer's alert profile as JSON
Lines, prints the generated addressed messages as JSON Lines and, unless
running dry, publishes them to the per-channel Redis Streams.

Usage:
    python -m balance_alerts [options] [input]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import sys
from collections.abc import Iterable, Iterator
from decimal import InvalidOperation
from typing import NoReturn, TextIO

from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from balance_alerts import __version__
from balance_alerts.config import Settings, clear_settings_cache, get_settings
from balance_alerts.generator.alerts import generate_alerts
from balance_alerts.generator.models import AddressedMessage
from balance_alerts.ledger.models import LedgerEntry
from balance_alerts.pipeline.publisher import AlertPublisher
from balance_alerts.pipeline.router import route
from balance_alerts.profile.models import CustomerAlertProfile

# Application info
APP_VERSION = __version__

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="balance-alerts",
        description="Generate balance and booking alerts for ledger entries.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Input lines are JSON objects: {"entry": {...}, "profile": {...} | null}

Examples:
  python -m balance_alerts entries.jsonl            Generate and publish alerts
  python -m balance_alerts --dry-run entries.jsonl  Generate alerts only
  python -m balance_alerts --config-check           Validate config and exit
        """,
    )

    parser.add_argument(
        "input",
        nargs="?",
        type=argparse.FileType("r", encoding="utf-8"),
        default="-",
        help="JSON Lines file of entries and profiles (default: stdin)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )

    parser.add_argument(
        "--config-check",
        action="store_true",
        help="Validate configuration and exit without processing input",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override logging level (default: from settings)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print generated alerts but don't publish them",
    )

    return parser


def configure_logging(level: str) -> None:
    """Configure logging for the application.

    Logs go to stderr; stdout carries the generated messages.

    Args:
        level: Logging level string (DEBUG, INFO, etc.)
    """
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": (
                    "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"
                ),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "detailed" if level == "DEBUG" else "standard",
                "stream": "ext://sys.stderr",
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
        "loggers": {
            "redis": {"level": "WARNING"},
        },
    }
    logging.config.dictConfig(config)


def print_config_summary(settings: Settings, dry_run: bool) -> None:
    """Print a summary of the configuration.

    Args:
        settings: Application settings.
        dry_run: Whether dry-run mode is enabled.
    """
    summary = settings.redacted_summary()
    streams = settings.streams
    print("Configuration:")
    print(f"  Redis: {summary['redis_url']}")
    print(f"  Email stream: {streams.email}")
    print(f"  SMS stream: {streams.sms}")
    print(f"  Push stream: {streams.push}")
    print(f"  Stream max length: {streams.max_len}")
    print(f"  Log Level: {summary['log_level']}")
    print(f"  Dry Run: {dry_run}")
    print()


def validate_config() -> Settings | None:
    """Validate and load configuration.

    Returns:
        Settings instance if valid, None if invalid.
    """
    try:
        # Clear cache to force reload
        clear_settings_cache()
        return get_settings()
    except ValidationError as e:
        print("Configuration validation failed:", file=sys.stderr)
        for error in e.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            msg = error["msg"]
            print(f"  {field}: {msg}", file=sys.stderr)
        return None


def run_config_check(settings: Settings) -> int:
    """Run configuration check and exit.

    Args:
        settings: Validated settings.

    Returns:
        Exit code (0 for success).
    """
    print("Configuration is valid!")
    print()
    print_config_summary(settings, dry_run=settings.dry_run)
    print("All checks passed. Ready to run.")
    return EXIT_SUCCESS


def load_records(
    lines: Iterable[str],
) -> Iterator[tuple[LedgerEntry, CustomerAlertProfile | None]]:
    """Parse JSON Lines input into (entry, profile) pairs.

    Blank lines are skipped. A missing or null profile means the customer
    has no alerting configured.

    Raises:
        json.JSONDecodeError: If a line is not valid JSON.
        ValueError: If a record, its entry or its profile is not an object.
        KeyError: If a required field is missing.
        decimal.InvalidOperation: If an amount is not a valid number.
    """
    for line in lines:
        if not line.strip():
            continue
        record = json.loads(line)
        if not isinstance(record, dict):
            raise ValueError(f"Expected a JSON object, got {type(record).__name__}")

        entry_data = record["entry"]
        if not isinstance(entry_data, dict):
            raise ValueError(f"Expected an entry object, got {type(entry_data).__name__}")

        profile_data = record.get("profile")
        if profile_data is not None and not isinstance(profile_data, dict):
            raise ValueError(f"Expected a profile object, got {type(profile_data).__name__}")

        profile = CustomerAlertProfile.from_dict(profile_data) if profile_data else None
        yield LedgerEntry.from_dict(entry_data), profile


def format_addressed(addressed: AddressedMessage) -> str:
    """Render an addressed message as a single JSON line."""
    return json.dumps(
        {
            "channel": addressed.channel.value,
            "address": addressed.address.value,
            "message": addressed.message.to_dict(),
        },
        sort_keys=True,
    )


def process_input(source: TextIO, out: TextIO) -> list[AddressedMessage]:
    """Generate alerts for every input record and write them to ``out``.

    Args:
        source: JSON Lines input.
        out: Destination for the rendered messages.

    Returns:
        All addressed messages, in input order.
    """
    generated: list[AddressedMessage] = []
    for entry, profile in load_records(source):
        for addressed in generate_alerts(entry, profile):
            print(format_addressed(addressed), file=out)
            generated.append(addressed)

    counts = {channel.value: len(items) for channel, items in route(generated).items()}
    logger.info("Generated %d addressed messages: %s", len(generated), counts)
    return generated


async def publish_alerts(settings: Settings, messages: list[AddressedMessage]) -> int:
    """Publish addressed messages to the configured Redis Streams.

    Args:
        settings: Application settings.
        messages: Messages to publish.

    Returns:
        Exit code.
    """
    if not messages:
        return EXIT_SUCCESS

    redis = Redis.from_url(settings.redis.url)
    publisher = AlertPublisher(
        redis,
        settings.streams.as_mapping(),
        max_len=settings.streams.max_len,
    )
    try:
        await publisher.publish_batch(messages)
        return EXIT_SUCCESS
    except RedisError as e:
        logger.error("Publishing failed: %s", e)
        return EXIT_ERROR
    finally:
        await redis.aclose()


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:]).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Validate configuration first
    settings = validate_config()
    if settings is None:
        sys.exit(EXIT_CONFIG_ERROR)

    # Determine effective log level
    log_level = args.log_level or settings.log_level
    configure_logging(log_level)

    # Config check mode
    if args.config_check:
        sys.exit(run_config_check(settings))

    # Determine dry-run mode
    dry_run = args.dry_run or settings.dry_run

    try:
        with args.input:
            messages = process_input(args.input, sys.stdout)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(EXIT_INTERRUPTED)
    except (KeyError, ValueError, InvalidOperation) as e:
        logger.error("Malformed input: %r", e)
        sys.exit(EXIT_ERROR)

    if dry_run:
        logger.info("Dry run, skipping publish")
        sys.exit(EXIT_SUCCESS)

    sys.exit(asyncio.run(publish_alerts(settings, messages)))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""secor-config - inspect the resolved Secor configuration.

Usage:
    secor-config --config secor.prod.backup.properties show
    secor-config --config secor.prod.backup.properties --override secrets.json show --schema-only
    secor-config -D secor.kafka.group=test get secor.kafka.group
    secor-config validate
"""

from __future__ import annotations

import argparse
import sys
from typing import Any

from secor.config import CONFIG_SCHEMA, ConfigError, ConfigLoader, SecorConfig
from secor.config.schema import TOPIC_KEY_PREFIXES
from secor.logging_config import configure_logging, get_logger

logger = get_logger(__name__)

MASK = "********"
SECRET_MARKERS = (
    "secret",
    "password",
    "access.key",
    "token",
    "api.key",
    "account.key",
    "customer.key",
    "kms.key",
)


def is_secret_key(key: str) -> bool:
    """Whether a key's value should be masked when displayed."""
    lowered = key.lower()
    return any(marker in lowered for marker in SECRET_MARKERS)


def _parse_property(text: str) -> tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got '{text}'")
    return key, value


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(prog="secor-config", description="Inspect the resolved Secor configuration")

    parser.add_argument("--config", help="Base properties file (default: $SECOR_CONFIG)")
    parser.add_argument("--override", help="Override file, .properties or .json (default: $SECOR_OVERRIDE_CONFIG)")
    parser.add_argument(
        "-D",
        dest="properties",
        action="append",
        type=_parse_property,
        default=[],
        metavar="KEY=VALUE",
        help="Process property applied with the highest precedence (repeatable)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    show = subparsers.add_parser("show", help="Print every resolved key=value, sorted by key")
    show.add_argument("--show-secrets", action="store_true", help="Do not mask credential values")
    show.add_argument(
        "--schema-only",
        action="store_true",
        help="Only print keys the pipeline reads (hides unrelated environment variables)",
    )

    get = subparsers.add_parser("get", help="Print one value")
    get.add_argument("key", help="Configuration key")

    subparsers.add_parser(
        "validate",
        help="Check the required keys of the configured cloud.service, and of Qubole when enabled",
    )

    return parser.parse_args(args)


def format_value(value: Any) -> str:
    """Render a typed value the way it would appear in a properties file."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return ",".join(value)
    if value is None:
        return ""
    return str(value)


def _is_pipeline_key(key: str) -> bool:
    return key in CONFIG_SCHEMA or key.startswith(TOPIC_KEY_PREFIXES)


def show(config: SecorConfig, show_secrets: bool = False, schema_only: bool = False) -> list[str]:
    """Build the ``key=value`` lines for the show command."""
    lines = []
    for key in config.store.keys():
        if schema_only and not _is_pipeline_key(key):
            continue
        value = config.store.get_string(key)
        if not show_secrets and is_secret_key(key):
            value = MASK
        lines.append(f"{key}={value}")
    return lines


def get_value(config: SecorConfig, key: str) -> str:
    """Read one key, typed through the schema when the key is known."""
    if key in CONFIG_SCHEMA:
        return format_value(config.get(key))
    return config.store.get_string(key)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging("secor-config", debug=args.debug)

    try:
        loader = ConfigLoader(
            config_path=args.config,
            override_path=args.override,
            properties=dict(args.properties),
        )
        config = loader.load()

        if args.command == "show":
            for line in show(config, show_secrets=args.show_secrets, schema_only=args.schema_only):
                print(line)
        elif args.command == "get":
            print(get_value(config, args.key))
        elif args.command == "validate":
            count = config.validate_required_keys()
            print(f"OK: {count} required keys present")
    except ConfigError as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m servicecall_cli request METHOD URL [--data JSON] [--header K:V]...
                                     [--base-url URL] [--service NAME] [--form]
                                     [--record FILE] [--replay FILE] [--json]
    python -m servicecall_cli config --init | --show

Environment Variables:
    SERVICECALL_BASE_URL        Default base URL
    SERVICECALL_SERVICE_NAME    Service name for attribution
    SERVICECALL_TIMEOUT         Transport timeout in seconds
    SERVICECALL_LOG_LEVEL       Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

import yaml

from servicecall.config import ClientConfig, get_config_template
from servicecall.schemas.errors import HttpClientException
from servicecall_cli.commands import request


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def load_config(config_path: Path | None = None) -> ClientConfig:
    """
    Load configuration from a YAML file and/or environment.

    Environment variables override file settings.
    """
    if config_path is not None:
        return ClientConfig.from_yaml(config_path).with_env_overrides()

    for default_path in (
        Path.cwd() / "servicecall.yaml",
        Path.home() / ".config" / "servicecall" / "config.yaml",
    ):
        if default_path.exists():
            return ClientConfig.from_yaml(default_path).with_env_overrides()

    return ClientConfig.from_env()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="servicecall",
        description="servicecall CLI - execute service calls through the transaction pipeline.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: ./servicecall.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- request command ---
    request_parser = subparsers.add_parser(
        "request",
        help="Execute one HTTP call",
        description="Execute one call and print the response snapshot.",
    )
    request_parser.add_argument("method", type=str, help="HTTP method")
    request_parser.add_argument("url", type=str, help="Path or absolute URL")
    request_parser.add_argument(
        "--data", "-d",
        type=str,
        default=None,
        help="Request body (JSON, or a raw string)",
    )
    request_parser.add_argument(
        "--header", "-H",
        action="append",
        default=None,
        help="Extra header 'Name: value' (repeatable)",
    )
    request_parser.add_argument(
        "--base-url",
        type=str,
        default=None,
        help="Base URL (overrides config)",
    )
    request_parser.add_argument(
        "--service",
        type=str,
        default=None,
        help="Service name for attribution",
    )
    request_parser.add_argument(
        "--form",
        action="store_true",
        default=False,
        help="Send the body form-encoded",
    )
    request_parser.add_argument(
        "--record",
        type=str,
        default=None,
        help="Save a receipt of the call to this JSON file",
    )
    request_parser.add_argument(
        "--replay",
        type=str,
        default=None,
        help="Answer from receipts in this JSON file instead of the network",
    )
    request_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output the response snapshot as JSON",
    )
    request_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Show tracebacks on error",
    )
    request_parser.set_defaults(func=request.request_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Show or initialize configuration",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Print a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show the effective configuration",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        print(get_config_template(), end="")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.client_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: servicecall config [--init|--show]")
    print("  --init  Print a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Exit code (0=success, 1=error, 2=response carries an error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except (OSError, TypeError, ValueError, yaml.YAMLError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    setup_logging(level=args.log_level or config.log_level, log_file=config.log_file)

    args.client_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except (HttpClientException, OSError, ValueError) as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())

"""Command-line entry point for watch actions."""

import argparse
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from watch_actions.config.exceptions import ConfigurationError
from watch_actions.config.loader import load_settings
from watch_actions.config.models import AppSettings
from watch_actions.execution import Payload, WatchExecutionContext
from watch_actions.logging import get_logger
from watch_actions.logging.config import configure_logging
from watch_actions.mail import (
    AccountsEmailService,
    ActionParseError,
    EmailActionFactory,
    HtmlSanitizer,
    SerializationParams,
    serialize,
)
from watch_actions.templates import JinjaTemplateEngine
from watch_actions.utils.documents import DocumentError, dump_json, dump_yaml, load_document
from watch_actions.utils.timestamps import parse_iso_datetime

logger = get_logger(__name__, component="cli")

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="watch-actions",
        description="Validate and run templated email actions",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to settings file (default: watch_actions.yaml or config/watch_actions.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides settings and environment)",
    )
    parser.add_argument(
        "--templates",
        type=Path,
        default=None,
        help="Directory holding file templates",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser(
        "validate", help="Parse an action document and print it back"
    )
    validate.add_argument("file", type=Path, help="Action document (JSON or YAML)")
    validate.add_argument(
        "--show-secrets", action="store_true", help="Include the password in the output"
    )
    validate.add_argument(
        "--format", choices=["json", "yaml"], default="yaml", help="Output format"
    )

    send = subparsers.add_parser("send", help="Execute an action once and print the result")
    send.add_argument("file", type=Path, help="Action document (JSON or YAML)")
    send.add_argument("--watch-id", required=True, help="Watch the action belongs to")
    send.add_argument("--action-id", default="email", help="Id of the action inside the watch")
    send.add_argument("--payload", type=Path, default=None, help="Payload document")
    send.add_argument("--metadata", type=Path, default=None, help="Watch metadata document")
    send.add_argument(
        "--triggered-at",
        type=_timestamp,
        default=None,
        help="Trigger time as ISO 8601 (default: now)",
    )

    return parser


def _timestamp(value: str) -> datetime:
    parsed = parse_iso_datetime(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"invalid ISO 8601 timestamp: {value!r}")
    return parsed


def build_factory(settings: AppSettings, template_dir: Optional[Path] = None) -> EmailActionFactory:
    """Wire the factory with the configured accounts, engine and sanitizer."""
    return EmailActionFactory(
        email_service=AccountsEmailService(settings.email),
        template_engine=JinjaTemplateEngine(template_dir),
        sanitizer=HtmlSanitizer.from_config(settings.email.html_sanitization),
        default_account=settings.email.default_account,
    )


def _read_document(path: Path) -> dict:
    try:
        return load_document(path.read_bytes())
    except OSError as e:
        raise DocumentError(f"cannot read {path}: {e}") from e


def _print_document(document: dict, output_format: str) -> None:
    if output_format == "json":
        print(dump_json(document, pretty=True))
    else:
        print(dump_yaml(document), end="")


def run_validate(args: argparse.Namespace, factory: EmailActionFactory) -> int:
    executable = factory.parse_executable("cli", args.file.stem, _read_document(args.file))
    params = SerializationParams(hide_secrets=not args.show_secrets)
    _print_document(serialize(executable, params), args.format)
    return EXIT_OK


def run_send(args: argparse.Namespace, factory: EmailActionFactory) -> int:
    executable = factory.parse_executable(
        args.watch_id, args.action_id, _read_document(args.file)
    )
    payload = Payload(_read_document(args.payload)) if args.payload else Payload.empty()
    metadata = _read_document(args.metadata) if args.metadata else {}

    ctx = WatchExecutionContext.create(
        args.watch_id,
        payload=payload,
        metadata=metadata,
        triggered_time=args.triggered_at,
    )
    result = executable.execute(ctx.execution_id, ctx, payload)

    _print_document(result.to_dict(), "json")
    return EXIT_OK if result.is_success() else EXIT_FAILED


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code: 0 on success, 1 for invalid settings or documents,
        2 when executing the action failed.
    """
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
        if args.log_level:
            settings.logging.level = args.log_level
        configure_logging(
            level=settings.logging.level,
            format_type=settings.logging.format,
            environment=os.environ.get("ENVIRONMENT", "local"),
            stream=sys.stderr,
        )
        factory = build_factory(settings, args.templates)

        if args.command == "validate":
            return run_validate(args, factory)
        return run_send(args, factory)

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return EXIT_INVALID
    except ActionParseError as e:
        print(str(e), file=sys.stderr)
        return EXIT_INVALID
    except DocumentError as e:
        print(f"Invalid document: {e}", file=sys.stderr)
        return EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())

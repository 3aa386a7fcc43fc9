"""
Command-line interface for the transaction processor.

Usage:
    python -m transaction_processor.cli.ledger_cli upload --input <file_path> [options]
    python -m transaction_processor.cli.ledger_cli report {accounts,malformed,collections} [options]
    python -m transaction_processor.cli.ledger_cli reset [options]
    python -m transaction_processor.cli.ledger_cli serve [--host HOST] [--port PORT] [options]
"""

import argparse
import json
import sys
from decimal import Decimal
from pathlib import Path

from transaction_processor.config import Settings
from transaction_processor.core.errors import (
    ConfigurationError,
    MalformedInput,
    StoreUnavailable,
)
from transaction_processor.engine import TransactionEngine
from transaction_processor.observability.logger import get_logger
from transaction_processor.utils.validation import InputValidationError, validate_file_path

logger = get_logger(__name__)

REPORTS = {
    "accounts": TransactionEngine.account_report,
    "malformed": TransactionEngine.malformed_report,
    "collections": TransactionEngine.collections_report,
}


def _json_default(value):
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dump_json(payload) -> str:
    """Render a report as JSON, amounts as numbers."""
    return json.dumps(payload, indent=2, default=_json_default)


def build_settings(args) -> Settings:
    """
    Settings from the environment, overridden by command-line flags.

    Raises:
        ConfigurationError: If the resulting settings are invalid
    """
    settings = Settings.from_env(env_file=args.env_file)

    overrides = {
        "store_backend": args.store,
        "db_host": args.db_host,
        "db_port": args.db_port,
        "db_name": args.db_name,
        "db_user": args.db_user,
        "db_password": args.db_password,
        "field_map_path": args.field_map,
        "csv_delimiter": args.delimiter,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if not overrides:
        return settings

    try:
        return Settings(**{**settings.model_dump(), **overrides})
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def upload_command(args, engine: TransactionEngine) -> None:
    """Ingest a file and print the ingest summary."""
    input_path = Path(validate_file_path(args.input, "--input"))
    if not input_path.is_file():
        raise InputValidationError(f"Input file not found: {args.input}")

    result = engine.pipeline.ingest_file(input_path)
    print(dump_json({"message": "Transactions processed successfully", **result.model_dump()}))


def report_command(args, engine: TransactionEngine) -> None:
    """Print one report as JSON."""
    print(dump_json(REPORTS[args.report](engine)))


def reset_command(args, engine: TransactionEngine) -> None:
    """Clear the snapshot."""
    engine.reset()
    print(dump_json({"message": "System reset successfully"}))


def serve_command(args, engine: TransactionEngine, settings: Settings) -> None:
    """Serve the HTTP API until interrupted."""
    # Lazy import: the ASGI server is only needed for this command
    import uvicorn

    from transaction_processor.api import create_app

    host = args.host or settings.api_host
    port = args.port or settings.api_port
    logger.info(f"Serving HTTP API on {host}:{port}", extra={"store_backend": settings.store_backend})
    uvicorn.run(create_app(engine, settings), host=host, port=port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Transaction ingestion and reporting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Replace the current snapshot with a new upload
  python -m transaction_processor.cli.ledger_cli upload --input data/transactions.csv

  # Show balances per account and card
  python -m transaction_processor.cli.ledger_cli report accounts

  # Rows that failed validation
  python -m transaction_processor.cli.ledger_cli report malformed

  # Start over
  python -m transaction_processor.cli.ledger_cli reset

  # Serve the HTTP API backed by PostgreSQL
  python -m transaction_processor.cli.ledger_cli serve --store postgres --port 3001
        """
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--env-file", default=None, help="Path to a .env file")
    common.add_argument(
        "--store",
        choices=["memory", "postgres"],
        default=None,
        help="Snapshot store backend (default: STORE_BACKEND or memory)"
    )
    common.add_argument("--db-host", default=None, help="Database host")
    common.add_argument("--db-port", type=int, default=None, help="Database port")
    common.add_argument("--db-name", default=None, help="Database name")
    common.add_argument("--db-user", default=None, help="Database user")
    common.add_argument("--db-password", default=None, help="Database password")
    common.add_argument("--field-map", default=None, help="YAML file overriding column names")
    common.add_argument("--delimiter", default=None, help="Field delimiter (default: ,)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    upload_parser = subparsers.add_parser("upload", parents=[common], help="Ingest a transaction file")
    upload_parser.add_argument("--input", required=True, help="Path to input file")

    report_parser = subparsers.add_parser("report", parents=[common], help="Print a report")
    report_parser.add_argument("report", choices=sorted(REPORTS), help="Report to print")

    subparsers.add_parser("reset", parents=[common], help="Clear the current snapshot")

    serve_parser = subparsers.add_parser("serve", parents=[common], help="Serve the HTTP API")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: API_HOST or 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port (default: API_PORT or 3001)")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    engine = None
    try:
        settings = build_settings(args)
        engine = TransactionEngine.from_settings(settings)
        if settings.store_backend == "memory" and args.command != "serve":
            logger.warning("Using the in-memory store: the snapshot is lost when this command exits")

        if args.command == "upload":
            upload_command(args, engine)
        elif args.command == "report":
            report_command(args, engine)
        elif args.command == "reset":
            reset_command(args, engine)
        elif args.command == "serve":
            serve_command(args, engine, settings)

    except (MalformedInput, StoreUnavailable, FileNotFoundError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"\nError: {e}", file=sys.stderr)
        return 1
    finally:
        if engine is not None:
            engine.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())

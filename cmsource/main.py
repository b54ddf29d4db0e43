"""Composition root for the Cloudera Manager data source.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for operators.

Module Structure:
- Configuration loading via config module
- Adapter instantiation
- Data source initialization
- Command dispatch (test, query)
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from cmsource.adapters.cli.commands import run_command
from cmsource.adapters.http.httpx_client import HttpxClient
from cmsource.config import load_settings
from cmsource.core.datasource import ClouderaManagerDataSource


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Results go to stdout, so logs go to stderr
    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="cmsource",
        description="Query Cloudera Manager time series the way a dashboard does.",
    )
    parser.add_argument("--env-file", default=None, help="Path to a .env file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("test", help="Check the connection and API version")

    query = subparsers.add_parser("query", help="Run one or more tsquery expressions")
    query.add_argument("expressions", nargs="+", help="tsquery expressions")
    query.add_argument("--from", dest="start", default="now-1h", help="Range start")
    query.add_argument("--to", dest="end", default="now", help="Range end")
    query.add_argument("--format", choices=["json", "text"], default="json")
    return parser


async def bootstrap(argv: list[str] | None = None) -> dict[str, Any]:
    """Load configuration, wire adapters, and run one command.

    Steps:
    1. Parse arguments and load configuration
    2. Configure logging
    3. Instantiate the HTTP transport
    4. Initialize the data source
    5. Run the requested command

    Returns:
        The command result dictionary.
    """
    args = build_parser().parse_args(argv)

    # Step 1: Load configuration
    settings = load_settings(args.env_file)

    # Step 2: Configure logging
    configure_logging(settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info(f"Using Cloudera Manager at {settings.cm_url} ({settings.cm_api_version})")

    # Step 3-4: Wire transport and data source
    async with HttpxClient(timeout=settings.request_timeout_seconds) as http_client:
        datasource = ClouderaManagerDataSource(
            settings.instance_settings(),
            http_client,
        )

        # Step 5: Dispatch
        if args.command == "query":
            command_args = {
                "expressions": args.expressions,
                "from": args.start,
                "to": args.end,
                "format": args.format,
            }
        else:
            command_args = {}
        return await run_command(datasource, args.command, command_args)


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Command succeeded
        1: Command reported an error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        result = asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Interrupted by user (SIGINT)")
        sys.exit(130)

    if isinstance(result.get("data"), str):
        print(result["data"])
    else:
        print(json.dumps(result, indent=2, default=str))
    sys.exit(0 if result.get("status") == "success" else 1)


if __name__ == "__main__":
    main()

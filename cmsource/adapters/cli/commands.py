"""CLI command implementations for the Cloudera Manager data source.

Provides operator access to a configured data source through the command
line. This adapter maps CLI commands (test, query) to DataSourcePort
operations. It handles CLI-specific formatting and error reporting.
"""

import logging
from typing import Any

import httpx

from cmsource.core.datemath import parse, to_iso8601
from cmsource.core.models import QueryOptions, QueryResult, QueryTarget, TimeRange
from cmsource.core.ports import DataSourcePort

logger = logging.getLogger(__name__)


class CLICommandHandler:
    """Handles CLI commands by delegating to DataSourcePort."""

    def __init__(self, datasource: DataSourcePort):
        """Initialize the CLI command handler.

        Args:
            datasource: DataSourcePort implementation to execute commands.
        """
        self.datasource = datasource

    async def test_connection(self) -> dict[str, Any]:
        """Test the connection via CLI.

        Returns:
            Dictionary with status and message.
        """
        try:
            result = await self.datasource.test_connection()
            return {"operation": "test", **result.to_dict()}

        except httpx.HTTPError as e:
            logger.error(f"Connection test failed: {e}")
            return {
                "status": "error",
                "operation": "test",
                "message": str(e),
            }

    async def query(
        self,
        expressions: list[str],
        start: str = "now-1h",
        end: str = "now",
        output_format: str = "json",
    ) -> dict[str, Any]:
        """Run tsquery expressions via CLI.

        Args:
            expressions: One tsquery per panel row.
            start: Range start, literal or date math.
            end: Range end, literal or date math.
            output_format: Output format ('json' or 'text').

        Returns:
            Dictionary with status and the query result.
        """
        if output_format not in ("json", "text"):
            return {
                "status": "error",
                "operation": "query",
                "message": f"Unsupported format: {output_format}",
            }

        try:
            time_range = TimeRange(start=parse(start), end=parse(end, round_up=True))
            options = QueryOptions(
                targets=tuple(QueryTarget(target=expr) for expr in expressions),
                range=time_range,
            )
            result = await self.datasource.query(options)

        except ValueError as e:
            logger.error(f"Invalid query arguments: {e}")
            return {
                "status": "error",
                "operation": "query",
                "message": str(e),
            }
        except httpx.HTTPError as e:
            logger.error(f"Query failed: {e}")
            return {
                "status": "error",
                "operation": "query",
                "message": str(e),
            }

        output: dict[str, Any] = {
            "status": "success",
            "operation": "query",
            "from": to_iso8601(time_range.start),
            "to": to_iso8601(time_range.end),
        }
        if output_format == "text":
            output["data"] = self._format_result_as_text(result)
        else:
            output.update(result.to_dict())
        return output

    def _format_result_as_text(self, result: QueryResult) -> str:
        """Format a query result as human-readable text.

        Args:
            result: Query result to format.

        Returns:
            Formatted text string.
        """
        if not result.data:
            return "No series returned."

        lines = []
        for series in result.data:
            lines.append(f"{series.target}: {len(series.datapoints)} points")
            if series.datapoints:
                first_value, first_ts = series.datapoints[0]
                last_value, last_ts = series.datapoints[-1]
                lines.append(f"  first: {first_value} @ {first_ts}")
                lines.append(f"  last:  {last_value} @ {last_ts}")
        return "\n".join(lines)


async def run_command(
    datasource: DataSourcePort,
    command: str,
    args: dict[str, Any],
) -> dict[str, Any]:
    """Run a CLI command.

    Entry point for executing CLI commands. Maps command names to handler methods.

    Args:
        datasource: DataSourcePort implementation.
        command: Command name ('test', 'query').
        args: Dictionary of command arguments.

    Returns:
        Dictionary with command result.

    Raises:
        ValueError: If command is not recognized.
    """
    handler = CLICommandHandler(datasource)

    if command == "test":
        return await handler.test_connection()

    elif command == "query":
        return await handler.query(
            args["expressions"],
            args.get("from", "now-1h"),
            args.get("to", "now"),
            args.get("format", "json"),
        )

    else:
        raise ValueError(f"Unknown command: {command}")

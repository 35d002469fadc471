"""
MCP Server for the time and workdays tools.

This module provides an MCP (Model Context Protocol) server exposing two
tools: the current time in a time zone, and the official workdays of a
month taken from a Chinese holiday calendar API.

Supports two transport modes:
- stdio: For local Claude Desktop integration
- sse: For HTTP-based integration (Docker, remote servers)

Both tools always answer with a single text block; the workday tool's text
is a JSON object.
"""

import argparse
import json
import logging
import math
import os
import sys
from typing import Annotated, Literal, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from time_workdays.config.manager import ConfigManager
from time_workdays.core.calculator import WorkdayResolver
from time_workdays.core.clock import DEFAULT_TIME_FORMAT, LOCAL_TZ, get_current_time, now_in_zone
from time_workdays.core.errors import WorkdayError
from time_workdays.data.schemas import Config

logger = logging.getLogger(__name__)

SERVER_NAME = "time-and-workdays"
MIN_TIMEOUT_MS = 1000


def timeout_to_ms(timeout: Optional[float], default: float = 8.0) -> int:
    """Convert a timeout in seconds to milliseconds, never below one second."""
    seconds = default if timeout is None else timeout
    return max(MIN_TIMEOUT_MS, math.floor(seconds * 1000))


def create_mcp_server(
    host: str = "127.0.0.1",
    port: int = 8000,
    config: Optional[Config] = None,
    resolver: Optional[WorkdayResolver] = None,
) -> FastMCP:
    """
    Create and configure the MCP server with tools.

    Args:
        host: Host to bind to (SSE transport only).
        port: Port to listen on (SSE transport only).
        config: Configuration; loaded from settings.yaml and env if omitted.
        resolver: Workday resolver; built from config if omitted.

    Returns:
        Configured FastMCP server instance.
    """
    config = config or ConfigManager().load_config()
    resolver = resolver or WorkdayResolver.from_config(config)

    mcp = FastMCP(SERVER_NAME, host=host, port=port)

    @mcp.tool(structured_output=False)
    def get_current_time(tz: str = LOCAL_TZ, fmt: str = DEFAULT_TIME_FORMAT) -> str:
        """
        Get the current time in a time zone with a custom format.

        Args:
            tz: IANA time zone name (e.g. "Asia/Shanghai") or "local".
            fmt: Format template. Tokens: %Y year, %m month, %d day, %H hour,
                 %M minute, %S second, %z UTC offset as +HH:MM.

        Returns:
            The formatted current time, e.g. "2024-02-10 09:30:00+08:00".
        """
        try:
            return get_current_time_text(tz, fmt)
        except WorkdayError as e:
            logger.error(f"get_current_time failed: {e}")
            raise

    @mcp.tool(structured_output=False)
    def get_workdays_from_api(
        year: Optional[Annotated[int, Field(ge=1970)]] = None,
        month: Optional[Annotated[int, Field(ge=1, le=12)]] = None,
        tz: str = LOCAL_TZ,
        provider: Literal["timor", "nate"] = config.default_provider.value,
        timeout: float = config.default_timeout,
    ) -> str:
        """
        Get the official workdays, holidays and makeup workdays of a month (China).

        Data comes from the timor.tech holiday API ("timor") or the
        NateScarlet holiday-cn dataset ("nate").

        Args:
            year: Year (>= 1970). Defaults to the current year in tz.
            month: Month (1-12). Defaults to the current month in tz.
            tz: Time zone used only to derive the default year and month; it is
                not resolved (nor rejected) when both year and month are given.
            provider: "timor" (default) or "nate".
            timeout: Request timeout in seconds (default 8.0).

        Returns:
            JSON text: {"provider", "year", "month", "workdays", "holidays",
            "makeup_workdays", "errors"}; dates are YYYY-MM-DD and sorted.

        Examples:
            Workdays of October 2024 from timor:
            >>> get_workdays_from_api(year=2024, month=10)

            Same month from the holiday-cn dataset:
            >>> get_workdays_from_api(year=2024, month=10, provider="nate")
        """
        try:
            return get_workdays_text(
                resolver, year=year, month=month, tz=tz, provider=provider, timeout=timeout
            )
        except (WorkdayError, ValueError) as e:
            logger.error(f"get_workdays_from_api failed: {e}")
            raise

    return mcp


def get_current_time_text(tz: Optional[str] = LOCAL_TZ, fmt: Optional[str] = DEFAULT_TIME_FORMAT) -> str:
    """Text of the get_current_time tool."""
    return get_current_time(tz, fmt).text


def get_workdays_text(
    resolver: WorkdayResolver,
    year: Optional[int] = None,
    month: Optional[int] = None,
    tz: Optional[str] = LOCAL_TZ,
    provider: str = "timor",
    timeout: Optional[float] = 8.0,
) -> str:
    """Text (JSON) of the get_workdays_from_api tool."""
    if year is None or month is None:
        now = now_in_zone(tz)
        year = now.year if year is None else year
        month = now.month if month is None else month

    result = resolver.resolve(year, month, provider, timeout_to_ms(timeout))
    return json.dumps(result.to_payload(), ensure_ascii=False)


def main():
    """Run the MCP server with configurable transport.

    Transport can be set via:
    - Command line: --transport sse --port 8080
    - Environment: MCP_TRANSPORT=sse MCP_PORT=8080 MCP_HOST=0.0.0.0
    """
    parser = argparse.ArgumentParser(description="Time & Workdays MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default=os.environ.get("MCP_TRANSPORT", "stdio"),
        help="Transport mode: stdio (default) or sse for HTTP",
    )
    parser.add_argument(
        "--host",
        default=os.environ.get("MCP_HOST", "0.0.0.0"),
        help="Host to bind to (SSE mode only, default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("MCP_PORT", "8080")),
        help="Port to listen on (SSE mode only, default: 8080)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config file (optional)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    # stdout carries the stdio transport, so logs go to stderr
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    config = ConfigManager(args.config).load_config()
    mcp = create_mcp_server(host=args.host, port=args.port, config=config)

    logger.info(f"Starting {SERVER_NAME} MCP server ({args.transport})")
    if args.transport == "sse":
        logger.info(f"SSE endpoint: http://{args.host}:{args.port}/sse")

    mcp.run(transport=args.transport)


if __name__ == "__main__":
    main()

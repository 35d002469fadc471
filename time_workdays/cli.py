"""
CLI interface for the time and workdays tools.
"""

import logging
import sys

import click

from time_workdays import __version__
from time_workdays.config.manager import ConfigManager
from time_workdays.core.calculator import WorkdayResolver
from time_workdays.core.clock import DEFAULT_TIME_FORMAT, get_current_time, now_in_zone
from time_workdays.core.errors import WorkdayError
from time_workdays.data.schemas import Provider
from time_workdays.mcp_server import timeout_to_ms
from time_workdays.output.exporter import ResultExporter
from time_workdays.output.formatter import ConsoleFormatter

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="workdays-calc")
@click.option("--debug", is_flag=True, default=False, help="Enable debug logging")
def main(debug):
    """Time & Workdays - current time per zone and official workdays per month."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


@main.command()
@click.option(
    "--year", "-y",
    type=click.IntRange(min=1970),
    default=None,
    help="Year (default: current year in --tz)",
)
@click.option(
    "--month", "-m",
    type=click.IntRange(1, 12),
    default=None,
    help="Month 1-12 (default: current month in --tz)",
)
@click.option(
    "--provider", "-p",
    type=click.Choice([p.value for p in Provider], case_sensitive=False),
    default=None,
    help="Holiday data provider (default: from config, timor)",
)
@click.option(
    "--tz",
    default=None,
    help="Time zone used for the default year/month (default: from config, local)",
)
@click.option(
    "--timeout", "-t",
    type=float,
    default=None,
    help="Request timeout in seconds (default: from config, 8.0)",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Output file path (optional)",
)
@click.option(
    "--format", "-f",
    type=click.Choice(["json", "csv", "both", "console"]),
    default=None,
    help="Output format (default: from config, console)",
)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to config file (optional)",
)
def workdays(year, month, provider, tz, timeout, output, format, config):
    """Show the workdays, holidays and makeup workdays of a month."""
    formatter = ConsoleFormatter()

    try:
        cfg = ConfigManager(config).load_config()
        format = format or cfg.output_format

        if year is None or month is None:
            now = now_in_zone(tz or cfg.default_timezone)
            year = year or now.year
            month = month or now.month

        resolver = WorkdayResolver.from_config(cfg)
        result = resolver.resolve(
            year,
            month,
            (provider or cfg.default_provider.value).lower(),
            timeout_to_ms(timeout, default=cfg.default_timeout),
        )

        if format in ("console", "both"):
            formatter.print_result(result)

        if format in ("json", "csv", "both"):
            exporter = ResultExporter(output_directory=cfg.output_directory)

            if format == "json":
                path = exporter.export_json(result, output)
                formatter.print_success(f"Result saved to {path}")
            elif format == "csv":
                path = exporter.export_csv(result, output)
                formatter.print_success(f"Result saved to {path}")
            else:  # both
                json_path, csv_path = exporter.export_both(result)
                formatter.print_success(f"Results saved to:\n  - {json_path}\n  - {csv_path}")

    except (WorkdayError, ValueError) as e:
        formatter.print_error(str(e))
        sys.exit(1)


@main.command()
@click.option(
    "--tz",
    default="local",
    help="IANA time zone name or 'local' (default: local)",
)
@click.option(
    "--fmt",
    default=DEFAULT_TIME_FORMAT,
    help="Format template with %Y %m %d %H %M %S %z tokens",
)
def now(tz, fmt):
    """Show the current time in a time zone."""
    formatter = ConsoleFormatter()

    try:
        formatter.print_time(get_current_time(tz, fmt))
    except WorkdayError as e:
        formatter.print_error(str(e))
        sys.exit(1)


@main.command()
def providers():
    """List the supported holiday data providers."""
    formatter = ConsoleFormatter()
    formatter.print_providers()


@main.command()
@click.option(
    "--host", "-h",
    default=None,
    help="Host to bind to (default: from config or 0.0.0.0)",
)
@click.option(
    "--port", "-p",
    type=int,
    default=None,
    help="Port to bind to (default: from config or 8000)",
)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to config file (optional)",
)
def serve(host, port, config):
    """Start the FastAPI server."""
    import uvicorn

    formatter = ConsoleFormatter()

    try:
        cfg = ConfigManager(config).load_config()
    except ValueError as e:
        formatter.print_error(str(e))
        sys.exit(1)

    api_host = host or cfg.api_host
    api_port = port or cfg.api_port

    formatter.console.print(f"Starting API server at http://{api_host}:{api_port}")
    formatter.console.print("Press Ctrl+C to stop")
    formatter.console.print()

    uvicorn.run(
        "time_workdays.api:app",
        host=api_host,
        port=api_port,
        reload=False,
    )


if __name__ == "__main__":
    main()

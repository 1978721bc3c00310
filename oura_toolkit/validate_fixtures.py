#!/usr/bin/env python3
"""Validate stored Oura API fixtures against the live API.

Fetches each configured endpoint, compares the response's structure with the
stored fixture and reports added, missing and retyped fields. Endpoints
without a usable fixture get one written from the live response.

Usage:
    OURA_ACCESS_TOKEN=... python -m oura_toolkit.validate_fixtures
    python -m oura_toolkit.validate_fixtures --endpoint sleep --endpoint tag
    python -m oura_toolkit.validate_fixtures --dry-run
    python -m oura_toolkit.validate_fixtures --strict --report
"""

import argparse
import asyncio
import copy
import logging
import os
import sys
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .client import BASE_URL, OuraClient
from .drift import (
    EndpointValidation,
    FixtureLoadError,
    FixtureReporter,
    FixtureStore,
    ValidationOutcome,
    ValidationSession,
    compare_structures,
)
from .utils.errors import format_error
from .utils.formatters import get_days_ago, get_today
from .utils.path_config import PathConfig

console = Console()
logger = logging.getLogger(__name__)


def _dated(endpoint: str, fixture: str) -> dict[str, Any]:
    return {"endpoint": endpoint, "fixture": fixture, "dated": True}


DEFAULT_CONFIG: dict[str, Any] = {
    "api": {
        "base_url": BASE_URL,
        "timeout": 30,
    },
    "authentication": {
        "env_var": "OURA_ACCESS_TOKEN",
    },
    "date_range": {
        "days_back": 365,
    },
    "output": {
        "pretty_print": True,
    },
    "endpoints": [
        _dated("sleep", "oura-sleep-response.json"),
        _dated("daily_sleep", "oura-daily-sleep-response.json"),
        _dated("daily_readiness", "oura-readiness-response.json"),
        _dated("daily_activity", "oura-activity-response.json"),
        _dated("daily_stress", "oura-stress-response.json"),
        _dated("heartrate", "oura-heartrate-response.json"),
        _dated("workout", "oura-workout-response.json"),
        _dated("daily_spo2", "oura-spo2-response.json"),
        _dated("vO2_max", "oura-vo2max-response.json"),
        _dated("daily_resilience", "oura-resilience-response.json"),
        _dated("daily_cardiovascular_age", "oura-cardiovascular-age-response.json"),
        _dated("tag", "oura-tags-response.json"),
        _dated("session", "oura-sessions-response.json"),
        {"endpoint": "personal_info", "fixture": "oura-personal-info-response.json", "dated": False},
    ],
}


@dataclass(frozen=True)
class EndpointConfig:
    """A monitored endpoint and its fixture file."""

    endpoint: str
    fixture: str
    dated: bool = True

    def params(self, start_date: str, end_date: str) -> dict[str, str] | None:
        if not self.dated:
            return None
        return {"start_date": start_date, "end_date": end_date}


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from YAML file or use defaults."""
    if config_path and config_path.exists():
        with config_path.open() as f:
            config = yaml.safe_load(f) or {}
            return _deep_merge(DEFAULT_CONFIG, config.get("fixtures", config))
    if config_path:
        logger.info("Config not found: %s, using defaults", config_path)
    return copy.deepcopy(DEFAULT_CONFIG)


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries (lists are replaced, not merged)."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def get_access_token(config: dict[str, Any]) -> str | None:
    """Read the access token from the configured environment variable."""
    env_var = config.get("authentication", {}).get("env_var", "OURA_ACCESS_TOKEN")
    return os.environ.get(env_var) or None


def get_endpoints(config: dict[str, Any], only: list[str] | None = None) -> list[EndpointConfig]:
    """Build endpoint definitions from config, optionally filtered by name."""
    endpoints = [
        EndpointConfig(
            endpoint=entry["endpoint"],
            fixture=entry["fixture"],
            dated=entry.get("dated", True),
        )
        for entry in config.get("endpoints", [])
    ]
    if only:
        endpoints = [e for e in endpoints if e.endpoint in only]
    return endpoints


def get_date_range(config: dict[str, Any], now: datetime | None = None) -> tuple[str, str]:
    """Get (start_date, end_date) covering the configured look-back window."""
    days_back = config.get("date_range", {}).get("days_back", 365)
    return get_days_ago(days_back, now=now), get_today(now=now)


async def validate_endpoint(
    client: OuraClient,
    store: FixtureStore,
    endpoint: EndpointConfig,
    start_date: str,
    end_date: str,
) -> EndpointValidation:
    """Validate a single endpoint's fixture against the live API.

    Never raises; failures are returned as ERROR outcomes.
    """
    try:
        start = time.monotonic()
        actual = await client.fetch(endpoint.endpoint, endpoint.params(start_date, end_date))
        response_time = (time.monotonic() - start) * 1000

        try:
            fixture = store.load(endpoint.fixture)
        except FixtureLoadError:
            store.save(endpoint.fixture, actual)
            return EndpointValidation(
                endpoint=endpoint.endpoint,
                fixture=endpoint.fixture,
                outcome=ValidationOutcome.CREATED,
                response_time_ms=response_time,
            )

        result = compare_structures(fixture, actual)
        return EndpointValidation(
            endpoint=endpoint.endpoint,
            fixture=endpoint.fixture,
            outcome=ValidationOutcome.MATCHED if result.matches else ValidationOutcome.DRIFTED,
            diff=result,
            response_time_ms=response_time,
        )
    except Exception as e:
        logger.warning("Validation of %s failed: %s", endpoint.endpoint, e)
        return EndpointValidation(
            endpoint=endpoint.endpoint,
            fixture=endpoint.fixture,
            outcome=ValidationOutcome.ERROR,
            error=format_error(e),
        )


async def run_validation(
    client: OuraClient,
    store: FixtureStore,
    endpoints: list[EndpointConfig],
    start_date: str,
    end_date: str,
) -> ValidationSession:
    """Validate every endpoint in order, printing each result as it completes."""
    session = ValidationSession(start_date=start_date, end_date=end_date)

    for endpoint in endpoints:
        result = await validate_endpoint(client, store, endpoint, start_date, end_date)
        session.results.append(result)
        print_result(result)

    session.completed_at = datetime.now(timezone.utc)
    return session


def print_result(result: EndpointValidation) -> None:
    """Print one endpoint's outcome and its drift lines."""
    label = f"Validating {result.endpoint}..."
    if result.outcome is ValidationOutcome.MATCHED:
        console.print(f"{label} [green]Structure matches[/green]")
    elif result.outcome is ValidationOutcome.CREATED:
        console.print(f"{label} [yellow]Fixture file not found[/yellow]")
        console.print(f"  [green]Created {result.fixture} from API response[/green]")
    elif result.outcome is ValidationOutcome.DRIFTED and result.diff is not None:
        console.print(f"{label} [yellow]Structure differs:[/yellow]")
        for line in result.diff.lines():
            console.print(f"    {line}", markup=False, highlight=False)
    else:
        console.print(f"{label} [red]{escape(result.error or '')}[/red]", highlight=False)


def print_summary(session: ValidationSession) -> None:
    """Print validation summary to console."""
    table = Table(title="Fixture Validation Summary")
    table.add_column("Outcome", style="cyan")
    table.add_column("Endpoints", style="green")

    for outcome in ValidationOutcome:
        table.add_row(outcome.value.title(), str(session.count(outcome)))
    table.add_row("Total", str(len(session.results)))
    table.add_row("Duration", f"{session.duration_seconds:.1f}s")

    console.print(table)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Validate stored Oura API fixtures against the live API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to fixture validation configuration (default: from config/paths.yaml)",
    )
    parser.add_argument(
        "--fixtures-dir",
        type=Path,
        default=None,
        help="Directory holding fixture files (default: from config/paths.yaml)",
    )
    parser.add_argument(
        "--endpoint",
        "-e",
        action="append",
        default=None,
        help="Only validate this endpoint (repeatable)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List endpoints without making requests",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit non-zero when drift or errors are found",
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="Write markdown and JSON reports to the reports directory",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    path_config = PathConfig()
    config = load_config(args.config or path_config.fixtures_config)
    fixtures_dir = args.fixtures_dir or path_config.fixtures_dir
    endpoints = get_endpoints(config, args.endpoint)
    start_date, end_date = get_date_range(config)

    console.print("[bold blue]Oura API Fixture Validator[/bold blue]")
    console.print(f"  Fixtures:   {fixtures_dir}")
    console.print(f"  Date range: {start_date} to {end_date}\n")

    if args.dry_run:
        for ep in endpoints:
            console.print(f"  {ep.endpoint} -> {ep.fixture}")
        return 0

    token = get_access_token(config)
    if not token:
        env_var = config.get("authentication", {}).get("env_var", "OURA_ACCESS_TOKEN")
        console.print(f"[red]Error: {env_var} environment variable is required[/red]")
        return 1

    store = FixtureStore(
        fixtures_dir,
        pretty_print=config.get("output", {}).get("pretty_print", True),
    )

    async def _run() -> ValidationSession:
        api = config.get("api", {})
        async with OuraClient(
            token,
            base_url=api.get("base_url", BASE_URL),
            timeout=api.get("timeout", 30),
        ) as client:
            return await run_validation(client, store, endpoints, start_date, end_date)

    session = asyncio.run(_run())

    console.print()
    print_summary(session)

    if args.report:
        reporter = FixtureReporter(session, path_config=path_config)
        markdown_path, json_path = reporter.generate_all()
        console.print(f"  markdown: {markdown_path}")
        console.print(f"  json:     {json_path}")

    if args.strict and (session.has_drift or session.has_errors):
        return 1

    console.print("\n[bold green]Done![/bold green]")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""CLI entry point for the test run dashboard."""

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from collections.abc import Mapping, Sequence
from typing import Any

from run_dashboard.backends.base import TestBackend
from run_dashboard.backends.loading import available_backends, load_backend_manifest
from run_dashboard.dashboard import Dashboard
from run_dashboard.errors import ApiError
from run_dashboard.formatting import format_duration, truncate_output
from run_dashboard.models.result import (
    TestResult,
    TestResultsResponse,
    TestRunResponse,
)
from run_dashboard.settings import Settings

STATUS_SYMBOLS = {
    "PASS": "✅",
    "FAIL": "❌",
    "ERROR": "❗",
    "RUNNING": "⏳",
}


def log_results_summary(log: logging.Logger, response: TestResultsResponse) -> None:
    """Log the summary cards followed by one line per result."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info(
        "Total: %d  Passed: %d  Failed: %d  Pass Rate: %d%%",
        response.total_tests,
        response.passed_tests,
        response.failed_tests,
        response.pass_rate,
    )
    log.info("=" * 80)

    if not response.results:
        log.info("No test results available")

    for result in response.results:
        symbol = STATUS_SYMBOLS.get(result.status, "?")
        log.info(
            "%s %s: %s (%s)",
            symbol,
            result.name,
            result.status,
            format_duration(result.duration),
        )
        if result.output:
            log.info("  Output: %s", truncate_output(result.output))

    log.info("Last updated: %s", response.last_updated)


def format_result(result: TestResult) -> dict[str, Any]:
    """Format a single result for JSON output."""
    return dataclasses.asdict(result)


def format_output(
    response: TestResultsResponse, last_run: TestRunResponse | None = None
) -> dict[str, Any]:
    """Format the results aggregate for JSON output."""
    output: dict[str, Any] = {
        "total": response.total_tests,
        "passed": response.passed_tests,
        "failed": response.failed_tests,
        "pass_rate": response.pass_rate,
        "last_updated": response.last_updated,
        "results": [format_result(r) for r in response.results],
    }
    if last_run is not None:
        output["run"] = dataclasses.asdict(last_run)
    return output


def print_error(message: str) -> None:
    """Print an error as JSON on stdout."""
    print(json.dumps({"error": message}))


def build_backend_config(
    backend_key: str, settings: Settings, config_json: str
) -> dict[str, Any]:
    """Merge the settings-derived backend config with a JSON override."""
    config: dict[str, Any] = {}
    if backend_key == "http":
        config = {
            "api_url": settings.api_url,
            "request_timeout": settings.request_timeout,
            "health_timeout": settings.health_timeout,
        }
    config.update(json.loads(config_json))
    return config


async def run_tests_command(log: logging.Logger, dashboard: Dashboard) -> int:
    """Run the batch after an initial load and report the reloaded results."""
    await dashboard.mount()
    await dashboard.run_tests()
    if dashboard.state.error:
        log.error("Test run failed: %s", dashboard.state.error)
        print_error(dashboard.state.error)
        return 1

    await dashboard.wait_for_refresh()
    if dashboard.state.results is None:
        message = dashboard.state.error or "Failed to load test results"
        log.error("%s", message)
        print_error(message)
        return 1

    log_results_summary(log, dashboard.state.results)
    print(
        json.dumps(
            format_output(dashboard.state.results, dashboard.state.last_run),
            indent=2,
        )
    )
    return 1 if dashboard.state.results.failed_tests else 0


async def show_results_command(
    log: logging.Logger, dashboard: Dashboard, test_name: str | None
) -> int:
    """Report all results, or only those of one test."""
    if test_name is not None:
        try:
            results = await dashboard.backend.get_results_for_test(test_name)
        except ApiError as exc:
            log.error("%s", exc.message)
            print_error(exc.message)
            return 1
        response = TestResultsResponse.from_results(results)
    else:
        await dashboard.mount()
        if dashboard.state.results is None:
            message = dashboard.state.error or "Failed to load test results"
            log.error("%s", message)
            print_error(message)
            return 1
        response = dashboard.state.results

    log_results_summary(log, response)
    print(json.dumps(format_output(response), indent=2))
    return 0


async def clear_results_command(log: logging.Logger, dashboard: Dashboard) -> int:
    """Delete all results on the backend."""
    await dashboard.clear_results()
    if dashboard.state.error:
        log.error("%s", dashboard.state.error)
        print_error(dashboard.state.error)
        return 1

    log.info("Test results cleared")
    print(json.dumps({"cleared": True}))
    return 0


async def health_command(log: logging.Logger, backend: TestBackend) -> int:
    """Report whether the backend is reachable."""
    healthy = await backend.health_check()
    log.info("Backend healthy: %s", healthy)
    print(json.dumps({"healthy": healthy}))
    return 0 if healthy else 1


async def run(
    command: str,
    backend_key: str,
    backend_config: Mapping[str, Any],
    settings: Settings,
    test_name: str | None = None,
) -> int:
    """Execute a dashboard command and return exit code."""
    log = logging.getLogger("run_dashboard")

    log.info("Loading backend: %s", backend_key)
    manifest = load_backend_manifest(backend_key)

    async with manifest.open(backend_config) as backend:
        dashboard = Dashboard(
            backend=backend,
            test_delay=settings.test_delay,
            refresh_delay=settings.refresh_delay,
        )

        if command == "run":
            return await run_tests_command(log, dashboard)
        if command == "results":
            return await show_results_command(log, dashboard, test_name)
        if command == "clear":
            return await clear_results_command(log, dashboard)
        if command == "health":
            return await health_command(log, backend)

    raise ValueError(f"Unknown command: {command}")


def parse_args(argv: Sequence[str] | None, settings: Settings) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Run automated tests on a remote service and view their results"
    )
    parser.add_argument(
        "--backend",
        default=settings.backend,
        help=f"Backend key ({', '.join(available_backends())})",
    )
    parser.add_argument(
        "--backend-config",
        default="{}",
        help="JSON configuration overriding the backend defaults",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("run", help="Run all available tests")
    results_parser = subparsers.add_parser("results", help="Show stored results")
    results_parser.add_argument(
        "--test",
        dest="test_name",
        default=None,
        help="Only show results of this test",
    )
    subparsers.add_parser("clear", help="Delete all stored results")
    subparsers.add_parser("health", help="Check that the backend is reachable")

    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    settings = Settings()
    args = parse_args(argv, settings)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            command=args.command,
            backend_key=args.backend,
            backend_config=build_backend_config(
                args.backend, settings, args.backend_config
            ),
            settings=settings,
            test_name=getattr(args, "test_name", None),
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()

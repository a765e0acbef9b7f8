"""Dashboard controller sequencing backend calls and holding view state."""

import asyncio
import logging
from dataclasses import dataclass, field

from run_dashboard.backends.base import TestBackend
from run_dashboard.errors import ApiError
from run_dashboard.models.result import TestResultsResponse, TestRunResponse

log = logging.getLogger(__name__)


def error_message(exc: Exception, default: str) -> str:
    """Return the user-visible message for a failed backend call."""
    if isinstance(exc, ApiError):
        return exc.message or default
    return str(exc) or default


@dataclass(kw_only=True)
class DashboardState:
    """Transient state a view renders from."""

    results: TestResultsResponse | None = None
    is_loading_results: bool = False
    is_running_tests: bool = False
    error: str | None = None
    last_run: TestRunResponse | None = None


@dataclass(kw_only=True)
class Dashboard:
    """Reacts to view triggers and keeps the dashboard state current.

    Errors raised by the backend never leave the controller; they are
    stored as a user-visible message in ``state.error``. A trigger whose
    operation is already in flight is ignored, mirroring a disabled control.
    """

    backend: TestBackend
    test_delay: float = 0.5
    refresh_delay: float = 1.5
    state: DashboardState = field(default_factory=DashboardState)
    pending_refresh: asyncio.Task[None] | None = field(default=None, init=False)

    async def mount(self) -> None:
        """Load results when the dashboard is first shown."""
        await self.load_results()

    async def load_results(self) -> None:
        """Fetch the results aggregate into the state."""
        self.state.is_loading_results = True
        self.state.error = None

        try:
            self.state.results = await self.backend.get_results()
        except Exception as exc:
            log.error("Failed to load test results: %s", exc, exc_info=exc)
            self.state.error = error_message(exc, "Failed to load test results")
        finally:
            self.state.is_loading_results = False

    async def refresh(self) -> None:
        """Reload results unless a load is already in flight."""
        if self.state.is_loading_results:
            log.debug("Ignoring refresh, results are already loading")
            return
        await self.load_results()

    async def run_tests(self) -> None:
        """Run the whole batch and schedule a results reload on success.

        The reload runs after ``refresh_delay`` to let the backend settle.
        The running flag is cleared as soon as the batch settles, before
        the reload happens.
        """
        if self.state.is_running_tests:
            log.debug("Ignoring run, tests are already running")
            return

        self.state.is_running_tests = True
        self.state.error = None
        self.state.last_run = None

        try:
            response = await self.backend.run_all_tests(self.test_delay)
            self.state.last_run = response
            log.info("%s (Run ID: %s)", response.message, response.run_id)
            self.pending_refresh = asyncio.create_task(self._reload_after_delay())
        except Exception as exc:
            log.error("Failed to run tests: %s", exc, exc_info=exc)
            self.state.error = error_message(exc, "Failed to run tests")
        finally:
            self.state.is_running_tests = False

    async def _reload_after_delay(self) -> None:
        await asyncio.sleep(self.refresh_delay)
        await self.load_results()

    async def wait_for_refresh(self) -> None:
        """Wait for the reload scheduled by the last run, if any."""
        if self.pending_refresh is not None:
            await self.pending_refresh

    async def clear_results(self) -> None:
        """Delete all results, then reload them; nothing is reloaded on failure."""
        self.state.error = None

        try:
            await self.backend.clear_results()
        except Exception as exc:
            log.error("Failed to clear test results: %s", exc, exc_info=exc)
            self.state.error = error_message(exc, "Failed to clear test results")
            return

        await self.load_results()

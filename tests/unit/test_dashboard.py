"""Tests for dashboard controller."""

import asyncio
from unittest.mock import Mock

import pytest

from run_dashboard.backends.base import TestBackend
from run_dashboard.dashboard import Dashboard
from run_dashboard.errors import ApiError
from run_dashboard.models.result import TestResultsResponse, TestRunResponse
from run_dashboard.testing.factories import TestResultFactory


@pytest.fixture
def backend_mock() -> Mock:
    """Create mock backend."""
    return Mock(spec=TestBackend)


@pytest.fixture
def dashboard(backend_mock: Mock) -> Dashboard:
    """Create dashboard without pacing delays."""
    return Dashboard(backend=backend_mock, test_delay=0, refresh_delay=0)


@pytest.fixture
def results() -> TestResultsResponse:
    """Create a results aggregate."""
    return TestResultsResponse.from_results(
        [
            TestResultFactory.build(status="PASS"),
            TestResultFactory.build(status="FAIL"),
        ]
    )


@pytest.fixture
def run_response() -> TestRunResponse:
    """Create a batch run summary."""
    return TestRunResponse(
        message="Test run completed successfully. 2/2 tests executed.",
        run_id="run-1700000000000",
        timestamp="2099-01-01T12:00:00.000Z",
    )


class TestMount:
    """Tests for mount and load_results."""

    async def test_stores_results(
        self,
        dashboard: Dashboard,
        backend_mock: Mock,
        results: TestResultsResponse,
    ) -> None:
        """Stores the fetched aggregate and clears the loading flag."""
        backend_mock.get_results.return_value = results

        await dashboard.mount()

        assert dashboard.state.results is results
        assert dashboard.state.error is None
        assert dashboard.state.is_loading_results is False

    async def test_stores_error_message(
        self, dashboard: Dashboard, backend_mock: Mock
    ) -> None:
        """Stores the error message instead of raising."""
        backend_mock.get_results.side_effect = ApiError("Request failed")

        await dashboard.mount()

        assert dashboard.state.results is None
        assert dashboard.state.error == "Request failed"
        assert dashboard.state.is_loading_results is False

    async def test_uses_default_message_for_empty_error(
        self, dashboard: Dashboard, backend_mock: Mock
    ) -> None:
        """Falls back to a generic message when the error has none."""
        backend_mock.get_results.side_effect = ApiError("")

        await dashboard.mount()

        assert dashboard.state.error == "Failed to load test results"

    async def test_stores_message_of_unexpected_error(
        self, dashboard: Dashboard, backend_mock: Mock
    ) -> None:
        """Stores the message of any exception raised by the backend."""
        backend_mock.get_results.side_effect = RuntimeError("backend plugin crashed")

        await dashboard.mount()

        assert dashboard.state.error == "backend plugin crashed"
        assert dashboard.state.is_loading_results is False

    async def test_sets_loading_flag_while_fetching(
        self,
        dashboard: Dashboard,
        backend_mock: Mock,
        results: TestResultsResponse,
    ) -> None:
        """Keeps the loading flag set until the fetch settles."""
        flags: list[bool] = []

        async def get_results() -> TestResultsResponse:
            flags.append(dashboard.state.is_loading_results)
            return results

        backend_mock.get_results.side_effect = get_results

        await dashboard.mount()

        assert flags == [True]
        assert dashboard.state.is_loading_results is False


class TestRefresh:
    """Tests for refresh."""

    async def test_reloads_results(
        self,
        dashboard: Dashboard,
        backend_mock: Mock,
        results: TestResultsResponse,
    ) -> None:
        """Fetches results again."""
        backend_mock.get_results.return_value = results

        await dashboard.refresh()

        backend_mock.get_results.assert_awaited_once()
        assert dashboard.state.results is results

    async def test_ignored_while_loading(
        self, dashboard: Dashboard, backend_mock: Mock
    ) -> None:
        """Does nothing while a load is already in flight."""
        dashboard.state.is_loading_results = True

        await dashboard.refresh()

        backend_mock.get_results.assert_not_called()


class TestRunTests:
    """Tests for run_tests."""

    async def test_stores_run_and_reloads_results(
        self,
        dashboard: Dashboard,
        backend_mock: Mock,
        results: TestResultsResponse,
        run_response: TestRunResponse,
    ) -> None:
        """Stores the run summary and reloads results after the delay."""
        backend_mock.run_all_tests.return_value = run_response
        backend_mock.get_results.return_value = results

        await dashboard.run_tests()

        assert dashboard.state.last_run is run_response
        assert dashboard.state.is_running_tests is False
        backend_mock.run_all_tests.assert_awaited_once_with(0)

        await dashboard.wait_for_refresh()

        backend_mock.get_results.assert_awaited_once()
        assert dashboard.state.results is results

    async def test_clears_running_flag_before_reload(
        self,
        backend_mock: Mock,
        results: TestResultsResponse,
        run_response: TestRunResponse,
    ) -> None:
        """Clears the running flag when the batch settles, not after the reload."""
        dashboard = Dashboard(backend=backend_mock, test_delay=0, refresh_delay=10)
        backend_mock.run_all_tests.return_value = run_response
        backend_mock.get_results.return_value = results

        await dashboard.run_tests()

        assert dashboard.state.is_running_tests is False
        assert dashboard.pending_refresh is not None
        assert not dashboard.pending_refresh.done()
        backend_mock.get_results.assert_not_called()

        dashboard.pending_refresh.cancel()
        with pytest.raises(asyncio.CancelledError):
            await dashboard.pending_refresh

    async def test_stores_error_and_skips_reload(
        self, dashboard: Dashboard, backend_mock: Mock
    ) -> None:
        """Stores the error message and schedules no reload on failure."""
        backend_mock.run_all_tests.side_effect = ApiError("No tests available to run")

        await dashboard.run_tests()

        assert dashboard.state.error == "No tests available to run"
        assert dashboard.state.last_run is None
        assert dashboard.state.is_running_tests is False
        assert dashboard.pending_refresh is None

    async def test_stores_unexpected_error_and_skips_reload(
        self, dashboard: Dashboard, backend_mock: Mock
    ) -> None:
        """Stores errors other than ApiError without raising."""
        backend_mock.run_all_tests.side_effect = KeyError("tests")

        await dashboard.run_tests()

        assert dashboard.state.error == "'tests'"
        assert dashboard.state.is_running_tests is False
        assert dashboard.pending_refresh is None

    async def test_reload_failure_is_stored(
        self,
        dashboard: Dashboard,
        backend_mock: Mock,
        run_response: TestRunResponse,
    ) -> None:
        """Stores a failure of the scheduled reload instead of failing the task."""
        backend_mock.run_all_tests.return_value = run_response
        backend_mock.get_results.side_effect = ConnectionResetError()

        await dashboard.run_tests()
        await dashboard.wait_for_refresh()

        assert dashboard.pending_refresh is not None
        assert dashboard.pending_refresh.exception() is None
        assert dashboard.state.error == "Failed to load test results"
        assert dashboard.state.is_loading_results is False

    async def test_clears_previous_error_and_run(
        self,
        dashboard: Dashboard,
        backend_mock: Mock,
        run_response: TestRunResponse,
    ) -> None:
        """Resets the error and last run before starting."""
        dashboard.state.error = "old error"
        dashboard.state.last_run = run_response
        seen: list[tuple[str | None, TestRunResponse | None]] = []

        async def run_all_tests(test_delay: float) -> TestRunResponse:
            seen.append((dashboard.state.error, dashboard.state.last_run))
            raise ApiError("Failed to fetch available tests")

        backend_mock.run_all_tests.side_effect = run_all_tests

        await dashboard.run_tests()

        assert seen == [(None, None)]
        assert dashboard.state.error == "Failed to fetch available tests"

    async def test_ignored_while_running(
        self, dashboard: Dashboard, backend_mock: Mock
    ) -> None:
        """Does nothing while a batch is already in flight."""
        dashboard.state.is_running_tests = True

        await dashboard.run_tests()

        backend_mock.run_all_tests.assert_not_called()

    async def test_passes_test_delay(self, backend_mock: Mock) -> None:
        """Runs the batch with the configured pause."""
        dashboard = Dashboard(backend=backend_mock, test_delay=0.75, refresh_delay=0)
        backend_mock.run_all_tests.side_effect = ApiError("stop")

        await dashboard.run_tests()

        backend_mock.run_all_tests.assert_awaited_once_with(0.75)


class TestClearResults:
    """Tests for clear_results."""

    async def test_reloads_after_clearing(
        self, dashboard: Dashboard, backend_mock: Mock
    ) -> None:
        """Reloads results immediately after a successful clear."""
        empty = TestResultsResponse.empty()
        backend_mock.get_results.return_value = empty

        await dashboard.clear_results()

        backend_mock.clear_results.assert_awaited_once()
        backend_mock.get_results.assert_awaited_once()
        assert dashboard.state.results is empty

    async def test_stores_error_without_reloading(
        self, dashboard: Dashboard, backend_mock: Mock
    ) -> None:
        """Stores the error and does not reload when clearing fails."""
        backend_mock.clear_results.side_effect = ApiError(
            "Failed to clear test results"
        )

        await dashboard.clear_results()

        assert dashboard.state.error == "Failed to clear test results"
        backend_mock.get_results.assert_not_called()

    async def test_stores_unexpected_error_without_reloading(
        self, dashboard: Dashboard, backend_mock: Mock
    ) -> None:
        """Stores errors other than ApiError and does not reload."""
        backend_mock.clear_results.side_effect = OSError("disk full")

        await dashboard.clear_results()

        assert dashboard.state.error == "disk full"
        backend_mock.get_results.assert_not_called()


async def test_wait_for_refresh_without_run(dashboard: Dashboard) -> None:
    """Returns immediately when no reload is scheduled."""
    await dashboard.wait_for_refresh()

    assert dashboard.pending_refresh is None

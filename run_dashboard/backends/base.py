"""Abstract base class for test-execution backends."""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from run_dashboard.errors import ApiError
from run_dashboard.models.result import (
    SingleRunResult,
    SkippedTest,
    TestResult,
    TestResultsResponse,
    TestRunResponse,
    utc_now_iso,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class TestBackend(ABC):
    """Abstract capability interface of a test-execution service.

    Implementations isolate all I/O and translate backend records into the
    display model. Every failure leaves an implementation as an ApiError,
    except where a method documents otherwise.
    """

    __test__ = False

    @abstractmethod
    async def list_tests(self) -> Sequence[str]:
        """Return the names of the tests available to run.

        Raises:
            ApiError: If the tests could not be listed

        """

    @abstractmethod
    async def run_test(self, test_name: str) -> SingleRunResult:
        """Run a single test and return its result.

        Args:
            test_name: Name of the test as returned by list_tests

        Returns:
            The converted result, or a SkippedTest if the backend did not
            produce one. Never raises for a per-test failure.

        """

    @abstractmethod
    async def get_results(self) -> TestResultsResponse:
        """Fetch all stored results with aggregate counts.

        Raises:
            ApiError: If the results could not be fetched

        """

    @abstractmethod
    async def get_results_for_test(self, test_name: str) -> Sequence[TestResult]:
        """Fetch the stored results of one test.

        Raises:
            ApiError: If the results could not be fetched

        """

    @abstractmethod
    async def clear_results(self) -> None:
        """Delete all stored results.

        Raises:
            ApiError: If the results could not be deleted

        """

    @abstractmethod
    async def health_check(self) -> bool:
        """Return whether the backend is reachable. Never raises."""

    async def run_all_tests(self, test_delay: float = 0.5) -> TestRunResponse:
        """Run every available test sequentially.

        Tests run one at a time with a fixed pause between invocations to
        bound the load on the backend. Tests that produce no result are
        counted as not executed and do not abort the batch.

        Args:
            test_delay: Seconds to wait between two test invocations

        Returns:
            Summary of the batch run

        Raises:
            ApiError: If the tests could not be listed or none are available

        """
        log.info("Starting test execution...")
        test_names = await self.list_tests()
        log.info("Available tests: %s", ", ".join(test_names))

        if not test_names:
            raise ApiError("No tests available to run")

        run_id = f"run-{time.time_ns() // 1_000_000}"
        started_at = utc_now_iso()

        log.info("Running %d test(s)...", len(test_names))
        outcomes: list[SingleRunResult] = []
        for index, test_name in enumerate(test_names):
            if index > 0:
                await asyncio.sleep(test_delay)
            log.info("Running test: %s", test_name)
            outcomes.append(await self.run_test(test_name))

        executed = sum(1 for o in outcomes if not isinstance(o, SkippedTest))
        log.info(
            "Test execution completed. %d/%d tests ran successfully.",
            executed,
            len(test_names),
        )

        return TestRunResponse(
            message=(
                "Test run completed successfully. "
                f"{executed}/{len(test_names)} tests executed."
            ),
            run_id=run_id,
            timestamp=started_at,
        )

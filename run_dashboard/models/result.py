"""Models for test results as displayed by the dashboard."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

PASSED_STATUSES: frozenset[str] = frozenset(["PASS"])
FAILED_STATUSES: frozenset[str] = frozenset(["FAIL", "ERROR"])


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True, kw_only=True)
class TestResult:
    """Result of a single test execution.

    Status is normally one of PASS, FAIL, ERROR or RUNNING. Unknown values
    reported by the backend are kept as-is.
    """

    __test__ = False

    id: str
    name: str
    status: str
    timestamp: str
    output: str
    duration: int | float | None = None


@dataclass(frozen=True, kw_only=True)
class SkippedTest:
    """Marker for a single-test run that produced no result.

    Returned instead of a TestResult when the backend rejects the run or the
    request fails, so that a batch can skip the test and continue.
    """

    test_name: str
    reason: str


type SingleRunResult = TestResult | SkippedTest


@dataclass(frozen=True, kw_only=True)
class TestRunResponse:
    """Summary of a completed batch run."""

    __test__ = False

    message: str
    run_id: str
    timestamp: str


@dataclass(frozen=True, kw_only=True)
class TestResultsResponse:
    """Aggregated view over all stored results."""

    __test__ = False

    results: Sequence[TestResult]
    total_tests: int
    passed_tests: int
    failed_tests: int
    last_updated: str

    @classmethod
    def from_results(
        cls, results: Sequence[TestResult], last_updated: str | None = None
    ) -> "TestResultsResponse":
        """Compute counts over results, folding ERROR into the failed count."""
        return cls(
            results=tuple(results),
            total_tests=len(results),
            passed_tests=sum(1 for r in results if r.status in PASSED_STATUSES),
            failed_tests=sum(1 for r in results if r.status in FAILED_STATUSES),
            last_updated=last_updated or utc_now_iso(),
        )

    @classmethod
    def empty(cls) -> "TestResultsResponse":
        """Return an all-zero aggregate stamped with the current time."""
        return cls.from_results(())

    @property
    def pass_rate(self) -> int:
        """Rounded percentage of passed tests, 0 when nothing ran."""
        if self.total_tests == 0:
            return 0
        # Halves round up.
        return int(self.passed_tests * 100 / self.total_tests + 0.5)

"""In-memory mock backend implementation."""

import logging
import uuid
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from run_dashboard.backends.base import TestBackend
from run_dashboard.backends.mock.config import MockBackendConfig
from run_dashboard.errors import ApiError
from run_dashboard.models.result import (
    SingleRunResult,
    SkippedTest,
    TestResult,
    TestResultsResponse,
    utc_now_iso,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class MockBackend(TestBackend):
    """Backend that runs nothing and stores results in memory."""

    config: MockBackendConfig = field(default_factory=MockBackendConfig)
    records: list[TestResult] = field(default_factory=list)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: MockBackendConfig
    ) -> AsyncGenerator["MockBackend", None]:
        """Create backend; there is no resource to manage."""
        yield cls(config=config)

    def _ensure_available(self, message: str) -> None:
        if not self.config.available:
            raise ApiError(message)

    def _status_for(self, test_name: str) -> str:
        if test_name in self.config.erroring:
            return "ERROR"
        if test_name in self.config.failing:
            return "FAIL"
        return "PASS"

    async def list_tests(self) -> Sequence[str]:
        self._ensure_available("Failed to fetch available tests")
        return list(self.config.tests)

    async def run_test(self, test_name: str) -> SingleRunResult:
        if not self.config.available:
            return SkippedTest(test_name=test_name, reason="Backend is not available")
        if test_name in self.config.rejected:
            log.error("Failed to run test %s: rejected by backend", test_name)
            return SkippedTest(test_name=test_name, reason="Rejected by backend")

        status = self._status_for(test_name)
        result = TestResult(
            id=uuid.uuid4().hex,
            name=test_name,
            status=status,
            timestamp=utc_now_iso(),
            output=f"Running {test_name}\n{status}",
            duration=self.config.duration_ms,
        )
        self.records.append(result)
        return result

    async def get_results(self) -> TestResultsResponse:
        if not self.config.available:
            log.warning("Backend is not available, returning empty results")
            return TestResultsResponse.empty()
        return TestResultsResponse.from_results(list(self.records))

    async def get_results_for_test(self, test_name: str) -> Sequence[TestResult]:
        self._ensure_available(f"Failed to fetch results for test: {test_name}")
        return [r for r in self.records if r.name == test_name]

    async def clear_results(self) -> None:
        self._ensure_available("Failed to clear test results")
        self.records.clear()

    async def health_check(self) -> bool:
        return self.config.available

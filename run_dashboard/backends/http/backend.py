"""HTTP backend implementation."""

import logging
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import aiohttp

from run_dashboard.backends.base import TestBackend
from run_dashboard.backends.http.config import HttpBackendConfig
from run_dashboard.backends.http.models import (
    AvailableTestsResponse,
    BackendResultsResponse,
    RunTestResponse,
)
from run_dashboard.errors import ApiError
from run_dashboard.models.result import (
    SingleRunResult,
    SkippedTest,
    TestResult,
    TestResultsResponse,
)

log = logging.getLogger(__name__)

# ValueError covers undecodable bodies and pydantic validation errors.
REQUEST_ERRORS = (aiohttp.ClientError, TimeoutError, ValueError)


@dataclass(frozen=True, kw_only=True)
class HttpBackend(TestBackend):
    """Test-execution service reached over its REST API."""

    config: HttpBackendConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: HttpBackendConfig
    ) -> AsyncGenerator["HttpBackend", None]:
        """Create backend with managed session lifecycle."""
        async with aiohttp.ClientSession(
            headers={"Content-Type": "application/json"},
            timeout=aiohttp.ClientTimeout(total=config.request_timeout),
        ) as session:
            yield cls(config=config, session=session)

    def _url(self, path: str) -> str:
        return f"{self.config.api_url.rstrip('/')}{path}"

    async def _request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return its decoded JSON body, raising on non-2xx."""
        async with self.session.request(method, self._url(path), **kwargs) as response:
            response.raise_for_status()
            return await response.json(content_type=None)

    async def list_tests(self) -> Sequence[str]:
        """List available tests via GET /tests."""
        try:
            data = await self._request_json("GET", "/tests")
            response = AvailableTestsResponse.model_validate(data)
        except REQUEST_ERRORS as exc:
            log.error("Error fetching available tests: %s", exc)
            raise ApiError("Failed to fetch available tests") from exc

        if not response.success:
            log.error("Backend reported failure listing tests")
            raise ApiError("Failed to fetch available tests")

        return list(response.tests)

    async def run_test(self, test_name: str) -> SingleRunResult:
        """Run one test via POST /run-tests."""
        try:
            data = await self._request_json(
                "POST", "/run-tests", json={"testName": test_name}
            )
            response = RunTestResponse.model_validate(data)
        except REQUEST_ERRORS as exc:
            log.error("Error running test %s: %s", test_name, exc)
            return SkippedTest(test_name=test_name, reason=str(exc) or repr(exc))

        if not response.success or response.result is None:
            reason = response.error or "No result returned"
            log.error("Failed to run test %s: %s", test_name, reason)
            return SkippedTest(test_name=test_name, reason=reason)

        return response.result.to_test_result()

    async def get_results(self) -> TestResultsResponse:
        """Fetch all results via GET /results.

        An unreachable backend yields an empty aggregate so that the
        dashboard stays usable when no service is running.
        """
        log.info("Fetching test results from backend...")
        try:
            data = await self._request_json("GET", "/results")
            response = BackendResultsResponse.model_validate(data)
        except aiohttp.ClientConnectorError as exc:
            log.warning("Backend is not available, returning empty results: %s", exc)
            return TestResultsResponse.empty()
        except REQUEST_ERRORS as exc:
            log.error("Error fetching test results: %s", exc)
            raise ApiError(str(exc) or "Failed to fetch test results") from exc

        if not response.success:
            log.error("Backend reported failure fetching test results")
            raise ApiError("Failed to fetch test results from backend")

        results = [record.to_test_result() for record in response.results]
        log.info("Fetched %d test results", len(results))
        return TestResultsResponse.from_results(results)

    async def get_results_for_test(self, test_name: str) -> Sequence[TestResult]:
        """Fetch one test's results via GET /results/test/{name}."""
        message = f"Failed to fetch results for test: {test_name}"
        try:
            data = await self._request_json(
                "GET", f"/results/test/{quote(test_name, safe='')}"
            )
            response = BackendResultsResponse.model_validate(data)
        except REQUEST_ERRORS as exc:
            log.error("Error fetching results for test %s: %s", test_name, exc)
            raise ApiError(message) from exc

        if not response.success:
            log.error("Backend reported failure fetching results for %s", test_name)
            raise ApiError(message)

        return [record.to_test_result() for record in response.results]

    async def clear_results(self) -> None:
        """Delete all results via DELETE /results."""
        try:
            async with self.session.delete(self._url("/results")) as response:
                response.raise_for_status()
        except (aiohttp.ClientError, TimeoutError) as exc:
            log.error("Error clearing test results: %s", exc)
            raise ApiError("Failed to clear test results") from exc

        log.info("Test results cleared successfully")

    async def health_check(self) -> bool:
        """Probe the health endpoint with a short timeout."""
        try:
            async with self.session.get(
                self.config.health_url,
                timeout=aiohttp.ClientTimeout(total=self.config.health_timeout),
            ) as response:
                return 200 <= response.status < 300
        except (aiohttp.ClientError, TimeoutError) as exc:
            log.error("Backend health check failed: %s", exc)
            return False

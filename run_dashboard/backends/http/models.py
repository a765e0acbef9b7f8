"""Pydantic models for test-execution service API responses."""

from collections.abc import Sequence

from pydantic import Field

from run_dashboard.models.base import Model
from run_dashboard.models.result import TestResult


class BackendTestResult(Model):
    """A stored test result as reported by the service."""

    id: str
    test_name: str = Field(..., alias="testName")
    status: str
    timestamp: str
    output: str | None = None
    error_output: str | None = Field(default=None, alias="errorOutput")
    duration: int | float | None = None
    script_type: str | None = Field(default=None, alias="scriptType")

    def to_test_result(self) -> TestResult:
        """Convert to the display model, appending error output when present."""
        output = self.output or ""
        if self.error_output:
            output += f"\n\nError: {self.error_output}"
        return TestResult(
            id=self.id,
            name=self.test_name,
            status=self.status,
            timestamp=self.timestamp,
            output=output,
            duration=self.duration,
        )


class AvailableTestsResponse(Model):
    """Response from the list tests API."""

    success: bool
    tests: Sequence[str] = ()


class RunTestResponse(Model):
    """Response from the run test API."""

    success: bool
    result: BackendTestResult | None = None
    error: str | None = None


class BackendResultsResponse(Model):
    """Response from the results APIs."""

    success: bool
    results: Sequence[BackendTestResult] = ()
    total: int | None = None

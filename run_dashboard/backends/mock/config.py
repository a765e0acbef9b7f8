"""Configuration for the mock backend."""

from collections.abc import Sequence

from pydantic import BaseModel


class MockBackendConfig(BaseModel):
    """Configuration for the in-memory mock backend.

    Tests listed in ``failing`` or ``erroring`` finish with FAIL or ERROR,
    tests listed in ``rejected`` produce no result, and every other test
    passes. ``available=False`` simulates an unreachable service.
    """

    tests: Sequence[str] = (
        "test_login.py",
        "test_checkout.py",
        "test_search.sh",
        "test_profile.py",
    )
    failing: Sequence[str] = ()
    erroring: Sequence[str] = ()
    rejected: Sequence[str] = ()
    available: bool = True
    duration_ms: int = 250

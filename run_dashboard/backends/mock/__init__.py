"""Mock backend module."""

from run_dashboard.backends.mock.backend import MockBackend
from run_dashboard.backends.mock.config import MockBackendConfig
from run_dashboard.backends.mock.manifest import mock_manifest

__all__ = ["MockBackend", "MockBackendConfig", "mock_manifest"]

"""Mock backend manifest."""

from run_dashboard.backends.manifest import BackendManifest
from run_dashboard.backends.mock.backend import MockBackend
from run_dashboard.backends.mock.config import MockBackendConfig

mock_manifest = BackendManifest(
    description="In-memory test service for demos and tests",
    config_cls=MockBackendConfig,
    backend_factory=MockBackend.from_config,
)

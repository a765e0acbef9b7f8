"""HTTP backend manifest."""

from run_dashboard.backends.http.backend import HttpBackend
from run_dashboard.backends.http.config import HttpBackendConfig
from run_dashboard.backends.manifest import BackendManifest

http_manifest = BackendManifest(
    description="REST test-execution service",
    config_cls=HttpBackendConfig,
    backend_factory=HttpBackend.from_config,
)

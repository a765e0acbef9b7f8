"""HTTP backend module."""

from run_dashboard.backends.http.backend import HttpBackend
from run_dashboard.backends.http.config import HttpBackendConfig
from run_dashboard.backends.http.manifest import http_manifest

__all__ = ["HttpBackend", "HttpBackendConfig", "http_manifest"]

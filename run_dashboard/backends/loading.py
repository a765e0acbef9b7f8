"""Discovery of test-execution backends from entry points."""

import logging
from importlib.metadata import EntryPoints, entry_points
from typing import Any

from run_dashboard.backends.manifest import BackendManifest

ENTRY_POINT_GROUP = "run_dashboard.backends"

log = logging.getLogger(__name__)


class BackendNotFoundError(Exception):
    """No backend is registered under the requested key."""


def _backend_entries() -> EntryPoints:
    return entry_points(group=ENTRY_POINT_GROUP)


def available_backends() -> list[str]:
    """Return the registered backend keys, sorted."""
    return sorted(entry.name for entry in _backend_entries())


def load_backend_manifest(key: str) -> BackendManifest[Any]:
    """Load the manifest registered under ``key``.

    Raises:
        BackendNotFoundError: If no backend is registered under ``key``, or
            the entry point does not resolve to a BackendManifest.

    """
    entries = _backend_entries()
    if key not in entries.names:
        raise BackendNotFoundError(
            f"Backend '{key}' not found. Available backends: {available_backends()}"
        )

    entry = entries[key]
    manifest = entry.load()
    if not isinstance(manifest, BackendManifest):
        raise BackendNotFoundError(
            f"Entry point '{key}' ({entry.value}) is not a backend manifest"
        )

    log.debug("Loaded backend '%s': %s", key, manifest.description)
    return manifest

"""Backend plugin manifest."""

from collections.abc import Callable, Mapping
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from run_dashboard.backends.base import TestBackend

type BackendFactory[ConfigT] = Callable[
    [ConfigT], AbstractAsyncContextManager[TestBackend]
]


@dataclass(frozen=True, kw_only=True)
class BackendManifest[ConfigT: BaseModel]:
    """A test-execution backend registered under the entry-point group.

    ``description`` is logged when the backend is loaded.
    """

    description: str
    config_cls: type[ConfigT]
    backend_factory: BackendFactory[ConfigT]

    def open(
        self, raw_config: Mapping[str, Any]
    ) -> AbstractAsyncContextManager[TestBackend]:
        """Validate raw config and return the backend's async context manager."""
        return self.backend_factory(self.config_cls.model_validate(raw_config))

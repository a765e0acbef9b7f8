"""Base model configuration for backend payloads and configs."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base model with standard configuration.

    Backend payloads use camelCase keys, so fields may be populated either by
    their alias or by their Python name.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

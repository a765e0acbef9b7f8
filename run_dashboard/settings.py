"""Application-wide settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Dashboard settings.

    Values are loaded from, in increasing priority: the defaults below, a
    ``.env`` file, and ``RUN_DASHBOARD_*`` environment variables.
    """

    model_config = SettingsConfigDict(
        env_prefix="RUN_DASHBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    backend: str = "http"
    api_url: str = "http://localhost:5000/api"
    request_timeout: float = 30.0
    health_timeout: float = 5.0
    # Pause between two tests of a batch, in seconds
    test_delay: float = 0.5
    # Wait before reloading results after a batch, in seconds
    refresh_delay: float = 1.5

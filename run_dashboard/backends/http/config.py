"""Configuration for the HTTP backend."""

from pydantic import BaseModel


class HttpBackendConfig(BaseModel):
    """Configuration for the HTTP backend."""

    api_url: str = "http://localhost:5000/api"
    request_timeout: float = 30.0
    health_timeout: float = 5.0

    @property
    def health_url(self) -> str:
        """Health endpoint, served next to the API root rather than under it."""
        return f"{self.api_url.rstrip('/').removesuffix('/api')}/health"

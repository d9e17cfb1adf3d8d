"""Environment-driven configuration for the Content API bridge."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_settings import BaseSettings

CONTENT_API_ENDPOINT = "https://content.camayak.com/v1/content/"
DEFAULT_PORT = 5000


@dataclass(frozen=True)
class Credentials:
    """API key and optional shared secret from the Camayak publishing destination."""

    api_key: str
    shared_secret: str | None = None

    @property
    def signs_requests(self) -> bool:
        return bool(self.shared_secret)

    def __repr__(self) -> str:
        # Never leak the secret into logs or tracebacks
        secret = "***" if self.shared_secret else None
        return f"Credentials(api_key={self.api_key!r}, shared_secret={secret!r})"


class Settings(BaseSettings):
    """Settings read from CAMAYAK_* environment variables (or .env)."""

    api_key: str
    shared_secret: str | None = None
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    content_api_endpoint: str = CONTENT_API_ENDPOINT
    request_timeout: float = 30.0
    shutdown_timeout: float = 10.0

    model_config = {"env_prefix": "CAMAYAK_", "env_file": ".env", "extra": "ignore"}

    def credentials(self) -> Credentials:
        return Credentials(api_key=self.api_key, shared_secret=self.shared_secret or None)

"""Client configuration using Pydantic Settings."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

from .protocol.constants import DEFAULT_TIMEOUT

# Prefer the system config file when installed, fall back to a local .env
_SYSTEM_CONF = Path("/etc/rrdcached-client/client.conf")
_ENV_FILE = _SYSTEM_CONF if _SYSTEM_CONF.exists() else Path(".env")


class Settings(BaseSettings):
    """Client settings loaded from environment variables and an env file."""

    # Daemon address: host, host:port, or a socket path when unix is set
    address: str = "localhost"
    unix: bool = False

    # Dial / read / write timeout in seconds
    timeout: float = DEFAULT_TIMEOUT

    # CLI logging
    log_level: str = "INFO"

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    model_config = {
        "env_prefix": "RRDCACHED_",
        "env_file": str(_ENV_FILE),
        "extra": "ignore",
    }


settings = Settings()

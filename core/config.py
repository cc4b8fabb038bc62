# =============================================================================
# core/config.py  —  Process-wide configuration
# =============================================================================
#
# Read ONCE at startup (see main.py) and never mutated afterwards.
#
# ENVIRONMENT VARIABLES:
#   KWEENKL_API_URL          Base URL of the kweenkl API
#                            (default: https://api.kweenkl.com)
#   KWEENKL_DEVICE_TOKEN     Admin credential.  When set, the four channel
#                            management tools are advertised and allowed.
#   KWEENKL_DEBUG            "true" turns on debug logging (to stderr)
#   KWEENKL_REQUEST_TIMEOUT  Seconds before an outbound request gives up
#
# Values can also come from a .env file in the working directory.
# =============================================================================

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://api.kweenkl.com"


class Settings(BaseSettings):
    api_url: str = DEFAULT_API_URL
    device_token: Optional[str] = None
    debug: bool = False
    request_timeout: float = 30.0

    model_config = SettingsConfigDict(
        env_prefix="KWEENKL_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if not value:
            return DEFAULT_API_URL
        return value.rstrip("/")

    @field_validator("device_token")
    @classmethod
    def _blank_token_is_unset(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value.strip()

    @field_validator("request_timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("request_timeout must be greater than zero")
        return value

    @property
    def channel_management_enabled(self) -> bool:
        """Capability flag shared by tool discovery and the dispatcher."""
        return self.device_token is not None


def load_settings() -> Settings:
    """Read settings from the environment (and .env)."""
    return Settings()

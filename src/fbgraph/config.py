"""
fbgraph Configuration

Settings are loaded from:
1. Environment variables (prefixed with FBGRAPH_)
2. A .env file in the working directory

Key settings:
- FBGRAPH_ACCESS_TOKEN: Graph API token used when an authorizer is built without one
- FBGRAPH_ENDPOINT: Graph API base URL (default: https://graph.facebook.com)
- FBGRAPH_TIMEOUT: Per-request timeout in seconds
"""

from functools import lru_cache
import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

FACEBOOK_ENDPOINT = "https://graph.facebook.com"


class Settings(BaseSettings):
    """fbgraph configuration settings."""

    endpoint: str = FACEBOOK_ENDPOINT
    timeout: float = Field(default=30.0, gt=0)

    access_token: str | None = None

    # Fields requested by User.get_me
    user_fields: str = "name,email"

    model_config = SettingsConfigDict(
        env_prefix="FBGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.endpoint = self.endpoint.rstrip("/")
        if self.endpoint != FACEBOOK_ENDPOINT:
            logger.info(f"Using non-default Graph endpoint {self.endpoint}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache settings."""
    return Settings()


def reload_settings() -> Settings:
    """Clear cached settings (useful for tests) and reload."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["Settings", "get_settings", "reload_settings", "FACEBOOK_ENDPOINT"]

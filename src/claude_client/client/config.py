"""
Immutable client configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, InstanceOf

from claude_client.types.model import ModelSpec

DEFAULT_BASE_URL = "https://api.anthropic.com"
DEFAULT_ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_TIMEOUT = 60.0
BASE_URL_ENV = "ANTHROPIC_BASE_URL"


class ClientConfig(BaseModel):
    """Configuration shared read-only by every call of one client.

    Build it through ClientConfigBuilder, which resolves environment
    defaults and validates the values.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    default_model: str
    default_max_tokens: int
    timeout: float = DEFAULT_TIMEOUT
    anthropic_version: str = DEFAULT_ANTHROPIC_VERSION
    anthropic_beta: tuple[str, ...] = ()
    proxy: str | None = None
    models: dict[str, InstanceOf[ModelSpec]] = Field(
        default_factory=dict, description="Limits and pricing of models missing from Model"
    )

"""Configuration management for the Stability client.

This module provides configuration loading using Pydantic Settings.
All configuration is read from environment variables with the STABILITY_
prefix, allowing the credential and endpoint to change without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (STABILITY_* prefix)
2. .env file in the working directory
3. Default values defined in StabilitySettings

Example .env file:
    STABILITY_API_KEY=sk-...
    STABILITY_BASE_URL=https://api.stability.ai
    STABILITY_API_VERSION=v1

No Global Instance
------------------
Unlike an application config, the API key is mandatory and must be read at
the moment a request is assembled, so there is no module-level instance.
Call ``get_settings()`` (or let ``ClientBuilder`` call it) instead.

Usage Example
-------------
    from stability_client.core.config import get_settings

    settings = get_settings()
    print(settings.base_url)
"""

from urllib.parse import urlsplit

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

API_KEY_ENV_VAR = "STABILITY_API_KEY"


class StabilitySettings(BaseSettings):
    """Settings for talking to the Stability REST API.

    Attributes
    ----------
    api_key : str
        Secret API key, sent as a bearer token. Required.
    base_url : str
        Scheme and authority of the API (no trailing path).
    api_version : str
        Version segment inserted between the base URL and every route.
    timeout : float | None
        Per-request timeout in seconds. ``None`` waits indefinitely.

    Examples
    --------
        >>> settings = StabilitySettings(api_key="sk-test", _env_file=None)
        >>> settings.authority
        'api.stability.ai'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STABILITY_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    api_key: str = Field(
        ...,
        min_length=1,
        description="Stability API key (STABILITY_API_KEY)",
    )
    base_url: str = Field(
        default="https://api.stability.ai",
        description="Scheme and host of the REST API",
    )
    api_version: str = Field(
        default="v1",
        description="Version path segment, e.g. 'v1'",
    )
    timeout: float | None = Field(
        default=None,
        description="Request timeout in seconds (None disables the timeout)",
        gt=0,
    )

    @property
    def authority(self) -> str:
        """Host (and port, if any) of ``base_url``, used for the host header."""
        return urlsplit(self.base_url).netloc

    @property
    def versioned_url(self) -> str:
        """Base URL joined with the version segment."""
        return f"{self.base_url.rstrip('/')}/{self.api_version.strip('/')}"


def get_settings(**overrides) -> StabilitySettings:
    """Load settings from the environment.

    Args:
        **overrides: Explicit values that take precedence over the environment

    Returns:
        A frozen StabilitySettings instance

    Raises:
        ConfigurationError: If the API key is missing or a value is invalid
    """
    try:
        return StabilitySettings(**overrides)
    except ValidationError as e:
        missing = [err for err in e.errors() if err.get("loc") == ("api_key",)]
        if missing:
            raise ConfigurationError(
                f"{API_KEY_ENV_VAR} environment variable is not set"
            ) from e
        raise ConfigurationError(f"Invalid Stability settings: {e}") from e

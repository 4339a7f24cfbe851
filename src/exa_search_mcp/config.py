import os
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from exa_search_mcp.errors import ExaConfigurationError

API_KEY_ENV_VAR = "EXASEARCH_API_KEY"
BASE_URL_ENV_VAR = "EXA_BASE_URL"

DEFAULT_BASE_URL = "https://api.exa.ai"


class ExaConfig(BaseModel):
    """Resolved settings for an `ExaClient`."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    api_key: str = Field(repr=False)
    base_url: str = DEFAULT_BASE_URL


def resolve_config(api_key: str | None = None, base_url: str | None = None) -> ExaConfig:
    """Resolve the client configuration from the arguments, falling back to the environment.

    Args:
        api_key: The Exa API key. Defaults to the `EXASEARCH_API_KEY` environment variable.
        base_url: The base URL of the Exa API. Defaults to `EXA_BASE_URL` or the production endpoint.

    Returns:
        The resolved configuration.

    Raises:
        ExaConfigurationError: If no API key was provided and none is set in the environment.
    """

    if not (exa_api_key := api_key or os.getenv(API_KEY_ENV_VAR)):
        raise ExaConfigurationError(API_KEY_ENV_VAR)

    return ExaConfig(
        api_key=exa_api_key,
        base_url=base_url or os.getenv(BASE_URL_ENV_VAR) or DEFAULT_BASE_URL,
    )

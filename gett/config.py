"""
Gett SDK Configuration
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from gett.exceptions import ValidationError


DEFAULT_BASE_URL = "https://open.ge.tt/1"
DEFAULT_TIMEOUT = 60.0
USER_AGENT = "Gett-Python-SDK/0.1.0"


class GettConfig(BaseModel):
    """Connection settings for a GettClient."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(default=DEFAULT_BASE_URL, description="API root, e.g. https://open.ge.tt/1")
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Request timeout in seconds")
    user_agent: str = USER_AGENT

    @field_validator("base_url")
    @classmethod
    def _strip_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GettConfig":
        """
        Build a configuration from environment variables.

        Reads GETT_BASE_URL and GETT_TIMEOUT, falling back to defaults.

        Raises:
            ValidationError: If GETT_TIMEOUT is not a positive number
        """
        env = os.environ if environ is None else environ
        try:
            return cls(
                base_url=env.get("GETT_BASE_URL", DEFAULT_BASE_URL),
                timeout=env.get("GETT_TIMEOUT", DEFAULT_TIMEOUT),
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid configuration: {e.errors()[0]['msg']}") from e

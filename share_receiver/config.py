"""
Process configuration, read once at startup from the environment.
"""
import logging
import os
import urllib.parse
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError
from .signing import AddressComparison

logger = logging.getLogger(__name__)


class ReceiverSettings(BaseModel):
    """Settings for the share receiver service"""
    model_config = ConfigDict(frozen=True)

    port: int = Field(..., ge=1, le=65535)
    web3_provider: str
    host: str = "0.0.0.0"
    address_comparison: AddressComparison = AddressComparison.CHECKSUM
    rpc_timeout: float = Field(30, gt=0)
    log_level: str = "INFO"

    @field_validator("web3_provider")
    @classmethod
    def _check_provider_url(cls, value: str) -> str:
        parsed = urllib.parse.urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"WEB3_PROVIDER must be an http(s) URL (got: {value!r})")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ReceiverSettings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Validated settings

        Raises:
            ConfigurationError: If PORT or WEB3_PROVIDER is missing, or any
                value is invalid
        """
        env = os.environ if environ is None else environ

        for required in ("PORT", "WEB3_PROVIDER"):
            if not env.get(required, "").strip():
                raise ConfigurationError(f"Missing required {required} environment variable")

        values = {
            "port": env["PORT"].strip(),
            "web3_provider": env["WEB3_PROVIDER"].strip(),
        }
        optional = {
            "HOST": "host",
            "ADDRESS_COMPARISON": "address_comparison",
            "RPC_TIMEOUT": "rpc_timeout",
            "LOG_LEVEL": "log_level",
        }
        for env_name, field_name in optional.items():
            if env.get(env_name):
                values[field_name] = env[env_name].strip()
        if "address_comparison" in values:
            values["address_comparison"] = values["address_comparison"].lower()

        try:
            return cls.model_validate(values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e


def load_settings(dotenv_path: Optional[str] = None) -> ReceiverSettings:
    """Load a .env file, if any, then read settings from the environment"""
    if load_dotenv(dotenv_path):
        logger.debug("Loaded environment from .env file")
    return ReceiverSettings.from_env()

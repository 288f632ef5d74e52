from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from azure_monitor_samples.errors import ConfigurationError


ENV_TENANT_ID = "AZURE_TENANT_ID"
ENV_CLIENT_ID = "AZURE_CLIENT_ID"
ENV_CLIENT_SECRET = "AZURE_CLIENT_SECRET"
ENV_SUBSCRIPTION_ID = "AZURE_SUBSCRIPTION_ID"

REQUIRED_ENV_VARS = (ENV_TENANT_ID, ENV_CLIENT_ID, ENV_CLIENT_SECRET, ENV_SUBSCRIPTION_ID)

MISSING_CONFIGURATION_MESSAGE = "missing required environment configuration"


def _is_truthy(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def maybe_load_dotenv() -> None:
    if _is_truthy(os.environ.get("DISABLE_DOTENV")):
        return
    load_dotenv(override=False)


def missing_configuration_instructions() -> str:
    names = ", ".join(REQUIRED_ENV_VARS[:-1])
    return f"Please provide environment variables for {names} and {REQUIRED_ENV_VARS[-1]}."


@dataclass(frozen=True)
class Credentials:
    tenant_id: str
    client_id: str
    client_secret: str = field(repr=False)
    subscription_id: str


def load_credentials(environ: Optional[Mapping[str, str]] = None) -> Credentials:
    """
    Read the service principal credentials from the environment.

    This is the only place credentials are read. All four values are required;
    blank values count as missing.
    """
    env = os.environ if environ is None else environ

    values = {name: (env.get(name) or "").strip() for name in REQUIRED_ENV_VARS}
    missing: List[str] = [name for name, value in values.items() if not value]
    if missing:
        raise ConfigurationError(MISSING_CONFIGURATION_MESSAGE, missing=missing)

    return Credentials(
        tenant_id=values[ENV_TENANT_ID],
        client_id=values[ENV_CLIENT_ID],
        client_secret=values[ENV_CLIENT_SECRET],
        subscription_id=values[ENV_SUBSCRIPTION_ID],
    )


class MonitorSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MONITOR_", extra="ignore")

    arm_endpoint: str = "https://management.azure.com"
    api_version: str = "2018-01-01"
    # None disables the HTTP timeout entirely.
    http_timeout_seconds: Optional[float] = None
    display_limit: int = 5

    @field_validator("arm_endpoint")
    @classmethod
    def _strip_endpoint(cls, value: str) -> str:
        endpoint = (value or "").strip().rstrip("/")
        if not endpoint.startswith("https://") and not endpoint.startswith("http://"):
            raise ValueError("arm_endpoint must be an http(s) URL.")
        return endpoint

    @field_validator("http_timeout_seconds")
    @classmethod
    def _positive_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError("http_timeout_seconds must be positive.")
        return value

    @field_validator("display_limit")
    @classmethod
    def _non_negative_limit(cls, value: int) -> int:
        if value < 0:
            raise ValueError("display_limit must be >= 0.")
        return value


def load_settings(**overrides: object) -> MonitorSettings:
    try:
        return MonitorSettings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid monitor settings: {exc}") from exc

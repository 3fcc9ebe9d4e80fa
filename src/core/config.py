"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core.types import IncidentPreference

_settings: Settings | None = None

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class NewRelicConfig(BaseModel):
    """The ``custom.newrelic`` block of a serverless service.

    Keys are accepted in the camelCase used by ``serverless.yml`` as well as
    in snake_case.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    policy_service_token: str = Field(alias="policyServiceToken", min_length=1)
    custom_policy_name: str = Field(alias="customPolicyName", min_length=1)
    infrastructure_condition_service_token: str = Field(
        alias="infrastructureConditionServiceToken", min_length=1,
    )
    incident_preference: IncidentPreference = Field(
        default=IncidentPreference.PER_POLICY, alias="incidentPreference",
    )
    violation_close_timer: int | None = Field(
        default=None, alias="violationCloseTimer", gt=0,
    )
    alerts: list[Any] = Field(default_factory=list)

    @field_validator("alerts", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class Settings(BaseModel):
    """Root settings container."""

    logging: LoggingConfig = LoggingConfig()


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file and cache globally.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.

    Returns:
        Parsed Settings instance.
    """
    global _settings  # noqa: PLW0603

    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
            if isinstance(raw, dict):
                data = raw

    _settings = Settings(**data)
    return _settings


def get_settings() -> Settings:
    """Return the cached settings, loading defaults if not yet loaded."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings  # noqa: PLW0603
    _settings = None

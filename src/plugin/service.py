"""Loading of the serverless service description and compiled template."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core.types import FunctionScope, ServiceContext


class ProviderDefinition(BaseModel):
    """The ``provider`` block; only the stage matters here."""

    model_config = ConfigDict(extra="ignore")

    name: str = "aws"
    stage: str = "dev"


class FunctionDefinition(BaseModel):
    """One entry of the ``functions`` block."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    alerts: list[Any] | None = None


class ServiceDefinition(BaseModel):
    """The parts of a ``serverless.yml`` needed to compile alerts."""

    model_config = ConfigDict(extra="ignore")

    service: str
    provider: ProviderDefinition = ProviderDefinition()
    custom: dict[str, Any] = Field(default_factory=dict)
    functions: dict[str, FunctionDefinition] = Field(default_factory=dict)

    @field_validator("service", mode="before")
    @classmethod
    def _service_name(cls, value: Any) -> Any:
        # Older serverless versions nest the name: ``service: {name: ...}``.
        if isinstance(value, dict):
            return value.get("name")
        return value

    @field_validator("custom", "functions", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def newrelic_block(self) -> dict[str, Any] | None:
        """The raw ``custom.newrelic`` block, or None when absent."""
        block = self.custom.get("newrelic")
        return block if isinstance(block, dict) else None

    def context(self, stage: str | None = None) -> ServiceContext:
        """Service identity and deployed functions, in declaration order."""
        return ServiceContext(
            service=self.service,
            stage=stage or self.provider.stage,
            functions=[
                FunctionScope(name=key, display_name=fn.name or "", alerts=fn.alerts)
                for key, fn in self.functions.items()
            ],
        )


def load_service(path: str | Path) -> ServiceDefinition:
    """Parse a serverless service description from YAML."""
    with open(path) as f:
        raw = yaml.safe_load(f)
    return ServiceDefinition.model_validate(raw if isinstance(raw, dict) else {})


def load_template(path: str | Path) -> dict[str, Any]:
    """Read a compiled CloudFormation template from JSON."""
    with open(path) as f:
        raw = json.load(f)
    return raw if isinstance(raw, dict) else {}

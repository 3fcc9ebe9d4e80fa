"""Domain types for alert resolution and CloudFormation synthesis."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class Category(StrEnum):
    """Resource category partitioning the alert catalog."""

    FUNCTION = "FUNCTION"
    API_GATEWAY = "API_GATEWAY"
    QUEUE = "QUEUE"
    TABLE = "TABLE"

    @property
    def resource_type(self) -> str:
        """CloudFormation resource type string for this category."""
        return _RESOURCE_TYPES[self]

    @property
    def name_field(self) -> str:
        """``Properties`` key holding the resource's display name."""
        return _NAME_FIELDS[self]

    @classmethod
    def from_resource_type(cls, resource_type: str) -> Category | None:
        for category, type_string in _RESOURCE_TYPES.items():
            if type_string == resource_type:
                return category
        return None


_RESOURCE_TYPES: dict[Category, str] = {
    Category.FUNCTION: "AWS::Lambda::Function",
    Category.API_GATEWAY: "AWS::ApiGateway::RestApi",
    Category.QUEUE: "AWS::SQS::Queue",
    Category.TABLE: "AWS::DynamoDB::Table",
}

_NAME_FIELDS: dict[Category, str] = {
    Category.FUNCTION: "FunctionName",
    Category.API_GATEWAY: "Name",
    Category.QUEUE: "QueueName",
    Category.TABLE: "TableName",
}


class Comparison(StrEnum):
    """Threshold comparison operator."""

    ABOVE = "above"
    BELOW = "below"
    EQUAL = "equal"


class TimeFunction(StrEnum):
    """Whether the threshold must hold for any or all of the duration."""

    ANY = "any"
    ALL = "all"


class IncidentPreference(StrEnum):
    """How New Relic rolls violations up into incidents."""

    PER_POLICY = "PER_POLICY"
    PER_CONDITION = "PER_CONDITION"
    PER_CONDITION_AND_TARGET = "PER_CONDITION_AND_TARGET"


# ── Catalog Types ───────────────────────────────────────────────


class AlertDefinition(BaseModel):
    """A catalog entry: one infrastructure condition with its defaults."""

    model_config = ConfigDict(frozen=True)

    type: str
    category: Category
    title: str
    enabled: bool = True
    violation_close_timer: int = 24  # hours
    event_type: str
    integration_provider: str
    select_value: str
    comparison: Comparison = Comparison.ABOVE
    threshold: int | float = 0
    duration_minutes: int = 1
    time_function: TimeFunction = TimeFunction.ANY
    where: str | None = None
    dlq: bool = False


class AlertSet(BaseModel):
    """Named bundle of alert types within one category."""

    model_config = ConfigDict(frozen=True)

    name: str
    category: Category
    alerts: tuple[str, ...]


# ── Selector Types ──────────────────────────────────────────────


class BareSelector(BaseModel):
    """An alert type or alert set referenced by name only."""

    model_config = ConfigDict(frozen=True)

    type: str


class OverrideSelector(BaseModel):
    """An alert type with per-selector overrides."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    type: str = ""
    filter: str | None = None
    violation_close_timer: int | None = Field(default=None, alias="violationCloseTimer")
    enabled: bool | None = None


AlertSelector = Union[BareSelector, OverrideSelector]


def parse_selector(raw: Any) -> AlertSelector:
    """Turn a raw config entry into a selector.

    Strings become a BareSelector, mappings an OverrideSelector. Anything
    that cannot be read yields an OverrideSelector with an empty type, which
    the resolver treats as unknown.
    """
    if isinstance(raw, (BareSelector, OverrideSelector)):
        return raw
    if isinstance(raw, str):
        return BareSelector(type=raw)
    if isinstance(raw, Mapping):
        try:
            return OverrideSelector.model_validate(dict(raw))
        except ValidationError:
            return OverrideSelector()
    return OverrideSelector()


class ResolvedAlert(AlertDefinition):
    """A catalog definition with selector overrides applied."""

    model_config = ConfigDict(frozen=False)

    filter: str | None = None
    resources: list[str] = Field(default_factory=list)


# ── Infrastructure Types ────────────────────────────────────────


class InfrastructureResource(BaseModel):
    """One entry of a CloudFormation ``Resources`` mapping."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: str = Field(alias="Type")
    properties: dict[str, Any] = Field(default_factory=dict, alias="Properties")

    def display_name(self, field: str | None) -> str | None:
        """Return the named property if it is a plain string."""
        if field is None:
            return None
        value = self.properties.get(field)
        return value if isinstance(value, str) and value else None


def resources_from_template(raw: Mapping[str, Any] | None) -> dict[str, InfrastructureResource]:
    """Parse a raw ``Resources`` mapping, skipping entries without a Type."""
    resources: dict[str, InfrastructureResource] = {}
    for name, body in (raw or {}).items():
        if not isinstance(body, Mapping) or not isinstance(body.get("Type"), str):
            continue
        properties = body.get("Properties")
        resources[name] = InfrastructureResource(
            type=body["Type"],
            properties=dict(properties) if isinstance(properties, Mapping) else {},
        )
    return resources


class FunctionScope(BaseModel):
    """A deployed function and its optional local alert list.

    ``alerts`` of None inherits the global list; any list, even an empty one,
    replaces it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    display_name: str = ""
    alerts: list[Any] | None = None


class ServiceContext(BaseModel):
    """Identity of the service being deployed."""

    model_config = ConfigDict(frozen=True)

    service: str
    stage: str
    functions: list[FunctionScope] = Field(default_factory=list)

    def function_entity(self, function: FunctionScope) -> str:
        """Deployed function name, following the Serverless default naming."""
        return function.display_name or f"{self.service}-{self.stage}-{function.name}"


Declaration = dict[str, Any]

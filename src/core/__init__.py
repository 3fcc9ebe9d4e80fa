"""Core module — config, types, logging."""

from src.core.config import (
    LoggingConfig,
    NewRelicConfig,
    Settings,
    get_settings,
    load_settings,
    reset_settings,
)
from src.core.logging import setup_logging
from src.core.types import (
    AlertDefinition,
    AlertSelector,
    AlertSet,
    BareSelector,
    Category,
    Declaration,
    FunctionScope,
    IncidentPreference,
    InfrastructureResource,
    OverrideSelector,
    ResolvedAlert,
    ServiceContext,
    parse_selector,
    resources_from_template,
)

__all__ = [
    "AlertDefinition",
    "AlertSelector",
    "AlertSet",
    "BareSelector",
    "Category",
    "Declaration",
    "FunctionScope",
    "IncidentPreference",
    "InfrastructureResource",
    "LoggingConfig",
    "NewRelicConfig",
    "OverrideSelector",
    "ResolvedAlert",
    "ServiceContext",
    "Settings",
    "get_settings",
    "load_settings",
    "parse_selector",
    "reset_settings",
    "resources_from_template",
    "setup_logging",
]

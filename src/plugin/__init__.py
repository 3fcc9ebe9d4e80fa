"""Serverless plugin shell — service loading and template compilation."""

from src.plugin.compiler import POLICY_RESOURCE_TYPE, NewRelicAlertsPlugin
from src.plugin.service import (
    FunctionDefinition,
    ServiceDefinition,
    load_service,
    load_template,
)

__all__ = [
    "POLICY_RESOURCE_TYPE",
    "FunctionDefinition",
    "NewRelicAlertsPlugin",
    "ServiceDefinition",
    "load_service",
    "load_template",
]

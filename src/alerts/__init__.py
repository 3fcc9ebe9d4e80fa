"""Alert catalog, resolution, matching, and CloudFormation synthesis."""

from src.alerts.catalog import AlertCatalog, default_catalog
from src.alerts.definitions import (
    AlertsSet,
    ApiGatewayAlert,
    DynamoDbAlert,
    FunctionAlert,
    SqsAlert,
)
from src.alerts.exceptions import (
    AlertsError,
    CatalogError,
    ConfigurationError,
    UnknownAlertError,
)
from src.alerts.matcher import ResourceMatcher, match_resources
from src.alerts.resolver import AlertResolver
from src.alerts.synthesizer import DeclarationSynthesizer, declaration_key, normalize_name

__all__ = [
    "AlertCatalog",
    "AlertResolver",
    "AlertsError",
    "AlertsSet",
    "ApiGatewayAlert",
    "CatalogError",
    "ConfigurationError",
    "DeclarationSynthesizer",
    "DynamoDbAlert",
    "FunctionAlert",
    "ResourceMatcher",
    "SqsAlert",
    "UnknownAlertError",
    "declaration_key",
    "default_catalog",
    "match_resources",
    "normalize_name",
]

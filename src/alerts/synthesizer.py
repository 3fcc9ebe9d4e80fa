"""Declaration synthesis — pairs resolved alerts with matched resources.

Each (resource, alert) pair becomes one ``Custom::NewRelicInfrastructureCondition``
resource keyed by a CloudFormation-safe logical ID.
"""

from __future__ import annotations

import hashlib
import re
from collections.abc import Iterable, Mapping

import structlog

from src.alerts.catalog import AlertCatalog
from src.alerts.exceptions import UnknownAlertError
from src.alerts.matcher import ResourceMatcher
from src.alerts.resolver import AlertResolver
from src.core.types import (
    Category,
    Declaration,
    FunctionScope,
    InfrastructureResource,
    ResolvedAlert,
    ServiceContext,
)

logger = structlog.get_logger(__name__)

CONDITION_RESOURCE_TYPE = "Custom::NewRelicInfrastructureCondition"
DEFAULT_POLICY_REF = "NewRelicAlertPolicy"

_NON_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]")

# Infrastructure attribute naming the monitored entity, per category.
_ENTITY_ATTRIBUTES: dict[Category, str] = {
    Category.FUNCTION: "provider.functionName",
    Category.API_GATEWAY: "provider.apiName",
    Category.QUEUE: "provider.queueName",
    Category.TABLE: "provider.tableName",
}


def normalize_name(name: str) -> str:
    """Normalize a name into a CloudFormation logical ID fragment.

    Follows the Serverless convention: ``-`` becomes ``Dash``, ``_`` becomes
    ``Underscore`` and the first letter is capitalized. Any other
    non-alphanumeric character is dropped.

    Examples:
        "test-function" → "TestDashfunction"
        "my_table" → "MyUnderscoretable"
    """
    normalized = name.replace("-", "Dash").replace("_", "Underscore")
    normalized = _NON_ALPHANUMERIC.sub("", normalized)
    return normalized[:1].upper() + normalized[1:]


def declaration_key(resource_name: str, alert_type: str) -> str:
    return f"{normalize_name(resource_name)}{normalize_name(alert_type)}Condition"


def _quote(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def function_resources(
    context: ServiceContext,
    functions: Iterable[FunctionScope],
) -> dict[str, InfrastructureResource]:
    """Present deployed functions as Lambda resources keyed by function name."""
    return {
        fn.name: InfrastructureResource(
            type=Category.FUNCTION.resource_type,
            properties={Category.FUNCTION.name_field: context.function_entity(fn)},
        )
        for fn in functions
    }


def assign_resources(
    alerts: Iterable[ResolvedAlert],
    resources: Mapping[str, InfrastructureResource],
    matcher: ResourceMatcher | None = None,
) -> list[ResolvedAlert]:
    """Return copies of *alerts* with their matched resource names filled in."""
    matcher = matcher or ResourceMatcher()
    alerts = list(alerts)
    dlq_filters = matcher.dlq_filters(alerts)
    return [
        alert.model_copy(
            update={
                "resources": [
                    name for name, _ in matcher.match_alert(alert, resources, dlq_filters)
                ],
            },
        )
        for alert in alerts
    ]


class DeclarationSynthesizer:
    """Builds condition declarations for resolved alerts.

    - Alerts with no matching resource produce nothing.
    - Keys are ``<Resource><AlertType>Condition``. If two distinct pairs
      normalize to the same key, the later one gets a short hash suffix of
      its raw identity.
    - Output order follows alert order, then template order.
    """

    def __init__(
        self,
        catalog: AlertCatalog,
        condition_service_token: str,
        policy_ref: str = DEFAULT_POLICY_REF,
        matcher: ResourceMatcher | None = None,
    ) -> None:
        self._catalog = catalog
        self._service_token = condition_service_token
        self._policy_ref = policy_ref
        self._matcher = matcher or ResourceMatcher()

    # ── Public API ──────────────────────────────────────────────

    def synthesize(
        self,
        alerts: Iterable[ResolvedAlert],
        resources: Mapping[str, InfrastructureResource],
        category: Category,
        context: ServiceContext,
    ) -> dict[str, Declaration]:
        """Cross alerts of *category* with the resources they match."""
        declarations: dict[str, Declaration] = {}
        owners: dict[str, tuple[str, str]] = {}
        self._emit(alerts, resources, category, context, declarations, owners)
        return declarations

    def synthesize_functions(
        self,
        global_alerts: Iterable[ResolvedAlert],
        context: ServiceContext,
        resolver: AlertResolver,
    ) -> dict[str, Declaration]:
        """Function declarations with local alert lists taking precedence.

        A function that declares its own alert list is left out of the global
        cross product and receives only its local alerts.
        """
        declarations: dict[str, Declaration] = {}
        owners: dict[str, tuple[str, str]] = {}

        inheriting = [fn for fn in context.functions if fn.alerts is None]
        self._emit(
            global_alerts,
            function_resources(context, inheriting),
            Category.FUNCTION,
            context,
            declarations,
            owners,
        )

        for fn in context.functions:
            if fn.alerts is None:
                continue
            local_alerts = resolver.resolve(fn.alerts, Category.FUNCTION)
            self._emit(
                local_alerts,
                function_resources(context, [fn]),
                Category.FUNCTION,
                context,
                declarations,
                owners,
            )

        return declarations

    def build_declaration(
        self,
        alert: ResolvedAlert,
        resource_name: str,
        resource: InfrastructureResource,
        context: ServiceContext,
    ) -> Declaration:
        """Build one condition resource for an (alert, resource) pair."""
        if self._catalog.find(alert.type) is None:
            raise UnknownAlertError("Unknown alert")

        category = alert.category
        entity = resource.display_name(category.name_field) or resource_name

        where_clause = f"({_ENTITY_ATTRIBUTES[category]} = {_quote(entity)})"
        if alert.where:
            where_clause = f"{where_clause} AND ({alert.where})"

        if category == Category.FUNCTION:
            name = f"{context.service}-{context.stage} {alert.title}: {entity}"
        else:
            name = f"{alert.title}: {entity}"

        return {
            "Type": CONDITION_RESOURCE_TYPE,
            "Properties": {
                "ServiceToken": self._service_token,
                "policy_id": {"Ref": self._policy_ref},
                "name": name,
                "type": "infra_metric",
                "enabled": alert.enabled,
                "event_type": alert.event_type,
                "integration_provider": alert.integration_provider,
                "select_value": alert.select_value,
                "comparison": alert.comparison.value,
                "critical_threshold": {
                    "value": alert.threshold,
                    "duration_minutes": alert.duration_minutes,
                    "time_function": alert.time_function.value,
                },
                "where_clause": where_clause,
                "violation_close_timer": alert.violation_close_timer,
            },
        }

    # ── Internal ────────────────────────────────────────────────

    def _emit(
        self,
        alerts: Iterable[ResolvedAlert],
        resources: Mapping[str, InfrastructureResource],
        category: Category,
        context: ServiceContext,
        declarations: dict[str, Declaration],
        owners: dict[str, tuple[str, str]],
    ) -> None:
        scoped = [a for a in alerts if a.category == category]
        for alert in assign_resources(scoped, resources, self._matcher):
            if not alert.resources:
                logger.debug("alert_without_resources", alert=str(alert.type))
                continue
            for resource_name in alert.resources:
                identity = (resource_name, str(alert.type))
                key = self._unique_key(identity, owners)
                owners[key] = identity
                declarations[key] = self.build_declaration(
                    alert, resource_name, resources[resource_name], context,
                )

    @staticmethod
    def _unique_key(
        identity: tuple[str, str],
        owners: Mapping[str, tuple[str, str]],
    ) -> str:
        key = declaration_key(*identity)
        owner = owners.get(key)
        if owner is None or owner == identity:
            return key
        digest = hashlib.sha1(":".join(identity).encode(), usedforsecurity=False).hexdigest()[:8]
        return f"{key}{digest}"

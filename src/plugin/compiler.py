"""New Relic alerts plugin — compiles alert conditions into the template."""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from src.alerts.catalog import AlertCatalog, default_catalog
from src.alerts.exceptions import ConfigurationError
from src.alerts.resolver import AlertResolver, ReportFn
from src.alerts.synthesizer import DEFAULT_POLICY_REF, DeclarationSynthesizer
from src.core.config import NewRelicConfig
from src.core.types import (
    Category,
    Declaration,
    ResolvedAlert,
    resources_from_template,
)
from src.plugin.service import ServiceDefinition

logger = structlog.get_logger(__name__)

POLICY_RESOURCE_TYPE = "Custom::NewRelicPolicy"

# Template categories compiled after the functions, in this order.
_TEMPLATE_CATEGORIES = (Category.API_GATEWAY, Category.QUEUE, Category.TABLE)


class NewRelicAlertsPlugin:
    """Adds a New Relic policy and its conditions to a compiled template.

    Without a ``custom.newrelic`` block the plugin registers no hooks and
    compiles nothing. A block missing any required token raises
    ConfigurationError before anything is resolved.
    """

    def __init__(
        self,
        service: ServiceDefinition,
        template: Mapping[str, Any],
        catalog: AlertCatalog | None = None,
        report: ReportFn | None = None,
        stage: str | None = None,
    ) -> None:
        self.hooks: dict[str, Callable[[], dict[str, Any]]] = {}
        self.config: NewRelicConfig | None = None
        self._template = template
        self._context = service.context(stage)

        raw = service.newrelic_block()
        if raw is None:
            logger.info("newrelic_config_missing", service=service.service)
            return

        try:
            self.config = NewRelicConfig.model_validate(raw)
        except ValidationError as exc:
            fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
            raise ConfigurationError(
                f"Invalid newrelic configuration: {', '.join(fields) or 'custom.newrelic'}"
            ) from exc

        self._catalog = catalog or default_catalog()
        self._resolver = AlertResolver(
            self._catalog,
            report=report,
            default_violation_close_timer=self.config.violation_close_timer,
        )
        self._synthesizer = DeclarationSynthesizer(
            self._catalog,
            condition_service_token=self.config.infrastructure_condition_service_token,
            policy_ref=DEFAULT_POLICY_REF,
        )
        self._resources = resources_from_template(template.get("Resources"))
        self.hooks = {"package:compileEvents": self.compile}

    # ── CloudFormation fragments ────────────────────────────────

    def get_policy_cloudformation(self) -> dict[str, Declaration]:
        config = self._require_config()
        return {
            DEFAULT_POLICY_REF: {
                "Type": POLICY_RESOURCE_TYPE,
                "Properties": {
                    "ServiceToken": config.policy_service_token,
                    "name": config.custom_policy_name,
                    "incident_preference": config.incident_preference.value,
                },
            },
        }

    def get_global_alerts(self, selectors: list[Any] | None = None) -> list[ResolvedAlert]:
        """Resolve *selectors*, or the configured alert list, across categories."""
        config = self._require_config()
        return self._resolver.resolve(config.alerts if selectors is None else selectors)

    def get_function_alerts_cloudformation(
        self,
        global_alerts: list[ResolvedAlert] | None = None,
    ) -> dict[str, Declaration]:
        if global_alerts is None:
            global_alerts = self.get_global_alerts()
        return self._synthesizer.synthesize_functions(
            [a for a in global_alerts if a.category == Category.FUNCTION],
            self._context,
            self._resolver,
        )

    def get_alerts_cloudformation(
        self,
        resource_type: str,
        global_alerts: list[ResolvedAlert] | None = None,
    ) -> dict[str, Declaration]:
        """Conditions for every template resource of *resource_type*."""
        category = Category.from_resource_type(resource_type)
        if category is None:
            logger.warning("unsupported_resource_type", resource_type=resource_type)
            return {}
        if category == Category.FUNCTION:
            return self.get_function_alerts_cloudformation(global_alerts)

        if global_alerts is None:
            global_alerts = self.get_global_alerts()
        alerts = [a for a in global_alerts if a.category == category]
        return self._synthesizer.synthesize(alerts, self._resources, category, self._context)

    # ── Hook ────────────────────────────────────────────────────

    def compile(self) -> dict[str, Any]:
        """Return a copy of the template with policy and conditions merged in.

        Each category is compiled independently; a failure in one is logged
        and the others still contribute.
        """
        template = copy.deepcopy(dict(self._template))
        if self.config is None:
            return template

        resources: dict[str, Any] = dict(template.get("Resources") or {})
        global_alerts = self.get_global_alerts()

        conditions: dict[str, Declaration] = {}
        steps: list[tuple[str, Callable[[], dict[str, Declaration]]]] = [
            (
                Category.FUNCTION.value,
                lambda: self.get_function_alerts_cloudformation(global_alerts),
            ),
        ]
        for category in _TEMPLATE_CATEGORIES:
            steps.append(
                (
                    category.value,
                    lambda c=category: self.get_alerts_cloudformation(
                        c.resource_type, global_alerts,
                    ),
                ),
            )

        for name, step in steps:
            try:
                fragment = step()
            except Exception:
                logger.exception("category_compile_error", category=name)
                continue
            logger.info("category_compiled", category=name, conditions=len(fragment))
            conditions.update(fragment)

        resources.update(self.get_policy_cloudformation())
        resources.update(conditions)
        template["Resources"] = resources

        logger.info(
            "alerts_compiled",
            service=self._context.service,
            stage=self._context.stage,
            conditions=len(conditions),
        )
        return template

    def _require_config(self) -> NewRelicConfig:
        if self.config is None:
            raise ConfigurationError("newrelic configuration is not set")
        return self.config

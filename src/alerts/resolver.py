"""Alert resolution — expands alert sets and applies selector overrides."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

import structlog

from src.alerts.catalog import AlertCatalog
from src.core.types import (
    AlertDefinition,
    BareSelector,
    Category,
    OverrideSelector,
    ResolvedAlert,
    parse_selector,
)

logger = structlog.get_logger(__name__)

ReportFn = Callable[[str], None]


def log_unknown_alert(message: str) -> None:
    """Default report sink: a structured warning."""
    logger.warning("unknown_alert", message=message)


class AlertResolver:
    """Turns alert selectors into resolved alerts.

    - Alert sets are expanded in place, in declared order.
    - The first occurrence of an alert type wins; later duplicates are
      dropped without a report, since sets legitimately overlap.
    - Unknown selectors are reported through *report* and skipped. With a
      *category*, an alert of another category counts as unknown.
    """

    def __init__(
        self,
        catalog: AlertCatalog,
        report: ReportFn | None = None,
        default_violation_close_timer: int | None = None,
    ) -> None:
        self._catalog = catalog
        self._report = report or log_unknown_alert
        self._default_close_timer = default_violation_close_timer

    def resolve(
        self,
        selectors: Iterable[Any] | None,
        category: Category | None = None,
    ) -> list[ResolvedAlert]:
        resolved: list[ResolvedAlert] = []
        seen: set[str] = set()

        for raw in selectors or []:
            selector = parse_selector(raw)

            # Overrides on a set selector apply to every member.
            expanded: list[BareSelector | OverrideSelector] = [selector]
            if self._catalog.is_set(selector.type):
                expanded = [
                    selector.model_copy(update={"type": member})
                    for member in self._catalog.expand_set(selector.type) or []
                ]

            for item in expanded:
                definition = self._find(item.type, category)
                if definition is None:
                    self._report(f'Unknown alert "{item.type or raw}" skipped')
                    continue
                if definition.type in seen:
                    continue
                seen.add(definition.type)
                resolved.append(self._apply(definition, item))

        return resolved

    def _find(self, type_tag: str, category: Category | None) -> AlertDefinition | None:
        if not type_tag:
            return None
        if category is None:
            return self._catalog.find(type_tag)
        return self._catalog.lookup(category, type_tag)

    def _apply(
        self,
        definition: AlertDefinition,
        selector: BareSelector | OverrideSelector,
    ) -> ResolvedAlert:
        fields = definition.model_dump()
        if self._default_close_timer is not None:
            fields["violation_close_timer"] = self._default_close_timer

        if isinstance(selector, OverrideSelector):
            if selector.filter is not None:
                fields["filter"] = selector.filter
            if selector.violation_close_timer is not None:
                fields["violation_close_timer"] = selector.violation_close_timer
            if selector.enabled is not None:
                fields["enabled"] = selector.enabled

        return ResolvedAlert(**fields, resources=[])

"""Immutable registry of alert definitions and alert sets."""

from __future__ import annotations

from collections.abc import Iterable
from functools import lru_cache
from types import MappingProxyType

from src.alerts.definitions import ALERT_SETS, ALL_ALERTS
from src.alerts.exceptions import CatalogError
from src.core.types import AlertDefinition, AlertSet, Category


class AlertCatalog:
    """Lookup of alert definitions by category and of alert sets by name.

    Built once and never mutated. Construction rejects an inconsistent
    catalog: duplicate alert types, set names shadowing alert types, and
    sets that reference another set or an alert of a different category.
    """

    def __init__(
        self,
        definitions: Iterable[AlertDefinition],
        alert_sets: Iterable[AlertSet] = (),
    ) -> None:
        by_type: dict[str, AlertDefinition] = {}
        for definition in definitions:
            if definition.type in by_type:
                raise CatalogError(f"Duplicate alert type: {definition.type}")
            by_type[definition.type] = definition

        sets: dict[str, AlertSet] = {}
        for alert_set in alert_sets:
            if alert_set.name in by_type or alert_set.name in sets:
                raise CatalogError(f"Duplicate alert set name: {alert_set.name}")
            sets[alert_set.name] = alert_set

        for alert_set in sets.values():
            for member in alert_set.alerts:
                if member in sets:
                    raise CatalogError(
                        f"Alert set {alert_set.name} references another set: {member}"
                    )
                definition = by_type.get(member)
                if definition is None:
                    raise CatalogError(
                        f"Alert set {alert_set.name} references unknown alert: {member}"
                    )
                if definition.category != alert_set.category:
                    raise CatalogError(
                        f"Alert set {alert_set.name} mixes categories: {member}"
                    )

        self._definitions = MappingProxyType(by_type)
        self._sets = MappingProxyType(sets)

    def lookup(self, category: Category, type_tag: str) -> AlertDefinition | None:
        """Return the definition of *type_tag* within *category*, if any."""
        definition = self._definitions.get(type_tag)
        if definition is None or definition.category != category:
            return None
        return definition

    def find(self, type_tag: str) -> AlertDefinition | None:
        """Return the definition of *type_tag* in any category."""
        return self._definitions.get(type_tag)

    def expand_set(self, name: str) -> list[str] | None:
        """Return the ordered member types of an alert set."""
        alert_set = self._sets.get(name)
        if alert_set is None:
            return None
        return list(alert_set.alerts)

    def is_set(self, name: str) -> bool:
        return name in self._sets


@lru_cache(maxsize=1)
def default_catalog() -> AlertCatalog:
    """The built-in catalog, constructed on first use."""
    return AlertCatalog(ALL_ALERTS, ALERT_SETS)

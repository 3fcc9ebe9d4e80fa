"""Alert compilation exceptions."""

from __future__ import annotations


class AlertsError(Exception):
    """Base exception for alert compilation errors."""


class CatalogError(AlertsError):
    """The alert catalog is inconsistent (duplicate types, nested sets)."""


class UnknownAlertError(AlertsError):
    """An alert type has no definition in the catalog."""


class ConfigurationError(AlertsError):
    """Required New Relic configuration is missing or invalid."""

"""Resource matching — selects the template resources an alert applies to."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from src.core.types import Category, InfrastructureResource, ResolvedAlert

MatchedResource = tuple[str, InfrastructureResource]


def _resource_matches(
    name: str,
    resource: InfrastructureResource,
    needle: str,
    name_field: str | None,
) -> bool:
    """True if the logical name or the name property contains *needle*."""
    if needle in name:
        return True
    display = resource.display_name(name_field)
    return display is not None and needle in display


def match_resources(
    resources: Mapping[str, InfrastructureResource],
    resource_type: str,
    filter: str | None = None,  # noqa: A002
    name_field: str | None = None,
    exclude: Iterable[str] = (),
) -> list[MatchedResource]:
    """Return the resources of *resource_type*, in template order.

    The type comparison is exact. A *filter* keeps only resources whose
    logical name or *name_field* property contains it; any *exclude*
    substring found the same way drops the resource.
    """
    excluded = [e for e in exclude if e]
    matched: list[MatchedResource] = []
    for name, resource in resources.items():
        if resource.type != resource_type:
            continue
        if filter and not _resource_matches(name, resource, filter, name_field):
            continue
        if any(_resource_matches(name, resource, e, name_field) for e in excluded):
            continue
        matched.append((name, resource))
    return matched


class ResourceMatcher:
    """Category-aware matching of resolved alerts to resources.

    Queues have no structural link to their dead-letter companions here:
    a DLQ alert's filter (e.g. ``-dlq``) is the only thing that identifies
    them. DLQ alerts match the queues their filter selects, and every other
    queue alert skips those same queues.
    """

    def match_alert(
        self,
        alert: ResolvedAlert,
        resources: Mapping[str, InfrastructureResource],
        dlq_filters: Iterable[str] = (),
    ) -> list[MatchedResource]:
        category = alert.category
        exclude: Iterable[str] = ()
        if category == Category.QUEUE and not alert.dlq:
            exclude = dlq_filters
        return match_resources(
            resources,
            category.resource_type,
            filter=alert.filter,
            name_field=category.name_field,
            exclude=exclude,
        )

    @staticmethod
    def dlq_filters(alerts: Iterable[ResolvedAlert]) -> list[str]:
        """Filters of the queue alerts that watch dead-letter queues."""
        return [
            a.filter
            for a in alerts
            if a.category == Category.QUEUE and a.dlq and a.filter
        ]

"""Tests for resource matching — type, filter, and DLQ companion rules."""

from __future__ import annotations

from src.alerts.catalog import default_catalog
from src.alerts.definitions import ApiGatewayAlert, SqsAlert
from src.alerts.matcher import ResourceMatcher, match_resources
from src.core.types import InfrastructureResource, ResolvedAlert

QUEUE = "AWS::SQS::Queue"


# ── Helpers ─────────────────────────────────────────────────────


def _queue(name: str) -> InfrastructureResource:
    return InfrastructureResource(type=QUEUE, properties={"QueueName": name})


def _resources() -> dict[str, InfrastructureResource]:
    return {
        "Queue": _queue("simple-queue"),
        "QueueDlq": _queue("simple-queue-dlq"),
        "ApiGateway": InfrastructureResource(
            type="AWS::ApiGateway::RestApi", properties={"Name": "api-gateway"}
        ),
    }


def _alert(type_: str, **kw: object) -> ResolvedAlert:
    definition = default_catalog().find(type_)
    assert definition is not None
    return ResolvedAlert(**{**definition.model_dump(), **kw})


# ── match_resources ─────────────────────────────────────────────


class TestMatchResources:
    def test_empty_map(self) -> None:
        assert match_resources({}, QUEUE) == []
        assert match_resources({}, QUEUE, filter="-dlq", name_field="QueueName") == []

    def test_exact_type_match(self) -> None:
        names = [name for name, _ in match_resources(_resources(), QUEUE)]
        assert names == ["Queue", "QueueDlq"]

    def test_type_match_is_case_sensitive(self) -> None:
        assert match_resources(_resources(), "aws::sqs::queue") == []

    def test_filter_on_property(self) -> None:
        matched = match_resources(_resources(), QUEUE, filter="-dlq", name_field="QueueName")
        assert [name for name, _ in matched] == ["QueueDlq"]

    def test_filter_on_logical_name(self) -> None:
        matched = match_resources(_resources(), QUEUE, filter="Dlq")
        assert [name for name, _ in matched] == ["QueueDlq"]

    def test_filter_without_hits(self) -> None:
        assert match_resources(_resources(), QUEUE, filter="nothing", name_field="QueueName") == []

    def test_exclude(self) -> None:
        matched = match_resources(_resources(), QUEUE, name_field="QueueName", exclude=["-dlq"])
        assert [name for name, _ in matched] == ["Queue"]

    def test_empty_exclude_ignored(self) -> None:
        matched = match_resources(_resources(), QUEUE, exclude=[""])
        assert len(matched) == 2

    def test_returns_resource_objects(self) -> None:
        [(name, resource)] = match_resources(_resources(), "AWS::ApiGateway::RestApi")
        assert name == "ApiGateway"
        assert resource.properties["Name"] == "api-gateway"


# ── ResourceMatcher ─────────────────────────────────────────────


class TestResourceMatcher:
    def test_dlq_alert_with_filter_matches_companions_only(self) -> None:
        alert = _alert(SqsAlert.DLQ_VISIBLE_MESSAGES, filter="-dlq")
        matched = ResourceMatcher().match_alert(alert, _resources())
        assert [name for name, _ in matched] == ["QueueDlq"]

    def test_dlq_alert_without_companions(self) -> None:
        alert = _alert(SqsAlert.DLQ_VISIBLE_MESSAGES, filter="-dlq")
        assert ResourceMatcher().match_alert(alert, {"Queue": _queue("simple-queue")}) == []

    def test_non_dlq_queue_alert_skips_companions(self) -> None:
        alert = _alert(SqsAlert.VISIBLE_MESSAGES)
        matched = ResourceMatcher().match_alert(alert, _resources(), dlq_filters=["-dlq"])
        assert [name for name, _ in matched] == ["Queue"]

    def test_non_dlq_queue_alert_without_dlq_filters(self) -> None:
        alert = _alert(SqsAlert.VISIBLE_MESSAGES)
        matched = ResourceMatcher().match_alert(alert, _resources())
        assert [name for name, _ in matched] == ["Queue", "QueueDlq"]

    def test_dlq_filters_ignore_other_alerts(self) -> None:
        alerts = [
            _alert(SqsAlert.DLQ_VISIBLE_MESSAGES, filter="-dlq"),
            _alert(SqsAlert.VISIBLE_MESSAGES, filter="simple"),
            _alert(SqsAlert.DLQ_VISIBLE_MESSAGES),
            _alert(ApiGatewayAlert.ERRORS_4XX, filter="api"),
        ]
        assert ResourceMatcher.dlq_filters(alerts) == ["-dlq"]

    def test_other_categories_ignore_dlq_filters(self) -> None:
        alert = _alert(ApiGatewayAlert.ERRORS_4XX)
        matched = ResourceMatcher().match_alert(alert, _resources(), dlq_filters=["api"])
        assert [name for name, _ in matched] == ["ApiGateway"]

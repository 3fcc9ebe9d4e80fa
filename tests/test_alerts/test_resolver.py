"""Tests for AlertResolver — set expansion, overrides, unknown reporting."""

from __future__ import annotations

from structlog.testing import capture_logs

from src.alerts.catalog import default_catalog
from src.alerts.definitions import (
    AlertsSet,
    ApiGatewayAlert,
    DynamoDbAlert,
    FunctionAlert,
    SqsAlert,
)
from src.alerts.resolver import AlertResolver
from src.core.types import BareSelector, Category, OverrideSelector


# ── Helpers ─────────────────────────────────────────────────────


class RecordingReport:
    """Report sink that keeps every message."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)


def _resolver(**kw: object) -> tuple[AlertResolver, RecordingReport]:
    report = RecordingReport()
    return AlertResolver(default_catalog(), report=report, **kw), report  # type: ignore[arg-type]


# ── Basics ──────────────────────────────────────────────────────


class TestEmpty:
    def test_empty_list(self) -> None:
        resolver, report = _resolver()
        for category in Category:
            assert resolver.resolve([], category) == []
        assert report.messages == []

    def test_none(self) -> None:
        resolver, _ = _resolver()
        assert resolver.resolve(None) == []


class TestLookup:
    def test_bare_selector_keeps_defaults(self) -> None:
        resolver, _ = _resolver()
        [alert] = resolver.resolve([FunctionAlert.THROTTLES])
        assert alert.type == FunctionAlert.THROTTLES
        assert alert.title == "Function Throttles"
        assert alert.enabled is True
        assert alert.violation_close_timer == 24
        assert alert.filter is None
        assert alert.resources == []

    def test_typed_selectors_accepted(self) -> None:
        resolver, _ = _resolver()
        alerts = resolver.resolve(
            [BareSelector(type=FunctionAlert.ERRORS), OverrideSelector(type=SqsAlert.VISIBLE_MESSAGES)]
        )
        assert [a.type for a in alerts] == [FunctionAlert.ERRORS, SqsAlert.VISIBLE_MESSAGES]

    def test_order_follows_input(self) -> None:
        resolver, _ = _resolver()
        selectors = [ApiGatewayAlert.ERRORS_5XX, FunctionAlert.ERRORS, DynamoDbAlert.USER_ERRORS]
        assert [a.type for a in resolver.resolve(selectors)] == selectors

    def test_category_scope_reports_other_categories(self) -> None:
        resolver, report = _resolver()
        alerts = resolver.resolve(
            [FunctionAlert.ERRORS, ApiGatewayAlert.ERRORS_4XX], Category.API_GATEWAY
        )
        assert [a.type for a in alerts] == [ApiGatewayAlert.ERRORS_4XX]
        assert report.messages == ['Unknown alert "functionErrors" skipped']

    def test_local_list_of_wrong_category_is_reported(self) -> None:
        resolver, report = _resolver()
        assert resolver.resolve([ApiGatewayAlert.ERRORS_4XX], Category.FUNCTION) == []
        assert report.messages == ['Unknown alert "apiGateway4xxErrors" skipped']

    def test_without_category_every_known_alert_resolves(self) -> None:
        resolver, report = _resolver()
        alerts = resolver.resolve([FunctionAlert.ERRORS, ApiGatewayAlert.ERRORS_4XX])
        assert len(alerts) == 2
        assert report.messages == []


# ── Alert Sets ──────────────────────────────────────────────────


class TestAlertSets:
    def test_set_expands_in_catalog_order(self) -> None:
        resolver, _ = _resolver()
        alerts = resolver.resolve([AlertsSet.DYNAMO_DB_SYSTEM_ERRORS])
        expected = default_catalog().expand_set(AlertsSet.DYNAMO_DB_SYSTEM_ERRORS)
        assert [a.type for a in alerts] == expected
        assert len(alerts) == 8
        assert all(a.enabled and a.violation_close_timer == 24 for a in alerts)

    def test_set_expands_in_place(self) -> None:
        resolver, _ = _resolver()
        alerts = resolver.resolve(
            [FunctionAlert.ERRORS, AlertsSet.API_GATEWAY_ERRORS, FunctionAlert.THROTTLES]
        )
        assert [a.type for a in alerts] == [
            FunctionAlert.ERRORS,
            ApiGatewayAlert.ERRORS_4XX,
            ApiGatewayAlert.ERRORS_5XX,
            FunctionAlert.THROTTLES,
        ]

    def test_overlapping_sets_do_not_duplicate(self) -> None:
        resolver, report = _resolver()
        alerts = resolver.resolve(
            [AlertsSet.DYNAMO_DB_SYSTEM_ERRORS, AlertsSet.DYNAMO_DB_ALL]
        )
        types = [a.type for a in alerts]
        assert len(types) == len(set(types)) == 10
        assert types[-2:] == [DynamoDbAlert.USER_ERRORS, DynamoDbAlert.THROTTLED_REQUESTS]
        assert report.messages == []

    def test_first_occurrence_wins(self) -> None:
        resolver, _ = _resolver()
        alerts = resolver.resolve(
            [
                {"type": FunctionAlert.DURATION_1_SEC, "enabled": False},
                AlertsSet.FUNCTION_DURATIONS,
            ]
        )
        assert [a.type for a in alerts] == [
            FunctionAlert.DURATION_1_SEC,
            FunctionAlert.DURATION_5_SEC,
            FunctionAlert.DURATION_10_SEC,
        ]
        assert alerts[0].enabled is False
        assert alerts[1].enabled is True

    def test_overrides_on_set_apply_to_members(self) -> None:
        resolver, _ = _resolver()
        alerts = resolver.resolve([{"type": AlertsSet.SQS_ALL, "violationCloseTimer": 6}])
        assert [a.type for a in alerts] == list(SqsAlert)
        assert {a.violation_close_timer for a in alerts} == {6}

    def test_length_bounded_by_expansion(self) -> None:
        resolver, _ = _resolver()
        selectors = [AlertsSet.SQS_ALL, SqsAlert.VISIBLE_MESSAGES, AlertsSet.SQS_ALL]
        assert len(resolver.resolve(selectors)) <= 3 + 1 + 3


# ── Overrides ───────────────────────────────────────────────────


class TestOverrides:
    def test_filter_override(self) -> None:
        resolver, _ = _resolver()
        [alert] = resolver.resolve([{"type": SqsAlert.DLQ_VISIBLE_MESSAGES, "filter": "-dlq"}])
        assert alert.filter == "-dlq"
        assert alert.enabled is True
        assert alert.violation_close_timer == 24

    def test_close_timer_and_enabled_override(self) -> None:
        resolver, _ = _resolver()
        [alert] = resolver.resolve(
            [{"type": FunctionAlert.ERRORS, "violationCloseTimer": 8, "enabled": False}]
        )
        assert alert.violation_close_timer == 8
        assert alert.enabled is False

    def test_configured_default_close_timer(self) -> None:
        resolver, _ = _resolver(default_violation_close_timer=48)
        alerts = resolver.resolve(
            [FunctionAlert.ERRORS, {"type": FunctionAlert.THROTTLES, "violationCloseTimer": 2}]
        )
        assert [a.violation_close_timer for a in alerts] == [48, 2]

    def test_catalog_is_not_mutated(self) -> None:
        resolver, _ = _resolver()
        resolver.resolve([{"type": FunctionAlert.ERRORS, "enabled": False}])
        definition = default_catalog().find(FunctionAlert.ERRORS)
        assert definition is not None
        assert definition.enabled is True


# ── Unknown Selectors ───────────────────────────────────────────


class TestUnknown:
    def test_single_unknown_reports_once(self) -> None:
        resolver, report = _resolver()
        assert resolver.resolve(["unknownAlert"]) == []
        assert report.messages == ['Unknown alert "unknownAlert" skipped']

    def test_unknown_does_not_abort(self) -> None:
        resolver, report = _resolver()
        alerts = resolver.resolve([FunctionAlert.THROTTLES, "unknownAlert", FunctionAlert.ERRORS])
        assert [a.type for a in alerts] == [FunctionAlert.THROTTLES, FunctionAlert.ERRORS]
        assert len(report.messages) == 1

    def test_unknown_override_type(self) -> None:
        resolver, report = _resolver()
        assert resolver.resolve([{"type": "nope", "filter": "x"}]) == []
        assert report.messages == ['Unknown alert "nope" skipped']

    def test_missing_type_is_unknown(self) -> None:
        resolver, report = _resolver()
        assert resolver.resolve([{"filter": "-dlq"}]) == []
        assert len(report.messages) == 1
        assert "-dlq" in report.messages[0]

    def test_default_sink_logs_warning(self) -> None:
        resolver = AlertResolver(default_catalog())
        with capture_logs() as logs:
            resolver.resolve(["unknownAlert"])
        assert logs == [
            {
                "event": "unknown_alert",
                "log_level": "warning",
                "message": 'Unknown alert "unknownAlert" skipped',
            }
        ]


class TestDeterminism:
    def test_repeat_resolution_is_identical(self) -> None:
        resolver, _ = _resolver()
        selectors = [AlertsSet.DYNAMO_DB_ALL, {"type": SqsAlert.DLQ_VISIBLE_MESSAGES, "filter": "-dlq"}]
        assert resolver.resolve(selectors) == resolver.resolve(selectors)

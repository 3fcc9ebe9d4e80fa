"""Built-in New Relic infrastructure alert definitions and alert sets."""

from __future__ import annotations

from enum import StrEnum

from src.core.types import AlertDefinition, AlertSet, Category, TimeFunction


class FunctionAlert(StrEnum):
    ERRORS = "functionErrors"
    THROTTLES = "functionThrottles"
    DURATION_1_SEC = "functionDuration1Sec"
    DURATION_5_SEC = "functionDuration5Sec"
    DURATION_10_SEC = "functionDuration10Sec"
    ITERATOR_AGE = "functionIteratorAge"


class ApiGatewayAlert(StrEnum):
    ERRORS_4XX = "apiGateway4xxErrors"
    ERRORS_5XX = "apiGateway5xxErrors"
    LATENCY_1_SEC = "apiGatewayLatency1Sec"


class SqsAlert(StrEnum):
    DLQ_VISIBLE_MESSAGES = "sqsDlqVisibleMessages"
    VISIBLE_MESSAGES = "sqsVisibleMessages"
    AGE_OF_OLDEST_MESSAGE = "sqsAgeOfOldestMessage"


class DynamoDbAlert(StrEnum):
    BATCH_GET_SYSTEM_ERRORS = "dynamoDbBatchGetSystemErrors"
    BATCH_WRITE_SYSTEM_ERRORS = "dynamoDbBatchWriteSystemErrors"
    DELETE_SYSTEM_ERRORS = "dynamoDbDeleteSystemErrors"
    GET_SYSTEM_ERRORS = "dynamoDbGetSystemErrors"
    PUT_SYSTEM_ERRORS = "dynamoDbPutSystemErrors"
    QUERY_SYSTEM_ERRORS = "dynamoDbQuerySystemErrors"
    SCAN_SYSTEM_ERRORS = "dynamoDbScanSystemErrors"
    UPDATE_SYSTEM_ERRORS = "dynamoDbUpdateSystemErrors"
    USER_ERRORS = "dynamoDbUserErrors"
    THROTTLED_REQUESTS = "dynamoDbThrottledRequests"


class AlertsSet(StrEnum):
    FUNCTION_DURATIONS = "functionDurations"
    API_GATEWAY_ERRORS = "apiGatewayErrors"
    DYNAMO_DB_SYSTEM_ERRORS = "dynamoDbSystemErrors"
    DYNAMO_DB_ALL = "dynamoDbAll"
    SQS_ALL = "sqsAll"


def _function(type_: FunctionAlert, title: str, select_value: str, **kw: object) -> AlertDefinition:
    return AlertDefinition(
        type=type_,
        category=Category.FUNCTION,
        title=title,
        event_type="ServerlessSample",
        integration_provider="LambdaFunction",
        select_value=select_value,
        **kw,  # type: ignore[arg-type]
    )


def _api_gateway(type_: ApiGatewayAlert, title: str, select_value: str, **kw: object) -> AlertDefinition:
    return AlertDefinition(
        type=type_,
        category=Category.API_GATEWAY,
        title=title,
        event_type="ApiGatewaySample",
        integration_provider="ApiGatewayApi",
        select_value=select_value,
        **kw,  # type: ignore[arg-type]
    )


def _sqs(type_: SqsAlert, title: str, select_value: str, **kw: object) -> AlertDefinition:
    return AlertDefinition(
        type=type_,
        category=Category.QUEUE,
        title=title,
        event_type="QueueSample",
        integration_provider="SqsQueue",
        select_value=select_value,
        **kw,  # type: ignore[arg-type]
    )


def _dynamo_system_errors(type_: DynamoDbAlert, operation: str) -> AlertDefinition:
    return AlertDefinition(
        type=type_,
        category=Category.TABLE,
        title=f"DynamoDB {operation} System Errors",
        event_type="DatastoreSample",
        integration_provider="DynamoDbTable",
        select_value="provider.systemErrors.Sum",
        where=f"provider.operation = '{operation}'",
    )


# Durations are in milliseconds, message ages in seconds.
FUNCTION_ALERTS: tuple[AlertDefinition, ...] = (
    _function(FunctionAlert.ERRORS, "Function Errors", "provider.errors.Sum"),
    _function(FunctionAlert.THROTTLES, "Function Throttles", "provider.throttles.Sum"),
    _function(
        FunctionAlert.DURATION_1_SEC,
        "Function Duration > 1 sec",
        "provider.duration.Average",
        threshold=1000,
        duration_minutes=5,
        time_function=TimeFunction.ALL,
    ),
    _function(
        FunctionAlert.DURATION_5_SEC,
        "Function Duration > 5 sec",
        "provider.duration.Average",
        threshold=5000,
        duration_minutes=5,
        time_function=TimeFunction.ALL,
    ),
    _function(
        FunctionAlert.DURATION_10_SEC,
        "Function Duration > 10 sec",
        "provider.duration.Average",
        threshold=10000,
        duration_minutes=5,
        time_function=TimeFunction.ALL,
    ),
    _function(
        FunctionAlert.ITERATOR_AGE,
        "Function Iterator Age > 1 min",
        "provider.iteratorAge.Maximum",
        threshold=60000,
        duration_minutes=5,
        time_function=TimeFunction.ALL,
    ),
)

API_GATEWAY_ALERTS: tuple[AlertDefinition, ...] = (
    _api_gateway(ApiGatewayAlert.ERRORS_4XX, "API Gateway 4xx Errors", "provider.4xxError.Sum"),
    _api_gateway(ApiGatewayAlert.ERRORS_5XX, "API Gateway 5xx Errors", "provider.5xxError.Sum"),
    _api_gateway(
        ApiGatewayAlert.LATENCY_1_SEC,
        "API Gateway Latency > 1 sec",
        "provider.latency.Average",
        threshold=1000,
        duration_minutes=5,
        time_function=TimeFunction.ALL,
    ),
)

SQS_ALERTS: tuple[AlertDefinition, ...] = (
    _sqs(
        SqsAlert.DLQ_VISIBLE_MESSAGES,
        "SQS DLQ Visible Messages",
        "provider.approximateNumberOfMessagesVisible.Maximum",
        dlq=True,
    ),
    _sqs(
        SqsAlert.VISIBLE_MESSAGES,
        "SQS Visible Messages > 1000",
        "provider.approximateNumberOfMessagesVisible.Maximum",
        threshold=1000,
        duration_minutes=5,
        time_function=TimeFunction.ALL,
    ),
    _sqs(
        SqsAlert.AGE_OF_OLDEST_MESSAGE,
        "SQS Age Of Oldest Message > 1 hour",
        "provider.approximateAgeOfOldestMessage.Maximum",
        threshold=3600,
        duration_minutes=5,
        time_function=TimeFunction.ALL,
    ),
)

DYNAMO_DB_ALERTS: tuple[AlertDefinition, ...] = (
    _dynamo_system_errors(DynamoDbAlert.BATCH_GET_SYSTEM_ERRORS, "BatchGetItem"),
    _dynamo_system_errors(DynamoDbAlert.BATCH_WRITE_SYSTEM_ERRORS, "BatchWriteItem"),
    _dynamo_system_errors(DynamoDbAlert.DELETE_SYSTEM_ERRORS, "DeleteItem"),
    _dynamo_system_errors(DynamoDbAlert.GET_SYSTEM_ERRORS, "GetItem"),
    _dynamo_system_errors(DynamoDbAlert.PUT_SYSTEM_ERRORS, "PutItem"),
    _dynamo_system_errors(DynamoDbAlert.QUERY_SYSTEM_ERRORS, "Query"),
    _dynamo_system_errors(DynamoDbAlert.SCAN_SYSTEM_ERRORS, "Scan"),
    _dynamo_system_errors(DynamoDbAlert.UPDATE_SYSTEM_ERRORS, "UpdateItem"),
    AlertDefinition(
        type=DynamoDbAlert.USER_ERRORS,
        category=Category.TABLE,
        title="DynamoDB User Errors",
        event_type="DatastoreSample",
        integration_provider="DynamoDbTable",
        select_value="provider.userErrors.Sum",
    ),
    AlertDefinition(
        type=DynamoDbAlert.THROTTLED_REQUESTS,
        category=Category.TABLE,
        title="DynamoDB Throttled Requests",
        event_type="DatastoreSample",
        integration_provider="DynamoDbTable",
        select_value="provider.throttledRequests.Sum",
    ),
)

ALL_ALERTS: tuple[AlertDefinition, ...] = (
    FUNCTION_ALERTS + API_GATEWAY_ALERTS + SQS_ALERTS + DYNAMO_DB_ALERTS
)

_DYNAMO_DB_SYSTEM_ERRORS = (
    DynamoDbAlert.BATCH_GET_SYSTEM_ERRORS,
    DynamoDbAlert.BATCH_WRITE_SYSTEM_ERRORS,
    DynamoDbAlert.DELETE_SYSTEM_ERRORS,
    DynamoDbAlert.GET_SYSTEM_ERRORS,
    DynamoDbAlert.PUT_SYSTEM_ERRORS,
    DynamoDbAlert.QUERY_SYSTEM_ERRORS,
    DynamoDbAlert.SCAN_SYSTEM_ERRORS,
    DynamoDbAlert.UPDATE_SYSTEM_ERRORS,
)

ALERT_SETS: tuple[AlertSet, ...] = (
    AlertSet(
        name=AlertsSet.FUNCTION_DURATIONS,
        category=Category.FUNCTION,
        alerts=(
            FunctionAlert.DURATION_1_SEC,
            FunctionAlert.DURATION_5_SEC,
            FunctionAlert.DURATION_10_SEC,
        ),
    ),
    AlertSet(
        name=AlertsSet.API_GATEWAY_ERRORS,
        category=Category.API_GATEWAY,
        alerts=(ApiGatewayAlert.ERRORS_4XX, ApiGatewayAlert.ERRORS_5XX),
    ),
    AlertSet(
        name=AlertsSet.DYNAMO_DB_SYSTEM_ERRORS,
        category=Category.TABLE,
        alerts=_DYNAMO_DB_SYSTEM_ERRORS,
    ),
    AlertSet(
        name=AlertsSet.DYNAMO_DB_ALL,
        category=Category.TABLE,
        alerts=(
            *_DYNAMO_DB_SYSTEM_ERRORS,
            DynamoDbAlert.USER_ERRORS,
            DynamoDbAlert.THROTTLED_REQUESTS,
        ),
    ),
    AlertSet(
        name=AlertsSet.SQS_ALL,
        category=Category.QUEUE,
        alerts=tuple(SqsAlert),
    ),
)

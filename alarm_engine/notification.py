import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from core import NotificationDecodeError

logger = logging.getLogger(__name__)

# CloudWatch StandardUnit values
STANDARD_UNITS = frozenset(
    {
        "Seconds",
        "Microseconds",
        "Milliseconds",
        "Bytes",
        "Kilobytes",
        "Megabytes",
        "Gigabytes",
        "Terabytes",
        "Bits",
        "Kilobits",
        "Megabits",
        "Gigabits",
        "Terabits",
        "Percent",
        "Count",
        "Bytes/Second",
        "Kilobytes/Second",
        "Megabytes/Second",
        "Gigabytes/Second",
        "Terabytes/Second",
        "Bits/Second",
        "Kilobits/Second",
        "Megabits/Second",
        "Gigabits/Second",
        "Terabits/Second",
        "Count/Second",
        "None",
    }
)

METRIC_TRIGGER = "metric"
METRIC_MATH_TRIGGER = "metric_math"


@dataclass(frozen=True)
class Dimension:
    """A CloudWatch dimension the alarm fired against"""

    name: str
    value: str


@dataclass(frozen=True)
class Trigger:
    """The metric condition of a CloudWatch alarm.

    A single-metric alarm carries ``MetricName``/``Namespace``; a metric math
    alarm carries a ``Metrics`` list, whose metric stats hold the dimensions.
    """

    kind: str
    metric_name: str = ""
    namespace: str = ""
    statistic_type: str = ""
    statistic: str = ""
    unit: Optional[str] = None
    dimensions: Tuple[Dimension, ...] = field(default_factory=tuple)
    period: int = 0
    evaluation_periods: int = 0
    comparison_operator: str = ""
    threshold: float = 0.0
    treat_missing_data: str = ""
    evaluate_low_sample_count_percentile: str = ""


@dataclass(frozen=True)
class AlarmNotification:
    """A CloudWatch alarm state change delivered over SNS"""

    alarm_name: str
    trigger: Trigger
    alarm_description: str = ""
    aws_account_id: str = ""
    alarm_arn: str = ""
    region: str = ""
    old_state_value: str = ""
    new_state_value: str = ""
    new_state_reason: str = ""
    state_change_time: str = ""


def _string(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise NotificationDecodeError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


def _integer(data: Dict[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not float(value).is_integer():
        raise NotificationDecodeError(f"'{key}' must be an integer, got {value!r}")
    return int(value)


def _number(data: Dict[str, Any], key: str) -> float:
    value = data.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise NotificationDecodeError(f"'{key}' must be a number, got {value!r}")
    return float(value)


def _unit(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or value not in STANDARD_UNITS:
        raise NotificationDecodeError(f"Unknown metric unit: {value!r}")
    return value


def _dimensions(raw: Any) -> List[Dimension]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise NotificationDecodeError("'Dimensions' must be a list")

    dimensions = []
    for item in raw:
        if not isinstance(item, dict):
            raise NotificationDecodeError(f"Malformed dimension: {item!r}")
        name = item.get("name", item.get("Name"))
        value = item.get("value", item.get("Value"))
        if not isinstance(name, str) or not isinstance(value, str):
            raise NotificationDecodeError(f"Malformed dimension: {item!r}")
        dimensions.append(Dimension(name=name, value=value))
    return dimensions


def _metric_math_dimensions(metrics: List[Any]) -> List[Dimension]:
    dimensions = []
    for query in metrics:
        if not isinstance(query, dict):
            raise NotificationDecodeError(f"Malformed metric query: {query!r}")
        metric_stat = query.get("MetricStat")
        if metric_stat is None:
            continue
        if not isinstance(metric_stat, dict):
            raise NotificationDecodeError(f"Malformed 'MetricStat': {metric_stat!r}")
        metric = metric_stat.get("Metric")
        if metric is None:
            continue
        if not isinstance(metric, dict):
            raise NotificationDecodeError(f"Malformed 'Metric': {metric!r}")
        dimensions.extend(_dimensions(metric.get("Dimensions")))
    return dimensions


def decode_trigger(data: Any) -> Trigger:
    if not isinstance(data, dict):
        raise NotificationDecodeError("'Trigger' must be an object")

    if "MetricName" in data:
        kind = METRIC_TRIGGER
        dimensions = _dimensions(data.get("Dimensions"))
    elif isinstance(data.get("Metrics"), list):
        kind = METRIC_MATH_TRIGGER
        dimensions = _metric_math_dimensions(data["Metrics"])
    else:
        raise NotificationDecodeError("Unrecognised trigger: no 'MetricName' or 'Metrics'")

    return Trigger(
        kind=kind,
        metric_name=_string(data, "MetricName"),
        namespace=_string(data, "Namespace"),
        statistic_type=_string(data, "StatisticType"),
        statistic=_string(data, "Statistic"),
        unit=_unit(data.get("Unit")),
        dimensions=tuple(dimensions),
        period=_integer(data, "Period"),
        evaluation_periods=_integer(data, "EvaluationPeriods"),
        comparison_operator=_string(data, "ComparisonOperator"),
        threshold=_number(data, "Threshold"),
        treat_missing_data=_string(data, "TreatMissingData"),
        evaluate_low_sample_count_percentile=_string(
            data, "EvaluateLowSampleCountPercentile"
        ),
    )


def decode_notification(message: Union[str, bytes]) -> AlarmNotification:
    """Parse an SNS message body into an AlarmNotification.

    Raises:
        NotificationDecodeError: the body is not JSON or not an alarm payload.
    """
    try:
        data = json.loads(message)
    except (TypeError, ValueError) as e:
        raise NotificationDecodeError(f"Message is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise NotificationDecodeError("Message must be a JSON object")
    if "Trigger" not in data:
        raise NotificationDecodeError("Message has no 'Trigger'")

    return AlarmNotification(
        alarm_name=_string(data, "AlarmName"),
        trigger=decode_trigger(data["Trigger"]),
        alarm_description=_string(data, "AlarmDescription"),
        aws_account_id=_string(data, "AWSAccountId"),
        alarm_arn=_string(data, "AlarmArn"),
        region=_string(data, "Region"),
        old_state_value=_string(data, "OldStateValue"),
        new_state_value=_string(data, "NewStateValue"),
        new_state_reason=_string(data, "NewStateReason"),
        state_change_time=_string(data, "StateChangeTime"),
    )


def iter_sns_messages(event: Dict[str, Any]) -> Iterator[Tuple[str, str]]:
    """Yield (message id, message body) for every SNS record of a Lambda event."""
    for index, record in enumerate(event.get("Records") or []):
        sns = record.get("Sns") if isinstance(record, dict) else None
        if not isinstance(sns, dict) or sns.get("Message") is None:
            logger.error(f"Record {index} carries no SNS message, skipping")
            continue
        yield sns.get("MessageId", str(index)), sns["Message"]

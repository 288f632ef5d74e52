from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Union


def _utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def format_duration(value: timedelta) -> str:
    """
    ISO-8601 duration for an interval, e.g. ``PT1M``, ``PT1H30M``, ``P1D``.
    """
    total = int(value.total_seconds())
    if total <= 0:
        raise ValueError("interval must be a positive duration.")

    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)

    out = "P"
    if days:
        out += f"{days}D"
    if hours or minutes or seconds:
        out += "T"
        if hours:
            out += f"{hours}H"
        if minutes:
            out += f"{minutes}M"
        if seconds:
            out += f"{seconds}S"
    return out


@dataclass(frozen=True)
class TimeRange:
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError("TimeRange start must not be after end.")

    @classmethod
    def last(cls, *, hours: float, now: Optional[datetime] = None) -> "TimeRange":
        end = _utc(now) if now is not None else datetime.now(timezone.utc)
        return cls(start=end - timedelta(hours=hours), end=end)

    def to_timespan(self) -> str:
        return f"{self.start.isoformat()}/{self.end.isoformat()}"

    def __str__(self) -> str:
        return self.to_timespan()


class ResultKind(str, enum.Enum):
    DATA = "Data"
    METADATA = "Metadata"


@dataclass(frozen=True)
class QueryParameters:
    resource_id: str
    time_range: Optional[TimeRange] = None
    interval: Optional[timedelta] = None
    metric_name: Optional[str] = None
    aggregation: Optional[str] = None
    filter_expression: Optional[str] = None
    result_kind: Optional[ResultKind] = None

    def to_query(self) -> Dict[str, str]:
        query: Dict[str, str] = {}
        if self.time_range is not None:
            query["timespan"] = self.time_range.to_timespan()
        if self.interval is not None:
            query["interval"] = format_duration(self.interval)
        if self.metric_name:
            query["metricnames"] = self.metric_name
        if self.aggregation:
            query["aggregation"] = self.aggregation
        if self.filter_expression:
            query["$filter"] = self.filter_expression
        if self.result_kind is not None:
            query["resulttype"] = self.result_kind.value
        return query


# Read-only views over the ARM JSON payloads. Missing fields parse to None/[].


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _str_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _number_or_none(value: Any) -> Optional[Union[int, float]]:
    # Integral costs stay int so they print without exponent or rounding.
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


@dataclass(frozen=True)
class LocalizableString:
    value: Optional[str] = None
    localized_value: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "LocalizableString":
        data = _dict(payload)
        return cls(value=_str_or_none(data.get("value")), localized_value=_str_or_none(data.get("localizedValue")))


@dataclass(frozen=True)
class MetricAvailability:
    time_grain: Optional[str] = None
    retention: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.time_grain}/{self.retention}"


@dataclass(frozen=True)
class MetricDefinition:
    id: Optional[str]
    name: LocalizableString
    resource_id: Optional[str] = None
    unit: Optional[str] = None
    primary_aggregation_type: Optional[str] = None
    metric_availabilities: List[MetricAvailability] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "MetricDefinition":
        data = _dict(payload)
        availabilities = [
            MetricAvailability(
                time_grain=_str_or_none(_dict(item).get("timeGrain")),
                retention=_str_or_none(_dict(item).get("retention")),
            )
            for item in _list(data.get("metricAvailabilities"))
            if isinstance(item, dict)
        ]
        return cls(
            id=_str_or_none(data.get("id")),
            name=LocalizableString.from_payload(data.get("name")),
            resource_id=_str_or_none(data.get("resourceId")),
            unit=_str_or_none(data.get("unit")),
            primary_aggregation_type=_str_or_none(data.get("primaryAggregationType")),
            metric_availabilities=availabilities,
        )


@dataclass(frozen=True)
class MetadataValue:
    name: LocalizableString
    value: Optional[str] = None


@dataclass(frozen=True)
class TimeSeriesElement:
    metadata_values: List[MetadataValue] = field(default_factory=list)
    data: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "TimeSeriesElement":
        data = _dict(payload)
        metadata = [
            MetadataValue(
                name=LocalizableString.from_payload(_dict(item).get("name")),
                value=_str_or_none(_dict(item).get("value")),
            )
            for item in _list(data.get("metadatavalues"))
            if isinstance(item, dict)
        ]
        points = [point for point in _list(data.get("data")) if isinstance(point, dict)]
        return cls(metadata_values=metadata, data=points)


@dataclass(frozen=True)
class Metric:
    id: Optional[str]
    name: LocalizableString
    type: Optional[str] = None
    unit: Optional[str] = None
    timeseries: List[TimeSeriesElement] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "Metric":
        data = _dict(payload)
        return cls(
            id=_str_or_none(data.get("id")),
            name=LocalizableString.from_payload(data.get("name")),
            type=_str_or_none(data.get("type")),
            unit=_str_or_none(data.get("unit")),
            timeseries=[TimeSeriesElement.from_payload(item) for item in _list(data.get("timeseries"))],
        )


@dataclass(frozen=True)
class MetricsResponse:
    cost: Optional[Union[int, float]]
    timespan: Optional[str]
    interval: Optional[str]
    value: List[Metric] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "MetricsResponse":
        data = _dict(payload)
        return cls(
            cost=_number_or_none(data.get("cost")),
            timespan=_str_or_none(data.get("timespan")),
            interval=_str_or_none(data.get("interval")),
            value=[Metric.from_payload(item) for item in _list(data.get("value")) if isinstance(item, dict)],
        )

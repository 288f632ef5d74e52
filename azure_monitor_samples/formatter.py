from __future__ import annotations

import sys
from itertools import islice
from typing import Iterable, List, Optional, Sequence, TextIO, TypeVar, Union

from azure_monitor_samples.models import Metric, MetricDefinition, MetricsResponse, TimeSeriesElement


T = TypeVar("T")

DEFAULT_DISPLAY_LIMIT = 5
METRICS_COLUMNS = ("Id", "Name.Value", "Name.Localized", "Type", "Unit", "Timeseries")


def take(records: Iterable[T], limit: int = DEFAULT_DISPLAY_LIMIT) -> List[T]:
    """
    First ``limit`` records in provider order. Anything past the limit is dropped silently.
    """
    if limit < 0:
        raise ValueError("limit must be >= 0.")
    return list(islice(records, limit))


def _text(value: object) -> str:
    return "" if value is None else str(value)


def _describe_timeseries(timeseries: Sequence[TimeSeriesElement]) -> str:
    points = sum(len(element.data) for element in timeseries)
    return f"{len(timeseries)} series/{points} points"


def _format_cost(cost: Optional[Union[int, float]]) -> str:
    return "" if cost is None else str(cost)


def format_definition(definition: MetricDefinition) -> str:
    availabilities = ", ".join(str(a) for a in definition.metric_availabilities)
    return "\n".join(
        [
            f"Id: {_text(definition.id)}",
            f"Name: {_text(definition.name.value)}, {_text(definition.name.localized_value)}",
            f"ResourceId: {_text(definition.resource_id)}",
            f"Unit: {_text(definition.unit)}",
            f"Primary aggregation type: {_text(definition.primary_aggregation_type)}",
            f"List of metric availabilities: [{availabilities}]",
        ]
    )


def format_metric_row(metric: Metric) -> str:
    return "\t".join(
        [
            _text(metric.id),
            _text(metric.name.value),
            _text(metric.name.localized_value),
            _text(metric.type),
            _text(metric.unit),
            _describe_timeseries(metric.timeseries),
        ]
    )


def format_metrics_header(response: MetricsResponse) -> str:
    return "\n".join(
        [
            f"Cost: {_format_cost(response.cost)}",
            f"Timespan: {_text(response.timespan)}",
            f"Interval: {_text(response.interval)}",
        ]
    )


def render_definitions(
    definitions: Iterable[MetricDefinition],
    *,
    limit: int = DEFAULT_DISPLAY_LIMIT,
    out: Optional[TextIO] = None,
) -> int:
    stream = out or sys.stdout
    shown = take(definitions, limit)
    for definition in shown:
        print(format_definition(definition), file=stream)
    return len(shown)


def render_metrics(
    response: MetricsResponse,
    *,
    limit: int = DEFAULT_DISPLAY_LIMIT,
    out: Optional[TextIO] = None,
) -> int:
    stream = out or sys.stdout
    print(format_metrics_header(response), file=stream)
    print(file=stream)
    print("\t".join(METRICS_COLUMNS), file=stream)
    shown = take(response.value, limit)
    for metric in shown:
        print(format_metric_row(metric), file=stream)
    return len(shown)

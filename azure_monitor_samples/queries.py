from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from azure_monitor_samples.models import QueryParameters, ResultKind, TimeRange


LOOKBACK_HOURS = 3
ONE_MINUTE = timedelta(minutes=1)
FIVE_MINUTES = timedelta(minutes=5)

# The caller must know which metadata keys the resource exposes; these are placeholders.
METADATA_FILTER = "Metadata1 eq '{0}' and Metadata2 eq '{1}' or Metadata3 eq '*'".format("m1", "m2")
# Metadata queries need at least one "<key> eq '*'" clause.
METADATA_ONLY_FILTER = "Metadata3 eq '*'"


@dataclass(frozen=True)
class QueryVariant:
    title: str
    params: QueryParameters


def build_query_variants(resource_id: str, *, now: Optional[datetime] = None) -> List[QueryVariant]:
    """
    The metrics calls to issue, in order, each more specific than the last.

    The time range is computed once and shared by every variant that uses it.
    """
    rid = (resource_id or "").strip()
    if not rid:
        raise ValueError("resource_id is required.")

    time_range = TimeRange.last(hours=LOOKBACK_HOURS, now=now)

    return [
        QueryVariant(
            "Call with default parameters",
            QueryParameters(resource_id=rid),
        ),
        QueryVariant(
            "Call with more parameters, but no filter",
            QueryParameters(
                resource_id=rid,
                time_range=time_range,
                interval=ONE_MINUTE,
                metric_name="Transactions",
                result_kind=ResultKind.DATA,
            ),
        ),
        QueryVariant(
            "Call to retrieve time series with timespan parameter",
            QueryParameters(resource_id=rid, time_range=time_range, result_kind=ResultKind.DATA),
        ),
        QueryVariant(
            "Call to retrieve time series with timespan and interval parameters",
            QueryParameters(
                resource_id=rid,
                time_range=time_range,
                interval=FIVE_MINUTES,
                result_kind=ResultKind.DATA,
            ),
        ),
        QueryVariant(
            "Call to retrieve time series with timespan, interval, and metric parameters",
            QueryParameters(
                resource_id=rid,
                time_range=time_range,
                interval=FIVE_MINUTES,
                metric_name="CpuPercentage",
                result_kind=ResultKind.DATA,
            ),
        ),
        QueryVariant(
            "Call to retrieve time series with timespan, interval, metric, and aggregation parameters",
            QueryParameters(
                resource_id=rid,
                time_range=time_range,
                interval=FIVE_MINUTES,
                metric_name="CpuPercentage",
                aggregation="Count",
                result_kind=ResultKind.DATA,
            ),
        ),
        QueryVariant(
            "Call to retrieve time series with timespan, interval, metric, and $filter parameters. "
            "NOTE: $filter is reserved for metadata only.",
            QueryParameters(
                resource_id=rid,
                time_range=time_range,
                interval=FIVE_MINUTES,
                metric_name="CpuPercentage",
                aggregation="Count",
                filter_expression=METADATA_FILTER,
                result_kind=ResultKind.DATA,
            ),
        ),
        QueryVariant(
            "Call to retrieve metadata with timespan",
            QueryParameters(
                resource_id=rid,
                time_range=time_range,
                metric_name="CpuPercentage",
                filter_expression=METADATA_ONLY_FILTER,
                result_kind=ResultKind.METADATA,
            ),
        ),
    ]

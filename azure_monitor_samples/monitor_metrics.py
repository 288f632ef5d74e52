from __future__ import annotations

import logging
from typing import List

from azure_monitor_samples.arm_client import MonitorClient
from azure_monitor_samples.models import MetricDefinition, MetricsResponse, QueryParameters


logger = logging.getLogger(__name__)

METRICS_PATH = "providers/microsoft.insights/metrics"
METRIC_DEFINITIONS_PATH = "providers/microsoft.insights/metricDefinitions"


async def list_definitions(client: MonitorClient, resource_id: str) -> List[MetricDefinition]:
    # The multi-dimensional API does not accept a $filter here.
    url = client.resource_url(resource_id, METRIC_DEFINITIONS_PATH)
    payload = await client.get_json(url)
    values = payload.get("value") if isinstance(payload.get("value"), list) else []
    definitions = [MetricDefinition.from_payload(item) for item in values if isinstance(item, dict)]
    logger.info("Fetched %d metric definitions", len(definitions))
    return definitions


async def list_metrics(client: MonitorClient, params: QueryParameters) -> MetricsResponse:
    url = client.resource_url(params.resource_id, METRICS_PATH)
    payload = await client.get_json(url, params=params.to_query())
    response = MetricsResponse.from_payload(payload)
    logger.info("Fetched %d metrics (cost=%s)", len(response.value), response.cost)
    return response

from __future__ import annotations

import logging
import sys
from datetime import datetime
from typing import Awaitable, Callable, Optional, TextIO

from azure_monitor_samples.arm_client import MonitorClient
from azure_monitor_samples.auth import authenticate
from azure_monitor_samples.config import Credentials, MonitorSettings
from azure_monitor_samples.formatter import render_definitions, render_metrics
from azure_monitor_samples.monitor_metrics import list_definitions, list_metrics
from azure_monitor_samples.queries import build_query_variants


logger = logging.getLogger(__name__)

Authenticator = Callable[..., Awaitable[MonitorClient]]


async def run_definitions_sample(
    client: MonitorClient,
    resource_id: str,
    *,
    limit: int,
    out: TextIO,
) -> None:
    definitions = await list_definitions(client, resource_id)
    render_definitions(definitions, limit=limit, out=out)


async def run_metrics_sample(
    client: MonitorClient,
    resource_id: str,
    *,
    limit: int,
    out: TextIO,
    now: Optional[datetime] = None,
) -> None:
    # Strictly sequential; the first failure aborts the remaining variants.
    for variant in build_query_variants(resource_id, now=now):
        logger.info("Metrics query: %s", variant.title)
        print(variant.title, file=out)
        response = await list_metrics(client, variant.params)
        render_metrics(response, limit=limit, out=out)


async def run_samples(
    credentials: Credentials,
    resource_id: str,
    *,
    settings: Optional[MonitorSettings] = None,
    authenticator: Authenticator = authenticate,
    out: Optional[TextIO] = None,
    now: Optional[datetime] = None,
) -> None:
    settings = settings or MonitorSettings()
    stream = out or sys.stdout

    client = await authenticator(credentials, settings=settings)
    async with client:
        await run_definitions_sample(client, resource_id, limit=settings.display_limit, out=stream)
        await run_metrics_sample(client, resource_id, limit=settings.display_limit, out=stream, now=now)

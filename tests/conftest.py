import os
import sys
import time
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from azure.core.credentials import AccessToken

# Add project root to sys.path if not picked up by pythonpath
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from azure_monitor_samples.arm_client import ArmConfig, MonitorClient
from azure_monitor_samples.config import Credentials

SUBSCRIPTION_ID = "00000000-0000-0000-0000-000000000000"
RESOURCE_ID = f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/rg/providers/Microsoft.Web/sites/myapp"


class FakeCredential:
    def __init__(self, *, error: Optional[Exception] = None, expires_in: int = 3600) -> None:
        self._error = error
        self._expires_in = expires_in
        self.calls: List[tuple] = []

    def get_token(self, *scopes: str, **kwargs: Any) -> AccessToken:
        self.calls.append(scopes)
        if self._error is not None:
            raise self._error
        return AccessToken(f"token-{len(self.calls)}", int(time.time()) + self._expires_in)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    monkeypatch.setenv("DISABLE_DOTENV", "1")
    for name in ("MONITOR_ARM_ENDPOINT", "MONITOR_API_VERSION", "MONITOR_HTTP_TIMEOUT_SECONDS", "MONITOR_DISPLAY_LIMIT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        tenant_id="tenant",
        client_id="client",
        client_secret="s3cret",
        subscription_id=SUBSCRIPTION_ID,
    )


@pytest.fixture
def make_client() -> Callable[..., MonitorClient]:
    """
    Build a MonitorClient whose HTTP calls are served by ``handler``.
    """

    def _make(handler: Callable[[httpx.Request], httpx.Response], **cfg: Any) -> MonitorClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return MonitorClient(
            ArmConfig(subscription_id=SUBSCRIPTION_ID, **cfg),
            credential=FakeCredential(),
            http_client=http_client,
        )

    return _make


def definition_payload(index: int) -> Dict[str, Any]:
    return {
        "id": f"{RESOURCE_ID}/providers/microsoft.insights/metricdefinitions/Metric{index}",
        "resourceId": RESOURCE_ID,
        "name": {"value": f"Metric{index}", "localizedValue": f"Metric {index}"},
        "unit": "Count",
        "primaryAggregationType": "Total",
        "metricAvailabilities": [{"timeGrain": "PT1M", "retention": "P30D"}],
    }


def metric_payload(name: str, points: int = 2) -> Dict[str, Any]:
    return {
        "id": f"{RESOURCE_ID}/providers/Microsoft.Insights/metrics/{name}",
        "type": "Microsoft.Insights/metrics",
        "name": {"value": name, "localizedValue": name},
        "unit": "Percent",
        "timeseries": [
            {
                "metadatavalues": [],
                "data": [{"timeStamp": f"2024-01-01T00:0{i}:00Z", "average": float(i)} for i in range(points)],
            }
        ],
    }

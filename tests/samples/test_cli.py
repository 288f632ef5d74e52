from typing import Any, List

import httpx
import pytest

from conftest import RESOURCE_ID, definition_payload, metric_payload
from azure_monitor_samples import cli
from azure_monitor_samples.queries import build_query_variants

FULL_ENV = {
    "AZURE_TENANT_ID": "tenant",
    "AZURE_CLIENT_ID": "client",
    "AZURE_CLIENT_SECRET": "secret",
    "AZURE_SUBSCRIPTION_ID": "00000000-0000-0000-0000-000000000000",
}


class StubAuthenticator:
    def __init__(self, client_factory=None) -> None:
        self.calls: List[Any] = []
        self._client_factory = client_factory

    async def __call__(self, credentials, **kwargs):
        self.calls.append(credentials)
        return self._client_factory()


def _arm_handler(requests: List[httpx.Request]):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path.endswith("/metricDefinitions"):
            return httpx.Response(200, json={"value": [definition_payload(i) for i in range(7)]})
        return httpx.Response(
            200,
            json={
                "cost": 12.5,
                "timespan": "2024-01-01T00:00:00Z/2024-01-01T03:00:00Z",
                "interval": "PT1M",
                "value": [metric_payload("CpuPercentage"), metric_payload("Transactions")],
            },
        )

    return handler


@pytest.mark.parametrize("missing", sorted(FULL_ENV))
def test_missing_configuration_never_authenticates(missing, capsys) -> None:
    env = dict(FULL_ENV)
    env[missing] = ""
    stub = StubAuthenticator()

    code = cli.main([RESOURCE_ID], environ=env, authenticator=stub)

    assert code == cli.EXIT_CONFIGURATION
    assert stub.calls == []
    out = capsys.readouterr().out
    for name in FULL_ENV:
        assert name in out


def test_full_run_prints_definitions_then_every_variant(make_client, capsys) -> None:
    requests: List[httpx.Request] = []
    stub = StubAuthenticator(lambda: make_client(_arm_handler(requests)))

    code = cli.main([RESOURCE_ID], environ=FULL_ENV, authenticator=stub)

    assert code == cli.EXIT_OK
    assert len(stub.calls) == 1
    assert stub.calls[0].subscription_id == FULL_ENV["AZURE_SUBSCRIPTION_ID"]

    # one definitions call, then eight metrics calls in order
    assert len(requests) == 9
    assert requests[0].url.path.endswith("/metricDefinitions")
    assert requests[-1].url.params["resulttype"] == "Metadata"

    out = capsys.readouterr().out
    lines = out.splitlines()
    assert sum(1 for line in lines if line.startswith("Id: ")) == 5
    assert out.count("Cost: 12.5") == 8
    titles = [v.title for v in build_query_variants(RESOURCE_ID)]
    positions = [out.index(title) for title in titles]
    assert positions == sorted(positions)


def test_limit_flag_overrides_display_limit(make_client, capsys) -> None:
    stub = StubAuthenticator(lambda: make_client(_arm_handler([])))

    code = cli.main([RESOURCE_ID, "--limit", "2"], environ=FULL_ENV, authenticator=stub)

    assert code == cli.EXIT_OK
    lines = capsys.readouterr().out.splitlines()
    assert sum(1 for line in lines if line.startswith("Id: ")) == 2


def test_remote_failure_aborts_remaining_calls(make_client, capsys) -> None:
    requests: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path.endswith("/metricDefinitions"):
            return httpx.Response(200, json={"value": []})
        return httpx.Response(403, json={"error": {"code": "AuthorizationFailed", "message": "denied"}})

    stub = StubAuthenticator(lambda: make_client(handler))

    code = cli.main([RESOURCE_ID], environ=FULL_ENV, authenticator=stub)

    assert code == cli.EXIT_FAILURE
    assert len(requests) == 2
    assert "AuthorizationFailed" in capsys.readouterr().err


def test_blank_resource_id_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["  "], environ=FULL_ENV, authenticator=StubAuthenticator())
    assert excinfo.value.code == 2


def test_malformed_tenant_id_exits_with_failure(capsys) -> None:
    env = dict(FULL_ENV, AZURE_TENANT_ID="not a tenant!")

    code = cli.main([RESOURCE_ID], environ=env)

    assert code == cli.EXIT_FAILURE
    assert "Invalid credentials" in capsys.readouterr().err

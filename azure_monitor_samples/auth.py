from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from azure.identity import ClientSecretCredential

from azure_monitor_samples.arm_client import ArmConfig, MonitorClient
from azure_monitor_samples.config import Credentials, MonitorSettings
from azure_monitor_samples.errors import AuthError

logger = logging.getLogger(__name__)


def build_credential(credentials: Credentials) -> ClientSecretCredential:
    return ClientSecretCredential(
        tenant_id=credentials.tenant_id,
        client_id=credentials.client_id,
        client_secret=credentials.client_secret,
    )


async def authenticate(
    credentials: Credentials,
    *,
    settings: Optional[MonitorSettings] = None,
    credential: Optional[Any] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> MonitorClient:
    """
    Log in silently with the client secret and return a client bound to the subscription.

    The token is requested up front so bad credentials fail here rather than on
    the first metrics call. Failures are not retried.
    """
    settings = settings or MonitorSettings()
    cfg = ArmConfig(
        subscription_id=credentials.subscription_id,
        endpoint=settings.arm_endpoint,
        api_version=settings.api_version,
        timeout_seconds=settings.http_timeout_seconds,
    )
    logger.info("Authenticating client %s against tenant %s", credentials.client_id, credentials.tenant_id)
    try:
        # ClientSecretCredential validates the tenant id on construction.
        credential = credential or build_credential(credentials)
    except ValueError as exc:
        raise AuthError(f"Invalid credentials for client {credentials.client_id}: {exc}") from exc

    client = MonitorClient(cfg, credential=credential, http_client=http_client)
    try:
        await client.get_bearer()
    except AuthError:
        await client.aclose()
        raise

    logger.info("Authenticated; subscription=%s", credentials.subscription_id)
    return client

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from azure.core.exceptions import AzureError, ClientAuthenticationError

from azure_monitor_samples.errors import AuthError, RemoteError

logger = logging.getLogger(__name__)

ARM_SCOPE = "https://management.azure.com/.default"
_TOKEN_REFRESH_MARGIN_SECONDS = 60
_MAX_ERROR_TEXT = 500


@dataclass(frozen=True)
class ArmConfig:
    subscription_id: str
    endpoint: str = "https://management.azure.com"
    api_version: str = "2018-01-01"
    timeout_seconds: Optional[float] = None


def _error_details(resp: httpx.Response) -> tuple[Optional[str], Optional[str], Optional[Dict[str, Any]]]:
    try:
        body = resp.json()
    except ValueError:
        text = (resp.text or "").strip()
        return None, text[:_MAX_ERROR_TEXT] or None, None

    if not isinstance(body, dict):
        return None, None, None
    error = body.get("error")
    if not isinstance(error, dict):
        return None, None, body
    code = str(error.get("code") or "").strip() or None
    message = str(error.get("message") or "").strip() or None
    return code, message, body


class MonitorClient:
    """
    Read-only ARM client bound to one subscription.

    Holds the service principal credential and its current access token; the
    token is reused until shortly before it expires.
    """

    def __init__(
        self,
        cfg: ArmConfig,
        *,
        credential: Any,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._cfg = cfg
        self._credential = credential
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(cfg.timeout_seconds))
        self._owns_http = http_client is None
        self._token: Optional[str] = None
        self._token_expires_at: float = 0.0

    @property
    def subscription_id(self) -> str:
        return self._cfg.subscription_id

    @property
    def config(self) -> ArmConfig:
        return self._cfg

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "MonitorClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def get_bearer(self) -> str:
        now = time.time()
        if self._token and now < (self._token_expires_at - _TOKEN_REFRESH_MARGIN_SECONDS):
            return self._token

        # azure-identity's sync credential blocks on the token endpoint.
        try:
            token = await asyncio.to_thread(self._credential.get_token, ARM_SCOPE)
        except ClientAuthenticationError as exc:
            raise AuthError(f"Token request was rejected: {exc.message}") from exc
        except AzureError as exc:
            raise AuthError(f"Could not obtain an access token: {exc}") from exc
        self._token = token.token
        self._token_expires_at = float(getattr(token, "expires_on", 0) or 0)
        return self._token

    def qualify_resource_id(self, resource_id: str) -> str:
        rid = (resource_id or "").strip().rstrip("/")
        if not rid:
            raise ValueError("resource_id is required.")
        if not rid.startswith("/"):
            rid = f"/{rid}"
        if not rid.lower().startswith("/subscriptions/"):
            rid = f"/subscriptions/{self._cfg.subscription_id}{rid}"
        return rid

    def resource_url(self, resource_id: str, path: str) -> str:
        path = path.strip().lstrip("/")
        return f"{self._cfg.endpoint}{self.qualify_resource_id(resource_id)}/{path}"

    async def get_json(self, url: str, *, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        query = {"api-version": self._cfg.api_version}
        if params:
            query.update({k: str(v) for k, v in params.items() if v is not None})

        headers = {"Authorization": f"Bearer {await self.get_bearer()}"}
        logger.debug("GET %s params=%s", url, query)
        try:
            resp = await self._http.get(url, headers=headers, params=query)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            code, detail, body = _error_details(exc.response)
            status = exc.response.status_code
            message = f"ARM request failed with HTTP {status}"
            if code:
                message = f"{message} ({code})"
            if detail:
                message = f"{message}: {detail}"
            raise RemoteError(message, status_code=status, code=code, detail=detail, payload=body) from exc
        except httpx.HTTPError as exc:
            raise RemoteError(f"ARM request failed: {type(exc).__name__}: {exc}") from exc

        try:
            payload = resp.json()
        except ValueError as exc:
            raise RemoteError("ARM response was not valid JSON.", status_code=resp.status_code) from exc
        if not isinstance(payload, dict):
            raise RemoteError("ARM response was not a JSON object.", status_code=resp.status_code)
        return payload

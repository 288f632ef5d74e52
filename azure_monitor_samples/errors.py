from __future__ import annotations

from typing import Any, Dict, Optional, Sequence


class MonitorSampleError(RuntimeError):
    pass


class ConfigurationError(MonitorSampleError):
    def __init__(self, message: str, *, missing: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.missing = list(missing)


class AuthError(MonitorSampleError):
    pass


class RemoteError(MonitorSampleError):
    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        detail: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.detail = detail
        self.payload = payload

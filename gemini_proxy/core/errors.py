from __future__ import annotations

from dataclasses import dataclass
from typing import Any

GENERIC_UPSTREAM_MESSAGE = "Gemini API request failed."


@dataclass
class ProxyError(Exception):
    """Failure that is rendered as a ``{"ok": false, ...}`` JSON body."""

    status_code: int
    message: str
    upstream_status: int | None = None
    data: Any = None

    def __str__(self) -> str:
        return self.message

    def to_error(self) -> dict[str, Any]:
        body: dict[str, Any] = {"ok": False, "error": self.message}
        if self.upstream_status is not None:
            body["status"] = self.upstream_status
        if self.data is not None:
            body["data"] = self.data
        return body


class ConfigurationError(ProxyError):
    def __init__(self, message: str = "Server is missing the Gemini API credential.") -> None:
        super().__init__(status_code=500, message=message)


class ValidationError(ProxyError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(status_code=status_code, message=message)


class UpstreamError(ProxyError):
    """Provider call failed.

    ``upstream_status`` is the provider's own status when one was received;
    transport failures and timeouts carry ``None`` and map to 502.
    """

    def __init__(
        self,
        upstream_status: int | None,
        data: Any = None,
        message: str = GENERIC_UPSTREAM_MESSAGE,
    ) -> None:
        if upstream_status is not None and 400 <= upstream_status <= 599:
            status_code = upstream_status
        else:
            status_code = 502
        super().__init__(
            status_code=status_code,
            message=message,
            upstream_status=upstream_status,
            data=data,
        )


class UnexpectedError(ProxyError):
    def __init__(self, message: str = "Unexpected server error in gemini-proxy.") -> None:
        super().__init__(status_code=500, message=message)

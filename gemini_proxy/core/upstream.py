from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from .errors import UpstreamError
from .types import UpstreamPayload

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UpstreamReply:
    status_code: int
    text: str


async def post_generate_content(
    url: str,
    api_key: str,
    payload: UpstreamPayload,
    *,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> UpstreamReply:
    """Send the single ``generateContent`` call and return the raw reply.

    Non-2xx statuses are returned as-is; only transport failures raise.
    """

    headers = {
        "Content-Type": "application/json",
        "x-goog-api-key": api_key,
    }

    try:
        async with httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        ) as client:
            response = await client.post(url, json=payload, headers=headers)
    except httpx.TimeoutException as exc:
        logger.warning("Gemini request timed out after %ss", timeout)
        raise UpstreamError(None, _transport_detail("timeout", exc)) from exc
    except httpx.HTTPError as exc:
        logger.warning("Gemini request failed before a response: %s", exc)
        raise UpstreamError(None, _transport_detail("transport", exc)) from exc

    return UpstreamReply(status_code=response.status_code, text=response.text)


def _transport_detail(kind: str, exc: Exception) -> dict[str, Any]:
    return {"error": kind, "message": str(exc) or exc.__class__.__name__}

from __future__ import annotations

import logging

import httpx

from gemini_proxy.core.errors import ConfigurationError, ProxyError, UnexpectedError

logger = logging.getLogger(__name__)


def map_proxy_error(exc: Exception) -> ProxyError:
    """Map anything raised inside the pipeline onto the proxy error taxonomy."""

    if isinstance(exc, ProxyError):
        return exc

    if isinstance(exc, httpx.InvalidURL):
        logger.error("Configured Gemini base URL is invalid: %s", exc)
        return ConfigurationError("Gemini base URL is not configured correctly.")

    logger.exception("Unexpected failure in gemini-proxy", exc_info=exc)
    return UnexpectedError()

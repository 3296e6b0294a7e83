"""Per-invocation settings resolved from ordered environment sources.

Every value is looked up in a fixed list of variable names; the first one that
holds a non-blank value wins. Nothing is cached between invocations.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from urllib.parse import quote

from .errors import ConfigurationError
from .types import DEFAULT_BASE_URL, DEFAULT_MODEL

logger = logging.getLogger(__name__)

API_KEY_SOURCES = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "NETLIFY_AT_GATEWAY_KEY")
BASE_URL_SOURCES = ("GEMINI_BASE_URL", "GOOGLE_GEMINI_BASE_URL")
MODEL_SOURCES = ("GEMINI_MODEL",)
TIMEOUT_SOURCES = ("GEMINI_TIMEOUT_SECONDS",)


def first_present(environ: Mapping[str, str], names: Sequence[str]) -> str | None:
    for name in names:
        value = environ.get(name)
        if value and value.strip():
            return value.strip()
    return None


@dataclass(frozen=True, slots=True)
class ProxySettings:
    api_key: str | None
    base_url: str = DEFAULT_BASE_URL
    default_model: str = DEFAULT_MODEL
    timeout: float | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ProxySettings:
        if environ is None:
            environ = os.environ

        return cls(
            api_key=first_present(environ, API_KEY_SOURCES),
            base_url=first_present(environ, BASE_URL_SOURCES) or DEFAULT_BASE_URL,
            default_model=first_present(environ, MODEL_SOURCES) or DEFAULT_MODEL,
            timeout=_parse_timeout(first_present(environ, TIMEOUT_SOURCES)),
        )

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError()
        return self.api_key

    def endpoint_for(self, model: str) -> str:
        return (
            f"{self.base_url.rstrip('/')}/v1beta/models/"
            f"{quote(model, safe='')}:generateContent"
        )


def _parse_timeout(value: str | None) -> float | None:
    if value is None:
        return None

    try:
        timeout = float(value)
    except ValueError:
        logger.warning("Ignoring non-numeric GEMINI_TIMEOUT_SECONDS=%r", value)
        return None

    return timeout if timeout > 0 else None

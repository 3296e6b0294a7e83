from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"

# Wire shapes are forwarded as plain JSON objects.
TextPart = dict[str, str]
ConversationTurn = dict[str, Any]
NormalizedInstruction = dict[str, Any]
UpstreamPayload = dict[str, Any]


@dataclass(slots=True)
class InboundCall:
    method: str
    query: Mapping[str, str] = field(default_factory=dict)
    body: str | None = None


@dataclass(slots=True)
class CanonicalRequest:
    prompt_text: str
    model: str
    raw_contents: list[Any] | None = None
    system_instruction: Any = None
    generation_config: Any = None
    safety_settings: Any = None

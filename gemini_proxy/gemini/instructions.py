from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from gemini_proxy.core.types import NormalizedInstruction

logger = logging.getLogger(__name__)


class InstructionKind(Enum):
    ABSENT = "absent"
    TEXT = "text"
    STRUCTURED = "structured"


@dataclass(frozen=True, slots=True)
class RawInstruction:
    kind: InstructionKind
    value: Any = None

    @classmethod
    def classify(cls, value: Any) -> RawInstruction:
        if value is None:
            return cls(InstructionKind.ABSENT)

        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return cls(InstructionKind.ABSENT)
            return cls(InstructionKind.TEXT, stripped)

        if isinstance(value, (dict, list)):
            return cls(InstructionKind.STRUCTURED, value)

        logger.debug(
            "Dropping system instruction of unsupported type %s",
            type(value).__name__,
        )
        return cls(InstructionKind.ABSENT)


def normalize_system_instruction(value: Any) -> NormalizedInstruction | None:
    """Convert a caller-supplied instruction into the ``{"parts": [...]}`` shape.

    Strings become a single text part. Objects are forwarded untouched,
    whether or not they already expose ``parts``.
    """

    raw = RawInstruction.classify(value)

    if raw.kind is InstructionKind.ABSENT:
        return None

    if raw.kind is InstructionKind.TEXT:
        return {"parts": [{"text": raw.value}]}

    return raw.value

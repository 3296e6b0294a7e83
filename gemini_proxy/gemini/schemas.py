from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class GenerateRequestBody(BaseModel):
    """Every field name front-end callers have been seen to send.

    Values are left untyped; the adapter decides which shapes it accepts so a
    wrong type degrades to "absent" instead of a validation failure.
    """

    userPrompt: Any = None
    prompt: Any = None
    systemInstruction: Any = None
    system_instruction: Any = None
    instruction: Any = None
    model: Any = None

    # Body-only fields
    contents: Any = None
    generationConfig: Any = None
    generation_config: Any = None
    safetySettings: Any = None
    safety_settings: Any = None

    model_config = ConfigDict(extra="allow")


class GenerateResponse(BaseModel):
    ok: bool = True
    model: str
    text: str | None = None
    result: str | None = None
    output: str | None = None

    # Passthrough from the provider, omitted when the provider omitted them
    candidates: Any = None
    usageMetadata: Any = None
    promptFeedback: Any = None
    modelVersion: Any = None

    data: Any = None

    model_config = ConfigDict(extra="allow")


PASSTHROUGH_FIELDS = ("candidates", "usageMetadata", "promptFeedback", "modelVersion")

from __future__ import annotations

import json
import logging
from typing import Any

from gemini_proxy.core.config import ProxySettings
from gemini_proxy.core.errors import ProxyError, UpstreamError, ValidationError
from gemini_proxy.core.types import (
    DEFAULT_MODEL,
    CanonicalRequest,
    InboundCall,
    UpstreamPayload,
)
from gemini_proxy.core.upstream import post_generate_content

from .errors import map_proxy_error
from .instructions import InstructionKind, RawInstruction, normalize_system_instruction
from .schemas import PASSTHROUGH_FIELDS, GenerateRequestBody, GenerateResponse

logger = logging.getLogger(__name__)

PROMPT_FIELDS = ("userPrompt", "prompt")
INSTRUCTION_FIELDS = ("systemInstruction", "system_instruction", "instruction")
GENERATION_CONFIG_FIELDS = ("generationConfig", "generation_config")
SAFETY_SETTINGS_FIELDS = ("safetySettings", "safety_settings")

_BODY_METHODS = {"POST"}
_CANDIDATE_SEPARATOR = "\n\n"


async def create_generation(call: InboundCall, settings: ProxySettings) -> dict[str, Any]:
    try:
        api_key = settings.require_api_key()
        request = normalize_inbound_call(call, default_model=settings.default_model)
        payload = build_upstream_payload(request)

        logger.info(
            "Forwarding %s call to model=%s (turns=%d, system_instruction=%s)",
            call.method.upper(),
            request.model,
            len(payload["contents"]),
            "system_instruction" in payload,
        )

        reply = await post_generate_content(
            settings.endpoint_for(request.model),
            api_key,
            payload,
            timeout=settings.timeout,
        )
        return normalize_upstream_response(reply.status_code, reply.text, model=request.model)
    except ProxyError:
        raise
    except Exception as exc:
        raise map_proxy_error(exc) from exc


def normalize_inbound_call(
    call: InboundCall,
    default_model: str = DEFAULT_MODEL,
) -> CanonicalRequest:
    query = GenerateRequestBody.model_validate(dict(call.query))

    if call.method.upper() in _BODY_METHODS:
        body = _parse_body(call.body)
        sources = (body, query)
    else:
        body = None
        sources = (query,)

    raw_contents = _raw_contents(body)
    prompt_text = _first_text(sources, PROMPT_FIELDS) or ""

    if raw_contents is None and not prompt_text.strip():
        raise ValidationError("Missing userPrompt.")

    body_only = (body,) if body is not None else ()
    requested_model = _first_text(sources, ("model",))

    return CanonicalRequest(
        prompt_text=prompt_text,
        model=requested_model.strip() if requested_model else default_model,
        raw_contents=raw_contents,
        system_instruction=normalize_system_instruction(_first_instruction(sources)),
        generation_config=_first_present(body_only, GENERATION_CONFIG_FIELDS),
        safety_settings=_first_present(body_only, SAFETY_SETTINGS_FIELDS),
    )


def build_upstream_payload(request: CanonicalRequest) -> UpstreamPayload:
    if request.raw_contents is not None:
        contents = request.raw_contents
    else:
        contents = [{"role": "user", "parts": [{"text": request.prompt_text.strip()}]}]

    # The REST API spells this one field in snake_case.
    payload: UpstreamPayload = {"contents": contents}

    if request.system_instruction is not None:
        payload["system_instruction"] = request.system_instruction

    if request.generation_config is not None:
        payload["generationConfig"] = request.generation_config

    if request.safety_settings is not None:
        payload["safetySettings"] = request.safety_settings

    return payload


def normalize_upstream_response(
    status_code: int,
    raw_text: str,
    model: str = DEFAULT_MODEL,
) -> dict[str, Any]:
    data = _parse_upstream_body(raw_text)

    if not 200 <= status_code < 300:
        logger.warning("Gemini API returned HTTP %s for model=%s", status_code, model)
        raise UpstreamError(status_code, data)

    text = extract_text(data)
    passthrough = (
        {name: data.get(name) for name in PASSTHROUGH_FIELDS} if isinstance(data, dict) else {}
    )
    response = GenerateResponse(
        model=model,
        text=text,
        result=text,
        output=text,
        data=data,
        **passthrough,
    )

    omitted = {name for name in PASSTHROUGH_FIELDS if getattr(response, name) is None}
    return response.model_dump(exclude=omitted)


def extract_text(data: Any) -> str | None:
    """Join the text of every candidate; parts within a candidate are concatenated."""

    if not isinstance(data, dict):
        return None

    candidates = data.get("candidates")
    if not isinstance(candidates, list):
        return None

    texts = [_candidate_text(candidate) for candidate in candidates]
    if not any(texts):
        return None
    return _CANDIDATE_SEPARATOR.join(texts)


def _candidate_text(candidate: Any) -> str:
    if not isinstance(candidate, dict):
        return ""

    content = candidate.get("content")
    if not isinstance(content, dict):
        return ""

    parts = content.get("parts")
    if not isinstance(parts, list):
        return ""

    return "".join(
        part["text"]
        for part in parts
        if isinstance(part, dict) and isinstance(part.get("text"), str)
    )


def _parse_body(raw_body: str | None) -> GenerateRequestBody:
    if raw_body is None or not raw_body.strip():
        return GenerateRequestBody()

    try:
        decoded = json.loads(raw_body)
    except json.JSONDecodeError:
        raise ValidationError("Invalid JSON body.") from None

    if not isinstance(decoded, dict):
        raise ValidationError("Request body must be a JSON object.")

    return GenerateRequestBody.model_validate(decoded)


def _parse_upstream_body(raw_text: str) -> Any:
    try:
        return json.loads(raw_text)
    except ValueError:
        return {"raw": raw_text}


def _raw_contents(body: GenerateRequestBody | None) -> list[Any] | None:
    if body is None:
        return None

    if isinstance(body.contents, list) and body.contents:
        return body.contents

    return None


def _first_text(sources: tuple[GenerateRequestBody, ...], fields: tuple[str, ...]) -> str | None:
    for source in sources:
        for name in fields:
            value = getattr(source, name, None)
            if isinstance(value, str) and value.strip():
                return value
    return None


def _first_instruction(sources: tuple[GenerateRequestBody, ...]) -> Any:
    for source in sources:
        for name in INSTRUCTION_FIELDS:
            value = getattr(source, name, None)
            if RawInstruction.classify(value).kind is not InstructionKind.ABSENT:
                return value
    return None


def _first_present(sources: tuple[GenerateRequestBody, ...], fields: tuple[str, ...]) -> Any:
    for source in sources:
        for name in fields:
            value = getattr(source, name, None)
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            return value
    return None

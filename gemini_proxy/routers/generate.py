from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from gemini_proxy.core.config import ProxySettings
from gemini_proxy.core.types import InboundCall
from gemini_proxy.dependencies import CORS_HEADERS, get_settings, json_response
from gemini_proxy.gemini.adapter import create_generation

router = APIRouter(tags=["gemini"])


@router.api_route("/gemini-proxy", methods=["GET", "POST", "OPTIONS"])
@router.api_route("/.netlify/functions/gemini-proxy", methods=["GET", "POST", "OPTIONS"])
async def gemini_proxy(
    request: Request,
    settings: ProxySettings = Depends(get_settings),
):
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=dict(CORS_HEADERS))

    raw_body = await request.body()
    call = InboundCall(
        method=request.method,
        query=dict(request.query_params),
        body=raw_body.decode("utf-8", errors="replace") if raw_body else None,
    )

    payload = await create_generation(call, settings)
    return json_response(200, payload)

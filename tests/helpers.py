from __future__ import annotations

import json
from typing import Any, Callable

import httpx

from vibe.core.domain.models import ProviderResult
from vibe.core.services.fanout import fan_out


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode("utf-8"))


def mock_client(handler: Callable[[httpx.Request], Any]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), timeout=5.0)


def openai_body(text: str) -> dict[str, Any]:
    return {
        "id": "resp_1",
        "output": [
            {"type": "reasoning", "summary": []},
            {"type": "message", "content": [{"type": "output_text", "text": text}]},
        ],
    }


def chat_body(text: str | None) -> dict[str, Any]:
    return {"id": "gen-1", "choices": [{"index": 0, "message": {"role": "assistant", "content": text}}]}


def anthropic_body(text: str) -> dict[str, Any]:
    return {"id": "msg_1", "type": "message", "content": [{"type": "text", "text": text}]}


async def collect(prompt: str, providers, client: httpx.AsyncClient) -> list[ProviderResult]:
    return [result async for result in fan_out(prompt, providers, client)]

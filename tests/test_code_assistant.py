from __future__ import annotations

import json

import httpx
import pytest

from helpers import chat_body, json_response, mock_client
from vibe.adapters.code_assistant import CLIENT_TITLE, PROJECT_URL, CodeAssistant, build_messages
from vibe.core.domain.errors import MissingCredentialError, NonSuccessStatusError, ProviderAPIError

SSE_BODY = (
    ": OPENROUTER PROCESSING\n\n"
    'data: {"choices":[{"delta":{"content":"Hel"}}]}\n\n'
    "data: not-json\n\n"
    'data: {"error":{"message":"hiccup","type":"server"}}\n\n'
    'data: {"choices":[{"delta":{"content":"lo"}}]}\n\n'
    "data: [DONE]\n\n"
    'data: {"choices":[{"delta":{"content":"ignored"}}]}\n\n'
)


def test_build_messages_embeds_context_and_prompt():
    messages = build_messages(context="// File: a.go\npackage a", prompt="add tests")

    assert [m["role"] for m in messages] == ["system", "user"]
    assert "--- FILE CONTEXT START ---\n// File: a.go\npackage a\n--- FILE CONTEXT END ---" in messages[0]["content"]
    assert '"add tests"' in messages[1]["content"]


def test_missing_key():
    with pytest.raises(MissingCredentialError, match="OPENROUTER_API_KEY"):
        CodeAssistant(api_key=None, model="m", client=httpx.AsyncClient())


@pytest.mark.asyncio
async def test_stream_yields_deltas_and_warns_on_bad_chunks():
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, content=SSE_BODY.encode("utf-8"), headers={"content-type": "text/event-stream"})

    warnings: list[str] = []
    async with mock_client(handler) as client:
        assistant = CodeAssistant(api_key="k", model="anthropic/claude-3.5-sonnet", client=client)
        chunks = [c async for c in assistant.stream(build_messages(context="", prompt="p"), warn=warnings.append)]

    assert "".join(chunks) == "Hello"
    assert len(warnings) == 2
    assert "hiccup" in warnings[1]
    request = captured[0]
    assert request.headers["HTTP-Referer"] == PROJECT_URL
    assert request.headers["X-Title"] == CLIENT_TITLE
    body = json.loads(request.content)
    assert body["stream"] is True
    assert body["model"] == "anthropic/claude-3.5-sonnet"


@pytest.mark.asyncio
async def test_stream_non_ok_status():
    async with mock_client(lambda request: httpx.Response(401, text="unauthorized")) as client:
        assistant = CodeAssistant(api_key="k", model="m", client=client)
        with pytest.raises(NonSuccessStatusError) as excinfo:
            async for _ in assistant.stream([]):
                pass

    assert excinfo.value.status_code == 401
    assert "401" in excinfo.value.message and "Body: unauthorized" in excinfo.value.message


@pytest.mark.asyncio
async def test_complete_returns_content():
    async with mock_client(lambda request: json_response(chat_body("done"))) as client:
        assistant = CodeAssistant(api_key="k", model="m", client=client)
        assert await assistant.complete([]) == "done"


@pytest.mark.asyncio
async def test_complete_empty_and_error_body():
    async with mock_client(lambda request: json_response(chat_body(""))) as client:
        assert await CodeAssistant(api_key="k", model="m", client=client).complete([]) is None

    error = {"error": {"message": "model gone", "type": "invalid_request"}}
    async with mock_client(lambda request: json_response(error)) as client:
        with pytest.raises(ProviderAPIError, match="model gone"):
            await CodeAssistant(api_key="k", model="m", client=client).complete([])

from __future__ import annotations

import json

import httpx
import pytest
import respx

from helpers import anthropic_body, chat_body, collect, json_response, mock_client, openai_body
from vibe.adapters.providers.anthropic import AnthropicProvider
from vibe.adapters.providers.openai_responses import OpenAIResponsesProvider
from vibe.adapters.providers.openrouter import OPENROUTER_CHAT_URL, OpenRouterProvider
from vibe.core.domain.errors import MissingCredentialError, NonSuccessStatusError
from vibe.core.domain.models import ErrorKind, ProviderRequest
from vibe.core.services.requester import call_provider, request_text

OPENAI_URL = "https://api.openai.com/v1/responses"
ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"


@pytest.mark.asyncio
@respx.mock
async def test_missing_credential_makes_no_request():
    route = respx.post(OPENAI_URL).mock(return_value=httpx.Response(200, json=openai_body("x")))

    async with httpx.AsyncClient() as client:
        result = await call_provider(OpenAIResponsesProvider(api_key="  "), "hi", client)

    assert not result.ok
    assert result.error.kind is ErrorKind.MISSING_CREDENTIAL
    assert result.error.message == "OPENAI_API_KEY environment variable not set"
    assert not route.called
    assert respx.calls.call_count == 0


@pytest.mark.asyncio
@respx.mock
async def test_success_sends_json_body_and_auth():
    route = respx.post(OPENAI_URL).mock(return_value=httpx.Response(200, json=openai_body("hello back")))

    async with httpx.AsyncClient() as client:
        result = await call_provider(OpenAIResponsesProvider(api_key="sk-1"), "hello", client)

    assert result.ok and result.text == "hello back"
    sent = route.calls.last.request
    assert sent.headers["Authorization"] == "Bearer sk-1"
    assert json.loads(sent.content) == {"model": "gpt-4.1", "input": "hello"}


@pytest.mark.asyncio
@respx.mock
async def test_non_200_with_structured_error():
    respx.post(OPENROUTER_CHAT_URL).mock(
        return_value=httpx.Response(
            429,
            json={"error": {"message": "Rate limit exceeded", "type": "rate_limit", "code": 429}},
        )
    )

    async with httpx.AsyncClient() as client:
        result = await call_provider(OpenRouterProvider(api_key="k"), "hi", client)

    assert result.error.kind is ErrorKind.NON_SUCCESS_STATUS
    assert result.error.status_code == 429
    assert "429" in result.error.message
    assert "Rate limit exceeded" in result.error.message
    assert result.error.code == "429"


@pytest.mark.asyncio
@respx.mock
async def test_non_200_with_raw_body():
    respx.post(ANTHROPIC_URL).mock(return_value=httpx.Response(502, text="upstream exploded"))

    async with httpx.AsyncClient() as client:
        with pytest.raises(NonSuccessStatusError) as excinfo:
            await request_text(AnthropicProvider(api_key="k"), "hi", client)

    assert excinfo.value.message == "API request failed with status 502: upstream exploded"


@pytest.mark.asyncio
@respx.mock
async def test_timeout_becomes_network_failure():
    respx.post(ANTHROPIC_URL).mock(side_effect=httpx.ReadTimeout)

    async with httpx.AsyncClient() as client:
        result = await call_provider(AnthropicProvider(api_key="k"), "hi", client)

    assert result.error.kind is ErrorKind.NETWORK
    assert "timed out" in result.error.message


@pytest.mark.asyncio
@respx.mock
async def test_connect_error_becomes_network_failure():
    respx.post(ANTHROPIC_URL).mock(side_effect=httpx.ConnectError)

    async with httpx.AsyncClient() as client:
        result = await call_provider(AnthropicProvider(api_key="k"), "hi", client)

    assert result.error.kind is ErrorKind.NETWORK
    assert result.error.message.startswith("failed to send request")


@pytest.mark.asyncio
@respx.mock
async def test_malformed_json_is_parse_failure():
    respx.post(OPENROUTER_CHAT_URL).mock(return_value=httpx.Response(200, text="{not json"))

    async with httpx.AsyncClient() as client:
        result = await call_provider(OpenRouterProvider(api_key="k"), "hi", client)

    assert result.error.kind is ErrorKind.RESPONSE_PARSE
    assert "failed to unmarshal response body" in result.error.message


@pytest.mark.asyncio
@respx.mock
async def test_error_object_with_200_is_api_error():
    respx.post(OPENROUTER_CHAT_URL).mock(
        return_value=httpx.Response(200, json={"error": {"message": "No endpoints found", "code": 404}})
    )

    async with httpx.AsyncClient() as client:
        result = await call_provider(OpenRouterProvider(api_key="k"), "hi", client)

    assert result.error.kind is ErrorKind.API_ERROR
    assert "No endpoints found" in result.error.message


@pytest.mark.asyncio
@respx.mock
async def test_empty_content():
    respx.post(OPENROUTER_CHAT_URL).mock(return_value=httpx.Response(200, json=chat_body("")))

    async with httpx.AsyncClient() as client:
        result = await call_provider(OpenRouterProvider(api_key="k"), "hi", client)

    assert result.error.kind is ErrorKind.EMPTY_CONTENT


@pytest.mark.asyncio
@respx.mock
async def test_anthropic_success():
    route = respx.post(ANTHROPIC_URL).mock(return_value=httpx.Response(200, json=anthropic_body("hey")))

    async with httpx.AsyncClient() as client:
        result = await call_provider(AnthropicProvider(api_key="k"), "hi", client)

    assert result.text == "hey"
    assert route.calls.last.request.headers["x-api-key"] == "k"


@pytest.mark.asyncio
async def test_request_text_raises_before_touching_client():
    class ExplodingClient:
        async def post(self, *args, **kwargs):
            raise AssertionError("should not be called")

    with pytest.raises(MissingCredentialError):
        await request_text(AnthropicProvider(api_key=None), "hi", ExplodingClient())


class StubAdapter:
    """Adapter de prueba con payload y parser configurables."""

    credential_env = "STUB_API_KEY"

    def __init__(self, name="Stub", *, payload=None, parse=None) -> None:
        self.name = name
        self.api_key = "k"
        self._payload = payload if payload is not None else {"prompt": "x"}
        self._parse = parse

    def build_request(self, prompt: str) -> ProviderRequest:
        return ProviderRequest(provider=self.name, url="https://stub.example/v1/chat", payload=self._payload)

    def parse_response(self, data):
        if self._parse is not None:
            return self._parse(data)
        return data["text"]


def _explode(_data):
    raise RuntimeError("parser exploded")


@pytest.mark.asyncio
async def test_unserializable_payload_is_request_construction_failure():
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return json_response({"text": "never"})

    async with mock_client(handler) as client:
        result = await call_provider(StubAdapter(payload={"bad": object()}), "hi", client)

    assert result.error.kind is ErrorKind.REQUEST_CONSTRUCTION
    assert calls == []


@pytest.mark.asyncio
async def test_unexpected_parser_exception_still_yields_one_result_per_provider():
    providers = [StubAdapter("Broken", parse=_explode), StubAdapter("Fine")]

    async with mock_client(lambda request: json_response({"text": "ok"})) as client:
        single = await call_provider(providers[0], "hi", client)
        results = await collect("hi", providers, client)

    assert single.error.kind is ErrorKind.UNEXPECTED
    assert "RuntimeError: parser exploded" in single.error.message
    assert len(results) == 2
    by_name = {r.provider: r for r in results}
    assert by_name["Broken"].error.kind is ErrorKind.UNEXPECTED
    assert by_name["Fine"].text == "ok"

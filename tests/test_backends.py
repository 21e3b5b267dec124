"""Tests für die Completion-Backends (Claude SDK, Gemini REST)."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import pytest

from app.provider.claude import ClaudeBackend
from app.provider.exceptions import (
    ErrorKind,
    HttpStatusError,
    NetworkFailureError,
    ProviderMalformedResponseError,
    ProviderNotConfiguredError,
)
from app.provider.gemini import GeminiBackend
from app.provider.media import MediaPayload
from tests.conftest import RecordingTransport

API_KEY = "sk-ant-test-key"
MEDIA = MediaPayload(mime_type="image/png", data_base64="aGVsbG8=")
ANTHROPIC_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _sdk_client(message=None, error: Exception | None = None) -> MagicMock:
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=message, side_effect=error)
    client.close = AsyncMock()
    return client


def _message(*texts: str) -> SimpleNamespace:
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=t) for t in texts])


class TestClaudeBackendInit:
    def test_missing_key(self):
        with pytest.raises(ProviderNotConfiguredError) as exc_info:
            ClaudeBackend(api_key=None)
        assert exc_info.value.kind == ErrorKind.PROVIDER_NOT_CONFIGURED

    def test_invalid_key_format(self):
        with pytest.raises(ProviderNotConfiguredError):
            ClaudeBackend(api_key="not-a-claude-key")

    def test_sdk_retries_disabled(self):
        backend = ClaudeBackend(api_key=API_KEY)
        assert backend._client.max_retries == 0


class TestClaudeBackendComplete:
    @pytest.mark.asyncio
    async def test_text_only(self):
        client = _sdk_client(_message("Overall Assessment: fine."))
        backend = ClaudeBackend(api_key=API_KEY, model="claude-test", client=client)

        text = await backend.complete("Analyze this")

        assert text == "Overall Assessment: fine."
        kwargs = client.messages.create.await_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["messages"][0]["content"] == [{"type": "text", "text": "Analyze this"}]

    @pytest.mark.asyncio
    async def test_image_block_before_text(self):
        client = _sdk_client(_message("ok"))
        backend = ClaudeBackend(api_key=API_KEY, client=client)

        await backend.complete("Analyze this", MEDIA)

        content = client.messages.create.await_args.kwargs["messages"][0]["content"]
        assert content[0] == {
            "type": "image",
            "source": {"type": "base64", "media_type": "image/png", "data": "aGVsbG8="},
        }
        assert content[1]["type"] == "text"

    @pytest.mark.asyncio
    async def test_skips_empty_blocks(self):
        client = _sdk_client(_message("", "second block"))
        backend = ClaudeBackend(api_key=API_KEY, client=client)

        assert await backend.complete("p") == "second block"

    @pytest.mark.asyncio
    async def test_no_text_is_malformed(self):
        client = _sdk_client(SimpleNamespace(content=[SimpleNamespace(type="tool_use")]))
        backend = ClaudeBackend(api_key=API_KEY, client=client)

        with pytest.raises(ProviderMalformedResponseError):
            await backend.complete("p")

    @pytest.mark.asyncio
    async def test_connection_error(self):
        error = anthropic.APIConnectionError(request=ANTHROPIC_REQUEST)
        backend = ClaudeBackend(api_key=API_KEY, client=_sdk_client(error=error))

        with pytest.raises(NetworkFailureError):
            await backend.complete("p")

    @pytest.mark.asyncio
    async def test_status_error(self):
        response = httpx.Response(529, request=ANTHROPIC_REQUEST)
        error = anthropic.APIStatusError("overloaded", response=response, body=None)
        client = _sdk_client(error=error)
        backend = ClaudeBackend(api_key=API_KEY, client=client)

        with pytest.raises(HttpStatusError) as exc_info:
            await backend.complete("p")

        assert exc_info.value.status_code == 529
        assert client.messages.create.await_count == 1


def _gemini_ok(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class TestGeminiBackend:
    def test_missing_key(self):
        with pytest.raises(ProviderNotConfiguredError):
            GeminiBackend(api_key="", http=httpx.AsyncClient())

    def test_payload_with_media(self):
        backend = GeminiBackend(api_key="g-key", http=httpx.AsyncClient(), max_tokens=256)
        payload = backend.build_payload("prompt", MEDIA)

        parts = payload["contents"][0]["parts"]
        assert parts[0] == {"text": "prompt"}
        assert parts[1] == {"inline_data": {"mime_type": "image/png", "data": "aGVsbG8="}}
        assert payload["generationConfig"]["temperature"] == 0.4
        assert payload["generationConfig"]["topK"] == 32
        assert payload["generationConfig"]["maxOutputTokens"] == 256

    @pytest.mark.asyncio
    async def test_success(self):
        transport = RecordingTransport(lambda request: httpx.Response(200, json=_gemini_ok("All good.")))
        async with httpx.AsyncClient(transport=transport) as http:
            backend = GeminiBackend(
                api_key="g-key", http=http, model="gemini-test", base_url="https://gl.example/v1/"
            )
            text = await backend.complete("prompt")

        assert text == "All good."
        request = transport.requests[0]
        assert request.url.path == "/v1/models/gemini-test:generateContent"
        assert request.url.params["key"] == "g-key"
        assert json.loads(request.content)["contents"][0]["parts"] == [{"text": "prompt"}]

    @pytest.mark.asyncio
    async def test_http_error(self):
        transport = RecordingTransport(lambda request: httpx.Response(403, text="denied"))
        async with httpx.AsyncClient(transport=transport) as http:
            backend = GeminiBackend(api_key="g-key", http=http)
            with pytest.raises(HttpStatusError) as exc_info:
                await backend.complete("prompt")

        assert exc_info.value.status_code == 403
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with httpx.AsyncClient(transport=RecordingTransport(handler)) as http:
            backend = GeminiBackend(api_key="g-key", http=http)
            with pytest.raises(NetworkFailureError):
                await backend.complete("prompt")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"candidates": []},
            {"promptFeedback": {"blockReason": "SAFETY"}},
            {"candidates": [{"content": {"parts": [{"text": "  "}]}}]},
        ],
    )
    async def test_unexpected_shape(self, body):
        transport = RecordingTransport(lambda request: httpx.Response(200, json=body))
        async with httpx.AsyncClient(transport=transport) as http:
            backend = GeminiBackend(api_key="g-key", http=http)
            with pytest.raises(ProviderMalformedResponseError):
                await backend.complete("prompt")

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        transport = RecordingTransport(lambda request: httpx.Response(200, text="<html>oops</html>"))
        async with httpx.AsyncClient(transport=transport) as http:
            backend = GeminiBackend(api_key="g-key", http=http)
            with pytest.raises(ProviderMalformedResponseError):
                await backend.complete("prompt")

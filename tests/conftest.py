"""Gemeinsame Fixtures für die Tests."""

from __future__ import annotations

import httpx
import pytest

from app.config import ProviderKind, Settings
from app.provider.exceptions import ProviderError
from app.provider.media import MediaPayload


class FakeBackend:
    """Completion-Backend ohne Netzwerk: liefert festen Text oder wirft."""

    name = "fake"

    def __init__(self, response: str | None = "", error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[tuple[str, MediaPayload | None]] = []

    async def complete(self, prompt: str, media: MediaPayload | None = None) -> str:
        self.calls.append((prompt, media))
        if self.error is not None:
            raise self.error
        return self.response  # type: ignore[return-value]


class RecordingTransport(httpx.MockTransport):
    """MockTransport, der alle Requests mitschreibt."""

    def __init__(self, handler=None) -> None:
        self.requests: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            if handler is None:
                return httpx.Response(500)
            return handler(request)

        super().__init__(_handler)


def make_settings(**overrides) -> Settings:
    """Settings ohne .env und ohne Keys aus der Umgebung."""
    values = {
        "anthropic_api_key": None,
        "gemini_api_key": None,
        "completion_provider": ProviderKind.CLAUDE,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def unconfigured_settings() -> Settings:
    return make_settings()


@pytest.fixture
def structured_response() -> str:
    return (
        "1. Overall Assessment: The content is clearly acceptable and complies with all policies.\n"
        "2. Specific Issues: None were identified.\n"
        "3. Reasoning: The text is a friendly greeting with no harmful elements.\n"
        "4. Recommendations: The content can be published as is."
    )


@pytest.fixture
def unsafe_response() -> str:
    return (
        "**Overall Assessment**: This content is unsafe because it contains a threat.\n\n"
        "**Specific Issues**: Threatening language directed at a person.\n\n"
        "**Reasoning**: The message is clearly harmful and would violate the policy on threats.\n\n"
        "**Recommendations**: Remove the content."
    )

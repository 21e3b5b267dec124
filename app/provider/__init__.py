"""Provider-Adapter für die Completion-Fähigkeit.

Öffentliche API:
    ProviderAdapter   – Medien aufbereiten, Backend aufrufen, Rohtext liefern
    create_backend    – Backend aus Settings (None = nicht konfiguriert)
    ClaudeBackend, GeminiBackend – austauschbare Completion-Backends

Exceptions:
    ProviderError, NetworkFailureError, HttpStatusError, ...

Typische Verwendung:
    async with httpx.AsyncClient() as http:
        backend = create_backend(settings, http)
        adapter = ProviderAdapter(backend, http)
        raw = await adapter.request_completion(prompt, content, ContentType.TEXT)
"""

from app.provider.adapter import CompletionBackend, ProviderAdapter, create_backend
from app.provider.claude import ClaudeBackend
from app.provider.exceptions import (
    ErrorKind,
    HttpStatusError,
    MalformedMediaError,
    NetworkFailureError,
    ProviderError,
    ProviderMalformedResponseError,
    ProviderNotConfiguredError,
)
from app.provider.gemini import GeminiBackend
from app.provider.media import MediaPayload, fetch_image, parse_data_url, resolve_media

__all__ = [
    # Adapter
    "ProviderAdapter",
    "CompletionBackend",
    "create_backend",
    # Backends
    "ClaudeBackend",
    "GeminiBackend",
    # Medien
    "MediaPayload",
    "fetch_image",
    "parse_data_url",
    "resolve_media",
    # Exceptions
    "ErrorKind",
    "ProviderError",
    "NetworkFailureError",
    "HttpStatusError",
    "MalformedMediaError",
    "ProviderMalformedResponseError",
    "ProviderNotConfiguredError",
]

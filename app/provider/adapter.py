"""Provider-Adapter: Prompt + Inhalt → roher Antworttext.

Verbindet Medienaufbereitung und Completion-Backend.  Pro Aufruf
höchstens zwei ausgehende Requests (Bild-Download, Completion),
keine Retries, kein eigener Timeout.
"""

from __future__ import annotations

from typing import Protocol

import httpx

from app.classifier.models import ContentType
from app.classifier.prompts import attach_content
from app.config import ProviderKind, Settings
from app.logging_config import get_logger
from app.provider.exceptions import ProviderNotConfiguredError
from app.provider.media import MediaPayload, resolve_media

logger = get_logger("provider")


class CompletionBackend(Protocol):
    """Austauschbare Completion-Fähigkeit ("Prompt rein, Text raus")."""

    name: str

    async def complete(self, prompt: str, media: MediaPayload | None = None) -> str:
        ...


class ProviderAdapter:
    """Liefert den unstrukturierten Antworttext des Backends.

    Alle Fehler kommen als ProviderError-Unterklassen heraus.
    """

    def __init__(self, backend: CompletionBackend, http: httpx.AsyncClient) -> None:
        self._backend = backend
        self._http = http

    @property
    def backend_name(self) -> str:
        return self._backend.name

    async def request_completion(
        self,
        prompt: str,
        content: str,
        content_type: ContentType,
    ) -> str:
        """Bereitet Medien auf, ruft das Backend genau einmal auf.

        Ohne Media-Payload wird der Inhalt als Text an den Prompt gehängt.
        """
        media = await resolve_media(content, content_type, self._http)
        if media is None:
            prompt = attach_content(prompt, content, content_type)

        logger.info(
            "Completion anfordern: backend=%s, type=%s, media=%s",
            self._backend.name,
            content_type.value,
            media.mime_type if media else "none",
        )
        raw_text = await self._backend.complete(prompt, media)
        logger.debug("Antwort erhalten: %d Zeichen", len(raw_text))
        return raw_text


def create_backend(settings: Settings, http: httpx.AsyncClient) -> CompletionBackend | None:
    """Erstellt das konfigurierte Backend.

    Gibt None zurück wenn kein (gültiger) API-Key gesetzt ist – die
    Pipeline geht dann direkt in den Fallback, ohne Netzwerkaufruf.
    """
    if not settings.is_provider_configured:
        logger.warning(
            "Kein API-Key für Provider '%s' – Fallback-Modus aktiv",
            settings.completion_provider.value,
        )
        return None

    try:
        if settings.completion_provider == ProviderKind.GEMINI:
            from app.provider.gemini import GeminiBackend

            return GeminiBackend(
                api_key=settings.gemini_api_key,
                http=http,
                model=settings.gemini_model,
                base_url=settings.gemini_base_url,
                max_tokens=settings.max_tokens,
            )

        from app.provider.claude import ClaudeBackend

        return ClaudeBackend(
            api_key=settings.anthropic_api_key,
            model=settings.claude_model,
            max_tokens=settings.max_tokens,
        )
    except ProviderNotConfiguredError as exc:
        logger.warning("Provider nicht nutzbar: %s – Fallback-Modus aktiv", exc)
        return None

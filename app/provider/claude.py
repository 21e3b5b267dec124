"""Completion-Backend auf Basis der Claude API.

Verwendet das Anthropic Python SDK (AsyncAnthropic) für asynchrone
API-Aufrufe.  Bilder werden als Base64-Image-Block vor dem Prompt
gesendet.  Automatische SDK-Retries sind abgeschaltet – ein
fehlgeschlagener Versuch wird sofort nach oben gemeldet.
"""

from typing import Any

import anthropic

from app.logging_config import get_logger
from app.provider.exceptions import (
    HttpStatusError,
    NetworkFailureError,
    ProviderMalformedResponseError,
    ProviderNotConfiguredError,
)
from app.provider.media import MediaPayload

logger = get_logger("provider")

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_MAX_TOKENS = 1024


class ClaudeBackend:
    """Asynchrones Claude-Backend für die Inhaltsprüfung.

    Verwendung:
        backend = ClaudeBackend(api_key="sk-ant-...")
        text = await backend.complete(prompt, media)
    """

    name = "claude"

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        client: Any | None = None,
    ) -> None:
        """Initialisiert das Backend.

        Args:
            api_key: Anthropic API Key (muss mit 'sk-ant-' beginnen).
            model: Modell-ID.
            max_tokens: Maximale Anzahl Output-Tokens.
            client: Optionaler vorkonfigurierter SDK-Client (Tests).

        Raises:
            ProviderNotConfiguredError: Wenn der API-Key fehlt oder ungültig ist.
        """
        if not api_key:
            raise ProviderNotConfiguredError(
                "ANTHROPIC_API_KEY ist nicht konfiguriert."
            )
        if not api_key.startswith("sk-ant-"):
            raise ProviderNotConfiguredError(
                "ANTHROPIC_API_KEY hat ein ungültiges Format "
                "(erwartet: Prefix 'sk-ant-')."
            )

        self._client = client or anthropic.AsyncAnthropic(
            api_key=api_key,
            max_retries=0,
        )
        self._model = model
        self._max_tokens = max_tokens

        logger.info(
            "ClaudeBackend initialisiert: model=%s, max_tokens=%d",
            model,
            max_tokens,
        )

    async def close(self) -> None:
        """Schließt den HTTP-Client des SDK."""
        await self._client.close()

    async def complete(self, prompt: str, media: MediaPayload | None = None) -> str:
        """Sendet Prompt (und optional ein Bild) und gibt den Antworttext zurück.

        Raises:
            NetworkFailureError: Verbindung fehlgeschlagen.
            HttpStatusError: API antwortet mit Fehlerstatus.
            ProviderMalformedResponseError: Antwort ohne Textinhalt.
        """
        content: list[dict[str, Any]] = []
        if media is not None:
            content.append(
                {
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": media.mime_type,
                        "data": media.data_base64,
                    },
                }
            )
        content.append({"type": "text", "text": prompt})

        logger.debug(
            "Claude-Aufruf: model=%s, prompt=%d Zeichen, media=%s",
            self._model,
            len(prompt),
            media.mime_type if media else None,
        )

        try:
            message = await self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=[{"role": "user", "content": content}],
            )
        except anthropic.APIConnectionError as exc:
            raise NetworkFailureError(
                f"Verbindung zur Claude API fehlgeschlagen: {exc}"
            ) from exc
        except anthropic.APIStatusError as exc:
            raise HttpStatusError(
                f"Claude API Fehler (HTTP {exc.status_code}): {exc.message}",
                status_code=exc.status_code,
            ) from exc

        return self._extract_text(message)

    @staticmethod
    def _extract_text(message: Any) -> str:
        """Extrahiert den ersten nicht-leeren TextBlock aus der API-Antwort.

        Raises:
            ProviderMalformedResponseError: Wenn kein Textinhalt vorhanden ist.
        """
        for block in getattr(message, "content", None) or []:
            text = getattr(block, "text", None)
            if isinstance(text, str) and text.strip():
                return text

        raise ProviderMalformedResponseError(
            "Claude-Antwort enthält keinen Textinhalt",
            raw_response=str(getattr(message, "content", "")),
        )

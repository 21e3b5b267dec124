"""Completion-Backend für die Gemini generateContent REST API.

Spricht den Endpoint direkt über httpx an (kein SDK).  Der
httpx-Client wird vom Aufrufer verwaltet und geteilt.
"""

from typing import Any

import httpx

from app.logging_config import get_logger
from app.provider.exceptions import (
    HttpStatusError,
    NetworkFailureError,
    ProviderMalformedResponseError,
    ProviderNotConfiguredError,
)
from app.provider.media import MediaPayload

logger = get_logger("provider")

DEFAULT_MODEL = "gemini-1.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1"

GENERATION_CONFIG: dict[str, Any] = {
    "temperature": 0.4,
    "topK": 32,
    "topP": 1,
}


class GeminiBackend:
    """Gemini-Backend (Text und Vision über denselben Endpoint)."""

    name = "gemini"

    def __init__(
        self,
        api_key: str | None,
        http: httpx.AsyncClient,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        max_tokens: int | None = None,
    ) -> None:
        if not api_key:
            raise ProviderNotConfiguredError("GEMINI_API_KEY ist nicht konfiguriert.")
        self._api_key = api_key
        self._http = http
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._max_tokens = max_tokens

        logger.info("GeminiBackend initialisiert: model=%s", model)

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/models/{self._model}:generateContent"

    def build_payload(self, prompt: str, media: MediaPayload | None) -> dict[str, Any]:
        """Baut den generateContent-Request-Body."""
        parts: list[dict[str, Any]] = [{"text": prompt}]
        if media is not None:
            parts.append(
                {
                    "inline_data": {
                        "mime_type": media.mime_type,
                        "data": media.data_base64,
                    }
                }
            )
        generation_config = dict(GENERATION_CONFIG)
        if self._max_tokens:
            generation_config["maxOutputTokens"] = self._max_tokens
        return {
            "contents": [{"parts": parts}],
            "generationConfig": generation_config,
        }

    async def complete(self, prompt: str, media: MediaPayload | None = None) -> str:
        """Ruft generateContent auf und gibt den ersten Text-Part zurück.

        Raises:
            NetworkFailureError: Verbindung fehlgeschlagen.
            HttpStatusError: Nicht-2xx-Antwort.
            ProviderMalformedResponseError: Kein JSON oder kein Text-Part.
        """
        logger.debug(
            "Gemini-Aufruf: model=%s, prompt=%d Zeichen, media=%s",
            self._model,
            len(prompt),
            media.mime_type if media else None,
        )
        try:
            response = await self._http.post(
                self.endpoint,
                params={"key": self._api_key},
                json=self.build_payload(prompt, media),
            )
        except httpx.RequestError as exc:
            raise NetworkFailureError(
                f"Verbindung zur Gemini API fehlgeschlagen: {exc}"
            ) from exc

        if not response.is_success:
            logger.warning(
                "Gemini API Fehler: HTTP %d – %s",
                response.status_code,
                response.text[:200],
            )
            raise HttpStatusError(
                f"Gemini API Fehler (HTTP {response.status_code})",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderMalformedResponseError(
                f"Gemini-Antwort ist kein JSON: {exc}",
                raw_response=response.text[:500],
            ) from exc

        return self._extract_text(data)

    @staticmethod
    def _extract_text(data: Any) -> str:
        """Liest candidates[0].content.parts[0].text.

        Raises:
            ProviderMalformedResponseError: Wenn der Pfad fehlt oder leer ist.
        """
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ProviderMalformedResponseError(
                "Unerwartetes Antwortformat der Gemini API",
                raw_response=str(data)[:500],
            ) from exc

        if not isinstance(text, str) or not text.strip():
            raise ProviderMalformedResponseError(
                "Gemini-Antwort enthält keinen Textinhalt",
                raw_response=str(data)[:500],
            )
        return text

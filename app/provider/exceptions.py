"""Fehlerklassen des Provider-Adapters.

Jeder Fehler, der den Adapter verlässt, ist klassifiziert.  Rohe
httpx- oder anthropic-Exceptions werden immer in eine dieser
Klassen übersetzt.

Hierarchie:
    ProviderError (Basis, trägt ErrorKind)
    ├── NetworkFailureError              – Verbindung fehlgeschlagen, Timeout
    ├── HttpStatusError                  – Nicht-2xx-Antwort (Status im Attribut)
    ├── MalformedMediaError              – Ungültiges Base64, Data-URL oder Content-Type
    ├── ProviderMalformedResponseError   – Leere oder unerwartete Completion
    └── ProviderNotConfiguredError       – Kein API-Key / ungültige Konfiguration
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Fehlerart – wird von der Pipeline geloggt und nie an den Aufrufer gereicht."""
    NETWORK_FAILURE = "network_failure"
    HTTP_ERROR = "http_error"
    MALFORMED_MEDIA = "malformed_media"
    PROVIDER_MALFORMED_RESPONSE = "provider_malformed_response"
    PROVIDER_NOT_CONFIGURED = "provider_not_configured"


class ProviderError(Exception):
    """Basisklasse für alle Provider-Fehler."""

    kind: ErrorKind = ErrorKind.NETWORK_FAILURE

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class NetworkFailureError(ProviderError):
    """Netzwerkfehler: Ziel nicht erreichbar oder Timeout im Transport."""
    kind = ErrorKind.NETWORK_FAILURE


class HttpStatusError(ProviderError):
    """Die Gegenseite hat mit einem Nicht-2xx-Status geantwortet."""
    kind = ErrorKind.HTTP_ERROR

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message, status_code=status_code)


class MalformedMediaError(ProviderError):
    """Mediendaten konnten nicht in einen Inline-Payload übersetzt werden."""
    kind = ErrorKind.MALFORMED_MEDIA


class ProviderMalformedResponseError(ProviderError):
    """Completion enthält keinen verwertbaren Text."""
    kind = ErrorKind.PROVIDER_MALFORMED_RESPONSE

    def __init__(self, message: str, raw_response: str = "") -> None:
        super().__init__(message)
        self.raw_response = raw_response


class ProviderNotConfiguredError(ProviderError):
    """Fehlender oder ungültiger API-Key."""
    kind = ErrorKind.PROVIDER_NOT_CONFIGURED

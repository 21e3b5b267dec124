"""Aufbereitung von Bildinhalten für den Inline-Versand.

Ein Bild kann auf drei Arten ankommen:
- HTTP(S)-URL  → Bytes laden und Base64-kodieren
- Data-URL     → MIME-Typ und Base64-Payload abtrennen
- sonst        → kein Media-Payload, der Rohtext wird als Beschreibung gesendet

Videos und Texte werden nie als Binärdaten verschickt.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

import httpx

from app.classifier.models import ContentType
from app.logging_config import get_logger, preview
from app.provider.exceptions import (
    HttpStatusError,
    MalformedMediaError,
    NetworkFailureError,
)

logger = get_logger("provider")

# MIME-Typ wenn der Server keinen (brauchbaren) Content-Type liefert
DEFAULT_IMAGE_MIME = "image/jpeg"

# data:<mime>[;param=value]*;base64,<payload>
DATA_URL_PATTERN = re.compile(
    r"^data:(?P<mime>[^;,]*)(?P<params>(?:;[^;,]*)*),(?P<payload>.*)$",
    re.DOTALL,
)


@dataclass(frozen=True)
class MediaPayload:
    """Inline-Binärdaten für den Completion-Aufruf."""

    mime_type: str
    data_base64: str

    @property
    def raw_bytes(self) -> bytes:
        return base64.b64decode(self.data_base64)


def is_http_url(content: str) -> bool:
    """True für http:// und https:// URLs."""
    return content.lower().startswith(("http://", "https://"))


def is_data_url(content: str) -> bool:
    return content.lower().startswith("data:")


def parse_data_url(content: str) -> MediaPayload:
    """Zerlegt eine Base64-Data-URL in MIME-Typ und Payload.

    Raises:
        MalformedMediaError: Kein Bild-MIME-Typ, kein Base64-Marker,
            leerer oder ungültiger Payload.
    """
    match = DATA_URL_PATTERN.match(content.strip())
    if match is None:
        raise MalformedMediaError("Data-URL ohne Komma-Trenner")

    mime_type = match.group("mime").strip().lower()
    params = [p.strip().lower() for p in match.group("params").split(";") if p.strip()]
    payload = match.group("payload").strip()

    if not mime_type.startswith("image/"):
        raise MalformedMediaError(
            f"Data-URL hat keinen Bild-MIME-Typ: '{mime_type or '(leer)'}'"
        )
    if "base64" not in params:
        raise MalformedMediaError("Data-URL ist nicht Base64-kodiert")
    if not payload:
        raise MalformedMediaError("Data-URL enthält keinen Payload")

    try:
        base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedMediaError(f"Ungültiges Base64 in Data-URL: {exc}") from exc

    return MediaPayload(mime_type=mime_type, data_base64=payload)


async def fetch_image(url: str, http: httpx.AsyncClient) -> MediaPayload:
    """Lädt ein Bild per GET und kodiert es als Base64.

    Genau ein Versuch – kein Retry.

    Raises:
        NetworkFailureError: Verbindungsfehler oder Transport-Timeout.
        HttpStatusError: Nicht-2xx-Antwort.
        MalformedMediaError: Leerer Body.
    """
    logger.debug("Bild laden: %s", preview(url))
    try:
        response = await http.get(url, follow_redirects=True)
    except httpx.RequestError as exc:
        raise NetworkFailureError(f"Bild-Download fehlgeschlagen: {exc}") from exc

    if not response.is_success:
        raise HttpStatusError(
            f"Bild-Download fehlgeschlagen (HTTP {response.status_code})",
            status_code=response.status_code,
        )

    body = response.content
    if not body:
        raise MalformedMediaError("Bild-Download lieferte keinen Inhalt")

    header = response.headers.get("content-type", "")
    mime_type = header.split(";")[0].strip().lower()
    if not mime_type.startswith("image/"):
        mime_type = DEFAULT_IMAGE_MIME

    logger.debug("Bild geladen: %d bytes, mime=%s", len(body), mime_type)
    return MediaPayload(
        mime_type=mime_type,
        data_base64=base64.standard_b64encode(body).decode("ascii"),
    )


async def resolve_media(
    content: str,
    content_type: ContentType,
    http: httpx.AsyncClient,
) -> MediaPayload | None:
    """Ermittelt den Inline-Payload für einen Inhalt.

    Gibt None zurück, wenn kein Binärinhalt gesendet wird (Text, Video,
    oder Bild ohne URL/Data-URL).  Letzteres ist ein definierter
    Degradationspfad, kein Fehler.
    """
    if content_type != ContentType.IMAGE:
        return None

    if is_http_url(content):
        return await fetch_image(content.strip(), http)
    if is_data_url(content):
        return parse_data_url(content)

    logger.info("Kein gültiges Bildformat erkannt – sende Inhalt als Textbeschreibung")
    return None

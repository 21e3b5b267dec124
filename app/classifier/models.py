"""Pydantic-Modelle für Eingabe und Ergebnis der Inhaltsprüfung.

Die JSON-Darstellung verwendet camelCase (contentType, rawResponse,
detailedAnalysis), weil das Dashboard diese Feldnamen erwartet.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Präfix von raw_response bei synthetischen Verdicts
FALLBACK_MARKER = "Fallback analysis:"


class ContentType(str, Enum):
    """Art des eingereichten Inhalts."""
    IMAGE = "image"
    VIDEO = "video"
    TEXT = "text"

    @classmethod
    def coerce(cls, value: "ContentType | str | None") -> "ContentType":
        """Unbekannte Werte werden wie Text behandelt."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.TEXT


class ContentSubmission(BaseModel):
    """Ein Prüfauftrag: Rohtext, Bild-URL/Data-URL oder Video-Referenz."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content: str = Field(..., min_length=1)
    content_type: ContentType = Field(default=ContentType.TEXT)

    @field_validator("content_type", mode="before")
    @classmethod
    def coerce_content_type(cls, v: object) -> ContentType:
        """Unbekannte oder fehlende Typen werden als Text geprüft."""
        return ContentType.coerce(v)  # type: ignore[arg-type]


class ClassificationVerdict(BaseModel):
    """Strukturiertes, unveränderliches Prüfergebnis.

    raw_response enthält die unverarbeitete Provider-Antwort oder,
    bei synthetischen Verdicts, einen Text mit FALLBACK_MARKER.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    safe: bool
    reason: str
    category: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    raw_response: Optional[str] = None
    detailed_analysis: str = ""

    @property
    def is_fallback(self) -> bool:
        """True wenn das Verdict ohne Provider synthetisiert wurde."""
        return bool(self.raw_response) and self.raw_response.startswith(FALLBACK_MARKER)

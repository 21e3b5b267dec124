"""Deterministischer Fallback ohne Netzwerkzugriff.

Wird verwendet, wenn kein Provider konfiguriert ist, der Provider nicht
erreichbar ist oder seine Antwort nicht auswertbar ist.  Gleicher Inhalt
ergibt in jedem Prozess dasselbe Verdict – Python's hash() ist pro
Prozess randomisiert und wird deshalb nicht verwendet.
"""

from __future__ import annotations

from app.classifier.models import FALLBACK_MARKER, ClassificationVerdict, ContentType
from app.classifier.rules import (
    DEFAULT_FALLBACK_RULES,
    SAFE_CATEGORY,
    SAFE_REASON,
    FallbackRules,
)

INT32_MASK = 0xFFFFFFFF
INT32_SIGN = 0x80000000


def _first_code_unit(char: str) -> int:
    """Erste UTF-16-Codeeinheit eines Zeichens (bei Astral-Zeichen der High Surrogate)."""
    code_point = ord(char)
    if code_point > 0xFFFF:
        return 0xD800 + ((code_point - 0x10000) >> 10)
    return code_point


def content_hash(content: str) -> int:
    """32-Bit-Rolling-Hash über die Zeichen des Inhalts.

    h = (h << 5) - h + code, nach jedem Schritt auf int32 gekürzt.
    code ist pro Codepoint die erste UTF-16-Codeeinheit, ein Emoji
    trägt also nur seinen High Surrogate bei.
    """
    value = 0
    for char in content:
        value = ((value << 5) - value + _first_code_unit(char)) & INT32_MASK
    if value & INT32_SIGN:
        value -= 1 << 32
    return value


SAFE_ANALYSIS = (
    "**Overall Assessment**: The content appears to be safe and does not violate any content policies.\n\n"
    "**Specific Issues**: No issues were identified in this content.\n\n"
    "**Reasoning**: After reviewing the {content_type}, I found no elements that would violate platform "
    "policies. The content is appropriate for general audiences.\n\n"
    "**Recommendations**: This content can be safely published without any modifications."
)

# Inhaltstyp → (reason, category, detailed_analysis)
UNSAFE_TEMPLATES: dict[ContentType, tuple[str, str, str]] = {
    ContentType.IMAGE: (
        "Image may contain inappropriate visual elements",
        "visual_policy_violation",
        "**Overall Assessment**: This image appears to contain content that may violate platform policies.\n\n"
        "**Specific Issues**: Potentially inappropriate visual elements that may not be suitable for all "
        "audiences.\n\n"
        "**Reasoning**: The visual content contains elements that could be interpreted as violating community "
        "standards, specifically related to inappropriate imagery.\n\n"
        "**Recommendations**: Review the image manually before publication or consider using a different image.",
    ),
    ContentType.VIDEO: (
        "Video may contain concerning scenes or content",
        "video_policy_violation",
        "**Overall Assessment**: This video may contain content that violates platform policies.\n\n"
        "**Specific Issues**: Potentially concerning scenes or sequences that may not be appropriate for "
        "general viewing.\n\n"
        "**Reasoning**: Certain segments of this video contain elements that could be interpreted as violating "
        "community guidelines.\n\n"
        "**Recommendations**: Review the video manually, particularly at key segments, or consider editing "
        "before publication.",
    ),
    ContentType.TEXT: (
        "Text may contain potentially harmful language",
        "text_policy_violation",
        "**Overall Assessment**: This text contains potentially harmful language that may violate platform "
        "policies.\n\n"
        "**Specific Issues**: Language that could be interpreted as inappropriate or harmful to certain "
        "audiences.\n\n"
        "**Reasoning**: The text includes phrases or terms that could violate community guidelines around "
        "respectful communication.\n\n"
        "**Recommendations**: Consider revising the language used in this content before publication.",
    ),
}


def fallback_marker_text(reason: str) -> str:
    return (
        f"{FALLBACK_MARKER} {reason}. This is a fallback response "
        "as the AI service is currently unavailable."
    )


def synthesize_verdict(
    content: str,
    content_type: ContentType | str,
    rules: FallbackRules = DEFAULT_FALLBACK_RULES,
) -> ClassificationVerdict:
    """Erzeugt ein vollständiges Verdict allein aus dem Inhalt."""
    content_type = ContentType.coerce(content_type)
    magnitude = abs(content_hash(content))
    safe = magnitude % rules.modulus != rules.unsafe_remainder

    if safe:
        reason = SAFE_REASON
        category = SAFE_CATEGORY
        confidence = rules.safe_confidence_base + (magnitude % rules.safe_confidence_spread) / 100
        detailed_analysis = SAFE_ANALYSIS.format(content_type=content_type.value)
    else:
        reason, category, detailed_analysis = UNSAFE_TEMPLATES[content_type]
        confidence = rules.unsafe_confidence_base + (magnitude % rules.unsafe_confidence_spread) / 100

    return ClassificationVerdict(
        safe=safe,
        reason=reason,
        category=category,
        confidence=round(confidence, 2),
        raw_response=fallback_marker_text(reason),
        detailed_analysis=detailed_analysis,
    )

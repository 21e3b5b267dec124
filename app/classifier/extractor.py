"""Verdict-Extraktion aus der unstrukturierten Provider-Antwort.

Die Antwort ist natürliche Sprache (gelegentlich mit Markdown oder
eingebettetem JSON).  Alle Felder werden über Schlüsselwörter und
reguläre Ausdrücke gewonnen:

- safe:       keines der UNSAFE_MARKERS im Text
- reason:     "because …" → "issue(s) …" → Standardtext
- category:   erste passende Schlüsselwortgruppe, Präfix = Inhaltstyp
- confidence: Basiswert ± Sicherheitsvokabular, danach Clamp
- detailed_analysis: die vier Abschnitte des Prompts, sonst bereinigter Rohtext

Die Heuristik ist bewusst 1:1 aus dem Bestandsverhalten übernommen,
siehe app.classifier.rules.
"""

from __future__ import annotations

import re

from app.classifier.models import ClassificationVerdict, ContentType
from app.classifier.prompts import SECTION_TITLES
from app.classifier.rules import (
    DEFAULT_EXTRACTION_RULES,
    DEFAULT_UNSAFE_REASON,
    SAFE_CATEGORY,
    SAFE_REASON,
    ExtractionRules,
)
from app.logging_config import get_logger
from app.provider.exceptions import ProviderMalformedResponseError

logger = get_logger("pipeline")

REASON_BECAUSE = re.compile(r"because (.+?)[.!?]", re.IGNORECASE)
REASON_ISSUES = re.compile(r"issues?:?\s+(.+?)[.!?]", re.IGNORECASE)

LEADING_ENUMERATION = re.compile(r"^\d+\.\s*", re.MULTILINE)
EXCESS_BLANK_LINES = re.compile(r"\n{3,}")
# Nummer des folgenden Abschnitts ("2. " oder "3) **") direkt vor dessen Überschrift
NEXT_HEADER_ENUMERATION = re.compile(r"(?:^|\s)\d+[.)][ \t*_#>]*$")


def _header_pattern(title: str) -> re.Pattern[str]:
    """Überschrift eines Abschnitts.

    Erkannt wird "Titel:" (auch **Titel**: oder 1. Titel:) an beliebiger
    Stelle, oder der Titel allein auf einer Zeile (## Titel, **Titel**).
    """
    name = r"\s+".join(re.escape(word) for word in title.split())
    return re.compile(
        rf"(?:\b{name}\b[*_]*[ \t]*:[*_]*"
        rf"|^[ \t>#*_]*(?:\d+[.)][ \t]*)?[*_]*{name}[*_ \t]*$)",
        re.IGNORECASE | re.MULTILINE,
    )


SECTION_PATTERNS: dict[str, re.Pattern[str]] = {
    title: _header_pattern(title) for title in SECTION_TITLES
}


# ---------------------------------------------------------------------------
# Einzelne Felder
# ---------------------------------------------------------------------------

def is_safe(raw_text: str, rules: ExtractionRules = DEFAULT_EXTRACTION_RULES) -> bool:
    lowered = raw_text.lower()
    return not any(marker in lowered for marker in rules.unsafe_markers)


def extract_reason(raw_text: str) -> str:
    """Begründung für ein unsicheres Verdict."""
    match = REASON_BECAUSE.search(raw_text) or REASON_ISSUES.search(raw_text)
    if match:
        reason = match.group(1).strip()
        if reason:
            return reason
    return DEFAULT_UNSAFE_REASON


def determine_category(
    raw_text: str,
    content_type: ContentType,
    safe: bool,
    rules: ExtractionRules = DEFAULT_EXTRACTION_RULES,
) -> str:
    if safe:
        return SAFE_CATEGORY

    lowered = raw_text.lower()
    for suffix, keywords in rules.category_keywords:
        if any(keyword in lowered for keyword in keywords):
            return f"{content_type.value}_{suffix}"
    return f"{content_type.value}_{rules.default_category_suffix}"


def calculate_confidence(
    raw_text: str,
    safe: bool,
    rules: ExtractionRules = DEFAULT_EXTRACTION_RULES,
) -> float:
    """Basiswert plus erste passende Anpassung, danach auf [min, max] begrenzt."""
    lowered = raw_text.lower()
    confidence = rules.base_confidence_safe if safe else rules.base_confidence_unsafe

    for phrases, adjustment in rules.certainty_adjustments:
        if any(phrase in lowered for phrase in phrases):
            confidence += adjustment
            break

    confidence = max(rules.min_confidence, min(rules.max_confidence, confidence))
    return round(confidence, 2)


# ---------------------------------------------------------------------------
# Detailanalyse
# ---------------------------------------------------------------------------

def _clean_section_body(body: str, followed_by_header: bool) -> str:
    """Entfernt Markdown-Reste und die Nummer des folgenden Abschnitts.

    Die Nummer wird nur entfernt, wenn eine weitere Überschrift folgt und
    zwischen Nummer und Überschrift kein Zeilenumbruch liegt.  Ein
    Abschnitt, der auf "Release 2." endet, bleibt unverändert.
    """
    if followed_by_header:
        body = NEXT_HEADER_ENUMERATION.sub("", body)
    body = body.strip().lstrip("*_:").strip()
    return body.rstrip(" \t\r\n*_#>")


def clean_narrative(raw_text: str) -> str:
    """Rohtext ohne Aufzählungsnummern und überzählige Leerzeilen."""
    text = LEADING_ENUMERATION.sub("", raw_text)
    text = EXCESS_BLANK_LINES.sub("\n\n", text)
    return text.strip()


def extract_detailed_analysis(raw_text: str) -> str:
    """Ordnet die Antwort den vier Abschnitten zu.

    Ein Abschnitt reicht bis zur nächsten Überschrift eines anderen
    Abschnitts oder bis zum Textende.  Fehlt ein Abschnitt, steht dort
    "No … provided.".  Wird keine einzige Überschrift gefunden, kommt
    der bereinigte Rohtext zurück.
    """
    headers: dict[str, re.Match[str]] = {}
    for title, pattern in SECTION_PATTERNS.items():
        match = pattern.search(raw_text)
        if match:
            headers[title] = match

    if not headers:
        return clean_narrative(raw_text)

    all_starts: list[tuple[int, str]] = sorted(
        (m.start(), title)
        for title, pattern in SECTION_PATTERNS.items()
        for m in pattern.finditer(raw_text)
    )

    rendered: list[str] = []
    for title in SECTION_TITLES:
        match = headers.get(title)
        body = ""
        if match is not None:
            end = next(
                (
                    start for start, other in all_starts
                    if other != title and start >= match.end()
                ),
                len(raw_text),
            )
            body = _clean_section_body(raw_text[match.end():end], end < len(raw_text))
        if not body:
            body = f"No {title.lower()} provided."
        rendered.append(f"**{title}**: {body}")

    return "\n\n".join(rendered)


# ---------------------------------------------------------------------------
# Gesamtes Verdict
# ---------------------------------------------------------------------------

def extract_verdict(
    raw_text: str | None,
    content_type: ContentType | str,
    rules: ExtractionRules = DEFAULT_EXTRACTION_RULES,
) -> ClassificationVerdict:
    """Baut ein ClassificationVerdict aus der rohen Provider-Antwort.

    Raises:
        ProviderMalformedResponseError: Wenn die Antwort keinen Text enthält.
            Der Extraktor synthetisiert in diesem Fall nichts – das ist
            Aufgabe des Fallbacks.
    """
    if not isinstance(raw_text, str) or not raw_text.strip():
        raise ProviderMalformedResponseError(
            "Provider-Antwort enthält keinen auswertbaren Text",
            raw_response=repr(raw_text),
        )

    content_type = ContentType.coerce(content_type)
    safe = is_safe(raw_text, rules)

    verdict = ClassificationVerdict(
        safe=safe,
        reason=SAFE_REASON if safe else extract_reason(raw_text),
        category=determine_category(raw_text, content_type, safe, rules),
        confidence=calculate_confidence(raw_text, safe, rules),
        raw_response=raw_text,
        detailed_analysis=extract_detailed_analysis(raw_text),
    )

    logger.debug(
        "Verdict extrahiert: safe=%s, category=%s, confidence=%.2f",
        verdict.safe,
        verdict.category,
        verdict.confidence,
    )
    return verdict

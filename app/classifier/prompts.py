"""Prüf-Prompt für die Completion-Fähigkeit.

Der Prompt fordert vier nummerierte Abschnitte an, deren Überschriften
der Extraktor später wiederfindet.  Die Abschnittsnamen sind deshalb
hier und im Extraktor dieselben Konstanten.
"""

from __future__ import annotations

from app.classifier.models import ContentType

# Reihenfolge ist verbindlich – Extraktor und Fallback rendern in dieser Folge
SECTION_TITLES: tuple[str, ...] = (
    "Overall Assessment",
    "Specific Issues",
    "Reasoning",
    "Recommendations",
)

POLICY_TAXONOMY: tuple[str, ...] = (
    "violent or graphic imagery",
    "hateful or threatening language",
    "sexual or adult content",
    "any other general policy violation",
)

PROMPT_HEADER = (
    "Analyze this content for potential policy violations or inappropriate "
    "material and provide a detailed analysis with the following structure: \n\n"
)

SECTION_INSTRUCTIONS: dict[str, str] = {
    "Overall Assessment": "Is this content safe or potentially violating policies?",
    "Specific Issues": "List any specific issues found or confirm no issues were identified.",
    "Reasoning": "Explain your reasoning in detail, including context and nuance.",
    "Recommendations": "Provide specific recommendations for this content.",
}

CONTENT_TYPE_CLAUSES: dict[ContentType, str] = {
    ContentType.IMAGE: "This is an image. Focus on visual elements that might be concerning.",
    ContentType.VIDEO: "This is a video. Consider potential inappropriate scenes or content.",
    ContentType.TEXT: "This is text. Look for harmful language, threats, or inappropriate content.",
}


def build_classification_prompt(content_type: ContentType | str) -> str:
    """Baut die Prüfanweisung für einen Inhaltstyp.

    Reine Funktion ohne Seiteneffekte; unbekannte Typen erhalten die
    Text-Klausel.
    """
    content_type = ContentType.coerce(content_type)

    lines = [
        f"{number}. {title}: {SECTION_INSTRUCTIONS[title]}"
        for number, title in enumerate(SECTION_TITLES, start=1)
    ]
    taxonomy = "; ".join(POLICY_TAXONOMY)

    return (
        PROMPT_HEADER
        + "\n".join(lines)
        + "\n\n"
        + f"Judge compliance against these policy categories: {taxonomy}. "
        + "State clearly whether the content complies with the policies.\n\n"
        + CONTENT_TYPE_CLAUSES[content_type]
    )


def attach_content(prompt: str, content: str, content_type: ContentType | str) -> str:
    """Hängt den Inhalt als Text an, wenn keine Binärdaten mitgesendet werden.

    Bilder ohne ladbare Quelle werden als Beschreibung gekennzeichnet.
    """
    if ContentType.coerce(content_type) == ContentType.IMAGE:
        return f"{prompt} Content description: {content}"
    return f"{prompt} Content: {content}"

"""Heuristik-Konstanten für Extraktion und Fallback.

Die Schlüsselwortlisten und Schwellwerte sind nicht aus einer
dokumentierten Policy abgeleitet, sondern aus dem Bestandsverhalten
übernommen.  Sie sind als Konstanten gebündelt, damit sie pro
Pipeline ersetzt werden können, ohne den Algorithmus anzufassen.

Bekannte Schwäche: reines Substring-Matching.  Ein harmloser Text über
"wie man Gewalt vermeidet" mit dem Wort "inappropriate" wird als
unsicher markiert.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Sicherheitsentscheidung
# ---------------------------------------------------------------------------

UNSAFE_MARKERS: tuple[str, ...] = ("unsafe", "violate", "inappropriate")

SAFE_REASON = "Content appears to be safe"
DEFAULT_UNSAFE_REASON = "Potential policy violation detected"

# ---------------------------------------------------------------------------
# Kategorien (Reihenfolge = Priorität)
# ---------------------------------------------------------------------------

SAFE_CATEGORY = "safe"

CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("policy_violation", ("violence", "graphic", "harmful")),
    ("adult_content", ("sexual", "explicit", "adult")),
    ("hate_speech", ("hate", "discriminat", "offensive")),
)
DEFAULT_CATEGORY_SUFFIX = "policy_violation"

# ---------------------------------------------------------------------------
# Confidence
# ---------------------------------------------------------------------------

BASE_CONFIDENCE_SAFE = 0.80
BASE_CONFIDENCE_UNSAFE = 0.75

# Erste passende Gruppe gewinnt
CERTAINTY_ADJUSTMENTS: tuple[tuple[tuple[str, ...], float], ...] = (
    (("definitely", "certainly", "clearly"), +0.15),
    (("likely", "probably"), +0.05),
    (("possibly", "might", "could be"), -0.10),
    (("uncertain", "unclear"), -0.20),
)

MIN_CONFIDENCE = 0.50
MAX_CONFIDENCE = 0.99

# ---------------------------------------------------------------------------
# Fallback
# ---------------------------------------------------------------------------

# hash % FALLBACK_MODULUS == FALLBACK_UNSAFE_REMAINDER → unsicher (≈ 1 von 5)
FALLBACK_MODULUS = 5
FALLBACK_UNSAFE_REMAINDER = 0

FALLBACK_SAFE_CONFIDENCE_BASE = 0.85
FALLBACK_SAFE_CONFIDENCE_SPREAD = 15     # → 0.85 … 0.99
FALLBACK_UNSAFE_CONFIDENCE_BASE = 0.65
FALLBACK_UNSAFE_CONFIDENCE_SPREAD = 20   # → 0.65 … 0.84


@dataclass(frozen=True)
class ExtractionRules:
    """Parameter des Verdict-Extraktors."""

    unsafe_markers: tuple[str, ...] = UNSAFE_MARKERS
    category_keywords: tuple[tuple[str, tuple[str, ...]], ...] = CATEGORY_KEYWORDS
    default_category_suffix: str = DEFAULT_CATEGORY_SUFFIX
    base_confidence_safe: float = BASE_CONFIDENCE_SAFE
    base_confidence_unsafe: float = BASE_CONFIDENCE_UNSAFE
    certainty_adjustments: tuple[tuple[tuple[str, ...], float], ...] = CERTAINTY_ADJUSTMENTS
    min_confidence: float = MIN_CONFIDENCE
    max_confidence: float = MAX_CONFIDENCE


@dataclass(frozen=True)
class FallbackRules:
    """Parameter des Fallback-Synthesizers."""

    modulus: int = FALLBACK_MODULUS
    unsafe_remainder: int = FALLBACK_UNSAFE_REMAINDER
    safe_confidence_base: float = FALLBACK_SAFE_CONFIDENCE_BASE
    safe_confidence_spread: int = FALLBACK_SAFE_CONFIDENCE_SPREAD
    unsafe_confidence_base: float = FALLBACK_UNSAFE_CONFIDENCE_BASE
    unsafe_confidence_spread: int = FALLBACK_UNSAFE_CONFIDENCE_SPREAD


@dataclass(frozen=True)
class PipelineRules:
    """Beide Regelsätze zusammen, wie sie die Pipeline verwendet."""

    extraction: ExtractionRules = field(default_factory=ExtractionRules)
    fallback: FallbackRules = field(default_factory=FallbackRules)


DEFAULT_EXTRACTION_RULES = ExtractionRules()
DEFAULT_FALLBACK_RULES = FallbackRules()

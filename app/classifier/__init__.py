"""Classifier Core – Kernlogik der Inhaltsprüfung.

Öffentliche API:
- ClassificationPipeline: Orchestrierung des gesamten Ablaufs
- ClassificationVerdict / ContentSubmission / ContentType: Datenmodell
- build_classification_prompt: Prüf-Prompt
- extract_verdict: Provider-Antwort → Verdict
- synthesize_verdict: deterministischer Fallback
"""

from app.classifier.models import (
    FALLBACK_MARKER,
    ClassificationVerdict,
    ContentSubmission,
    ContentType,
)
from app.classifier.prompts import (
    SECTION_TITLES,
    attach_content,
    build_classification_prompt,
)
from app.classifier.rules import ExtractionRules, FallbackRules, PipelineRules
from app.classifier.extractor import extract_verdict
from app.classifier.fallback import content_hash, synthesize_verdict
from app.classifier.pipeline import ClassificationPipeline

__all__ = [
    # Pipeline
    "ClassificationPipeline",
    # Modelle
    "ClassificationVerdict",
    "ContentSubmission",
    "ContentType",
    "FALLBACK_MARKER",
    # Prompt
    "SECTION_TITLES",
    "attach_content",
    "build_classification_prompt",
    # Extraktion + Fallback
    "extract_verdict",
    "content_hash",
    "synthesize_verdict",
    # Regeln
    "ExtractionRules",
    "FallbackRules",
    "PipelineRules",
]

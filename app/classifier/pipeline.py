"""Prüf-Pipeline: Orchestrierung des gesamten Ablaufs.

Ablauf pro Einreichung:

 1. Provider nicht konfiguriert → direkt Fallback (kein Netzwerkaufruf)
 2. Prüf-Prompt für den Inhaltstyp bauen
 3. Prompt + Inhalt über den Provider-Adapter senden
 4. Antwort in ein Verdict übersetzen (Extraktor)
 5. Jeder Fehler in 3–4 → Fallback-Verdict

Die Pipeline ist zustandslos und wirft nie – der Aufrufer erhält in
jedem Fall genau ein ClassificationVerdict.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from app.classifier.extractor import extract_verdict
from app.classifier.fallback import synthesize_verdict
from app.classifier.models import ClassificationVerdict, ContentType
from app.classifier.prompts import build_classification_prompt
from app.classifier.rules import PipelineRules
from app.logging_config import get_logger, preview
from app.provider.exceptions import ProviderError

if TYPE_CHECKING:
    from app.provider.adapter import ProviderAdapter

logger = get_logger("pipeline")


class ClassificationPipeline:
    """Orchestriert Prompt, Provider-Aufruf, Extraktion und Fallback.

    Verwendet Dependency Injection: Der Adapter wird von außen übergeben.
    adapter=None bedeutet "Completion-Fähigkeit nicht verfügbar".

    Verwendung:
        pipeline = ClassificationPipeline(adapter)
        verdict = await pipeline.classify(content, "image")
    """

    def __init__(
        self,
        adapter: ProviderAdapter | None,
        rules: PipelineRules | None = None,
    ) -> None:
        self._adapter = adapter
        self._rules = rules or PipelineRules()

    @property
    def is_provider_configured(self) -> bool:
        return self._adapter is not None

    async def classify(
        self,
        content: str,
        content_type: ContentType | str,
    ) -> ClassificationVerdict:
        """Prüft einen Inhalt und liefert immer ein Verdict.

        Args:
            content: Rohtext, Bild-URL, Data-URL oder Video-Referenz.
            content_type: image, video oder text (Unbekanntes → text).

        Returns:
            Verdict vom Provider oder synthetisches Fallback-Verdict.
        """
        start_time = time.monotonic()
        content_type = ContentType.coerce(content_type)

        logger.info(
            "Prüfung Start: type=%s, length=%d, preview='%s'",
            content_type.value, len(content), preview(content),
        )

        if self._adapter is None:
            logger.info("Kein Provider konfiguriert – verwende Fallback")
            return self._fallback(content, content_type, start_time, reason="provider_not_configured")

        try:
            prompt = build_classification_prompt(content_type)
            raw_text = await self._adapter.request_completion(prompt, content, content_type)
            verdict = extract_verdict(raw_text, content_type, self._rules.extraction)

        except ProviderError as exc:
            logger.warning(
                "Provider-Fehler (backend=%s, %s%s): %s – verwende Fallback",
                self._adapter.backend_name,
                exc.kind.value,
                f", HTTP {exc.status_code}" if exc.status_code else "",
                exc,
            )
            return self._fallback(content, content_type, start_time, reason=exc.kind.value)

        except Exception as exc:
            logger.exception("Unerwarteter Fehler bei der Prüfung: %s", exc)
            return self._fallback(content, content_type, start_time, reason=type(exc).__name__)

        logger.info(
            "Prüfung abgeschlossen: backend=%s, safe=%s, category=%s, confidence=%.2f, %.2fs",
            self._adapter.backend_name,
            verdict.safe,
            verdict.category,
            verdict.confidence,
            time.monotonic() - start_time,
        )
        return verdict

    def _fallback(
        self,
        content: str,
        content_type: ContentType,
        start_time: float,
        reason: str,
    ) -> ClassificationVerdict:
        verdict = synthesize_verdict(content, content_type, self._rules.fallback)
        logger.info(
            "Fallback-Verdict (%s): safe=%s, category=%s, confidence=%.2f, %.2fs",
            reason,
            verdict.safe,
            verdict.category,
            verdict.confidence,
            time.monotonic() - start_time,
        )
        return verdict

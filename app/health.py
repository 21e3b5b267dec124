"""Health-Check-Funktionen für Subsystem-Prüfungen.

Seiteneffekt-frei: Kein Netzwerkaufruf – ein fehlender Provider ist
kein Ausfall, sondern der Fallback-Modus.
"""

from __future__ import annotations

from typing import Any

from app.config import Settings


def check_provider_configured(settings: Settings) -> dict[str, Any]:
    """Prüft ob für den gewählten Provider ein API-Key konfiguriert ist.

    Validiert nur das Vorhandensein, nicht die Gültigkeit
    (das würde einen API-Call kosten).
    """
    provider = settings.completion_provider.value
    key = settings.provider_api_key
    if key:
        return {"status": "ok", "provider": provider, "key_prefix": key[:8] + "..."}
    return {"status": "not_configured", "provider": provider, "mode": "fallback"}


def overall_status(checks: dict[str, dict[str, Any]]) -> str:
    """healthy wenn alle Checks ok, sonst degraded (Service bleibt nutzbar)."""
    if all(check.get("status") == "ok" for check in checks.values()):
        return "healthy"
    return "degraded"

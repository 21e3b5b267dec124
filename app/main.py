"""Einstiegspunkt des Content-Safety-Classifiers.

Stellt die Pipeline als HTTP-Endpoint für das Dashboard bereit.

Lifecycle:
1. setup_logging()   – Logging aus den Settings
2. lifespan start    – httpx-Client, Backend, Adapter, Pipeline → app.state
3. ... Server läuft ...
4. lifespan ende     – Backend und httpx-Client schließen

Die Pipeline wird über app.state und eine Dependency an die Endpoints
gereicht, nicht über globale Modulvariablen.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator

import httpx
import uvicorn
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.classifier import ClassificationPipeline, ClassificationVerdict, ContentSubmission
from app.config import Settings, get_settings
from app.health import check_provider_configured, overall_status
from app.logging_config import get_logger, setup_logging
from app.provider import ProviderAdapter, create_backend

logger = get_logger("app")
api_logger = get_logger("api")

VERSION = "0.1.0"

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

def get_pipeline(request: Request) -> ClassificationPipeline:
    """Gibt die beim Start erzeugte Pipeline zurück."""
    return request.app.state.pipeline


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


# ---------------------------------------------------------------------------
# Fehlerantworten (Format wie vom Dashboard erwartet)
# ---------------------------------------------------------------------------

def _is_missing_content(exc: RequestValidationError) -> bool:
    for error in exc.errors():
        loc = error.get("loc", ())
        if loc and loc[-1] == "content" and error.get("type") in ("missing", "string_too_short"):
            return True
    return False


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Übersetzt Validierungsfehler in HTTP 400 mit safe=false."""
    if _is_missing_content(exc):
        api_logger.info("Anfrage ohne Inhalt abgelehnt")
        body: dict[str, Any] = {
            "error": "Content is required",
            "safe": False,
            "reason": "Missing content",
        }
    else:
        api_logger.info("Ungültiger Request-Body: %s", exc.errors()[:3])
        body = {
            "error": "Invalid request body",
            "details": str(exc.errors()[:3]),
            "safe": False,
            "reason": "Invalid request format",
        }
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)


# ---------------------------------------------------------------------------
# App-Factory
# ---------------------------------------------------------------------------

def create_app(settings: Settings | None = None) -> FastAPI:
    """Erzeugt die FastAPI-Anwendung.

    Args:
        settings: Optionaler Override (Tests); sonst get_settings().
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(settings.log_level.value, settings.log_dir)
        logger.info(
            "Content-Safety-Classifier startet (v%s, provider=%s)",
            VERSION, settings.completion_provider.value,
        )

        http = httpx.AsyncClient(timeout=httpx.Timeout(settings.http_timeout_seconds))
        backend = create_backend(settings, http)
        adapter = ProviderAdapter(backend, http) if backend is not None else None

        app.state.settings = settings
        app.state.http = http
        app.state.pipeline = ClassificationPipeline(adapter)
        try:
            yield
        finally:
            close = getattr(backend, "close", None)
            if close is not None:
                await close()
            await http.aclose()
            logger.info("Content-Safety-Classifier beendet")

    app = FastAPI(title="Content Safety Classifier", version=VERSION, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=CORS_ALLOW_HEADERS,
    )
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    @app.post("/analyze-content", response_model=ClassificationVerdict)
    async def analyze_content(
        submission: ContentSubmission,
        pipeline: ClassificationPipeline = Depends(get_pipeline),
    ) -> ClassificationVerdict:
        """Prüft einen Inhalt.  Antwortet immer mit einem Verdict (HTTP 200)."""
        api_logger.info(
            "Inhalt zur Prüfung erhalten: type=%s, length=%d",
            submission.content_type.value, len(submission.content),
        )
        return await pipeline.classify(submission.content, submission.content_type)

    @app.get("/health")
    async def health_check(
        request: Request,
        app_settings: Settings = Depends(get_app_settings),
    ) -> dict[str, Any]:
        """Health-Check für Docker und Monitoring.

        HTTP 200 solange der Service läuft – ohne Provider ist er
        'degraded' (Fallback-Modus), aber voll nutzbar.
        """
        provider = check_provider_configured(app_settings)
        if provider["status"] == "ok" and not request.app.state.pipeline.is_provider_configured:
            provider = {**provider, "status": "invalid", "mode": "fallback"}

        checks = {"provider": provider}
        return {
            "status": overall_status(checks),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": VERSION,
            "checks": checks,
        }

    return app


def run() -> None:
    """Startet den Server mit uvicorn (Console-Script)."""
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()

"""Konfigurationsmanagement mit Pydantic Settings.

Lädt Konfiguration aus Environment-Variablen und .env-Datei.
Alle Felder haben Defaults – ohne API-Key läuft der Service im
Fallback-Modus (deterministische Offline-Bewertung).
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderKind(str, Enum):
    """Verfügbare Completion-Backends."""
    CLAUDE = "claude"
    GEMINI = "gemini"


class LogLevel(str, Enum):
    """Erlaubte Log-Level."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class Settings(BaseSettings):
    """Zentrale Konfiguration des Content-Safety-Classifiers.

    Der einzige "Pflicht"-Wert ist der API-Key des gewählten Providers –
    fehlt er, wird nie ein Netzwerkaufruf versucht, sondern direkt
    der Fallback verwendet.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        # ENV-Variablen haben Vorrang vor .env-Datei
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    # --- Provider-Wahl ---
    completion_provider: ProviderKind = Field(
        default=ProviderKind.CLAUDE,
        description="Completion-Backend: claude oder gemini",
    )

    # --- Claude API ---
    anthropic_api_key: Optional[str] = Field(
        default=None,
        description="API-Key aus der Anthropic Console",
    )
    claude_model: str = Field(
        default="claude-sonnet-4-5-20250929",
        description="Modell für die Inhaltsprüfung",
    )

    # --- Gemini API ---
    gemini_api_key: Optional[str] = Field(
        default=None,
        description="API-Key für die Google Generative Language API",
    )
    gemini_model: str = Field(default="gemini-1.5-flash")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1",
        description="Basis-URL ohne Trailing-Slash",
    )

    max_tokens: int = Field(
        default=1024,
        ge=64,
        description="Maximale Output-Tokens pro Bewertung",
    )

    # --- HTTP-Transport (Timeout gehört dem Aufrufer, nicht der Pipeline) ---
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Timeout des gemeinsamen httpx-Clients",
    )

    # --- Server ---
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    # --- Logging ---
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Log-Level für die Anwendung",
    )
    log_dir: Optional[Path] = Field(
        default=None,
        description="Verzeichnis für rotierende Log-Dateien (None = nur stdout)",
    )

    @field_validator("gemini_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Trailing Slash entfernen, damit URL-Joins konsistent funktionieren."""
        return v.rstrip("/")

    @field_validator("anthropic_api_key", "gemini_api_key")
    @classmethod
    def blank_key_is_none(cls, v: Optional[str]) -> Optional[str]:
        """Leere Keys (z.B. `GEMINI_API_KEY=` in .env) gelten als nicht gesetzt."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def provider_api_key(self) -> Optional[str]:
        """API-Key des aktuell gewählten Providers."""
        if self.completion_provider == ProviderKind.GEMINI:
            return self.gemini_api_key
        return self.anthropic_api_key

    @property
    def is_provider_configured(self) -> bool:
        """True wenn für den gewählten Provider ein Key vorhanden ist."""
        return bool(self.provider_api_key)


# Singleton-Pattern: wird einmalig beim ersten Zugriff erstellt
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Gibt die Settings-Instanz zurück (Lazy Singleton)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Verwirft die gecachte Instanz (für Tests und Config-Reload)."""
    global _settings
    _settings = None

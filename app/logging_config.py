"""Logging-Konfiguration für den Content-Safety-Classifier.

Setzt strukturiertes Logging auf mit:
- Console-Handler (stdout) für `docker logs`
- RotatingFileHandler für persistente Logs (optional)
- Logger-Hierarchie: content_safety.{component}
  → app, api, pipeline, provider

Inhalte werden nie vollständig geloggt, nur Typ, Länge und kurze Vorschau.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path


# Basis-Logger-Name – alle Sublogger erben davon
ROOT_LOGGER_NAME = "content_safety"

# Verfügbare Komponenten-Logger
COMPONENTS = ("app", "api", "pipeline", "provider")

# Log-Format: Zeitstempel | Level | Komponente | Nachricht
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Rotation: 5 MB pro Datei, maximal 3 Dateien behalten
MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 3

# Länge der Inhaltsvorschau in Log-Zeilen
PREVIEW_CHARS = 50


def setup_logging(log_level: str = "INFO", log_dir: Path | None = None) -> None:
    """Konfiguriert das Logging-System.

    Args:
        log_level: Log-Level als String (DEBUG, INFO, WARNING, ERROR)
        log_dir: Verzeichnis für Log-Dateien. None = nur stdout.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)

    # Vorhandene Handler entfernen (bei erneutem Aufruf, z.B. in Tests)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_dir is not None:
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_dir / "content_safety.log",
                maxBytes=MAX_BYTES,
                backupCount=BACKUP_COUNT,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning("Log-Verzeichnis nicht beschreibbar: %s – nur stdout aktiv", e)

    # Externe Libraries leiser stellen
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)


def get_logger(component: str) -> logging.Logger:
    """Gibt einen Logger für die angegebene Komponente zurück.

    Args:
        component: Name der Komponente (app, api, pipeline, provider)

    Returns:
        Logger-Instanz mit Name 'content_safety.{component}'

    Raises:
        ValueError: Bei unbekannter Komponente, damit kein Logger
            außerhalb der festen Hierarchie entsteht.
    """
    if component not in COMPONENTS:
        raise ValueError(
            f"Unbekannte Log-Komponente '{component}', erlaubt: {', '.join(COMPONENTS)}"
        )
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{component}")


def preview(content: str, limit: int = PREVIEW_CHARS) -> str:
    """Kürzt Inhalte für Log-Ausgaben."""
    if len(content) <= limit:
        return content
    return content[:limit] + "..."

"""
Logging du client.

La bibliothèque se contente de loguer (principalement en DEBUG) ; seule
l'application hôte, ou le CLI, appelle `configure_logging`.

Deux contextes structurés peuvent accompagner un enregistrement :
  - `phase`   : étape du CLI (voir `log_phase`) ;
  - `request` : requête HTTP en cours, {"method", "path", "status"}
                (voir `log_request`).
"""

import json
import logging
import os
import sys
from typing import Any, Dict, Optional

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

_configured = False


def _request_context(record: logging.LogRecord) -> Optional[Dict[str, Any]]:
    return getattr(record, "request", None)


class PlainLogFormatter(logging.Formatter):
    """Format texte ; suffixe `(POST /api/v1/series -> 403)` si une requête est attachée."""

    def __init__(self) -> None:
        super().__init__(fmt=PLAIN_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        request = _request_context(record)
        if request:
            target = f"{request['method']} {request['path']}"
            if request.get("status") is not None:
                target += f" -> {request['status']}"
            line += f" ({target})"
        return line


class JsonLogFormatter(logging.Formatter):
    """Une ligne JSON par enregistrement, contexte phase/requête inclus."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "time": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        phase = getattr(record, "phase", None)
        if phase is not None:
            entry["phase"] = phase
        request = _request_context(record)
        if request:
            entry["request"] = {key: value for key, value in request.items() if value is not None}
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


_FORMATTERS = {
    "plain": PlainLogFormatter,
    "json": JsonLogFormatter,
}


def parse_level(name: str) -> int:
    """'debug' -> logging.DEBUG ; un niveau inconnu retombe sur INFO."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    level: str = "INFO",
    fmt: str = "plain",
    console_enabled: bool = True,
    file_path: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Installe les handlers sur le logger racine.

    Sans `force`, seul le premier appel a un effet. TELEMETRY_LOG_LEVEL et
    TELEMETRY_LOG_FORMAT priment sur les arguments. La console écrit sur
    stderr : stdout reste réservé aux payloads du mode dry-run.
    """
    global _configured

    if _configured and not force:
        return

    log_level = parse_level(os.getenv("TELEMETRY_LOG_LEVEL") or level)
    formatter_cls = _FORMATTERS.get(os.getenv("TELEMETRY_LOG_FORMAT") or fmt, PlainLogFormatter)

    handlers = []
    if console_enabled:
        handlers.append(logging.StreamHandler(stream=sys.stderr))
    if file_path:
        handlers.append(logging.FileHandler(file_path))

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter_cls())
        root.addHandler(handler)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_phase(logger: logging.Logger, phase: str, message: str) -> None:
    """Logue une étape du CLI (INFO) étiquetée `phase`."""
    logger.info(message, extra={"phase": phase})


def log_request(
    logger: logging.Logger,
    message: str,
    *args: Any,
    path: str,
    status: Optional[int] = None,
    method: str = "POST",
    level: int = logging.DEBUG,
) -> None:
    """Logue un événement de requête HTTP avec son contexte (méthode, chemin, statut)."""
    logger.log(
        level,
        message,
        *args,
        extra={"request": {"method": method, "path": path, "status": status}},
    )

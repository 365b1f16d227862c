from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

import jsonschema
import requests

from telemetry_client.core import serialization
from telemetry_client.core.logger import get_logger, log_request
from telemetry_client.models.events import Event
from telemetry_client.models.metrics import MetricSeries

logger = get_logger(__name__)

API_KEY_HEADER = "DD-API-KEY"
EVENTS_PATH = "/api/v1/events"
SERIES_PATH = "/api/v1/series"

# Forme documentée des réponses d'erreur du service
ERROR_BODY_SCHEMA = {
    "type": "object",
    "required": ["errors"],
    "properties": {
        "errors": {"type": "array", "items": {"type": "string"}},
    },
}


@dataclass(frozen=True)
class ServiceConfig:
    """
    Paramètres de connexion au service.

    `host` est l'URL de base, sans chemin final (ex: https://api.datadoghq.com).
    Aucune normalisation n'est appliquée : host + path doivent former l'URL
    attendue.
    """

    host: str
    api_key: str = field(repr=False)
    timeout_seconds: Optional[float] = None
    verify_ssl: bool = True


class APIClientError(Exception):
    """Erreur lors de la communication avec l'API de monitoring."""


class TransportError(APIClientError):
    """
    Échec réseau (connexion, DNS, TLS, timeout) ou corps de réponse
    illisible. L'exception d'origine est chaînée dans __cause__.
    """


class ResponseBodyError(APIClientError):
    """Le serveur a rejeté la requête (4xx / 5xx) avec une liste de messages."""

    def __init__(self, status: int, messages: List[str]) -> None:
        super().__init__(f"HTTP {status}: {'; '.join(messages) if messages else '(no message)'}")
        self.status = status
        self.messages = messages


def is_error_status(status: int) -> bool:
    """Seules les plages 4xx et 5xx sont des échecs ; 1xx/2xx/3xx sont des succès."""
    return 400 <= status <= 599


class APIClient:
    """
    Client HTTP responsable de l'envoi des payloads de télémétrie.

    Chaque appel :
      - construit l'URL `host + path` ;
      - envoie un POST JSON authentifié par l'en-tête DD-API-KEY ;
      - classe la réponse (succès, rejet avec messages, erreur transport).

    Pas de retry, pas de cache. Sans session injectée, chaque appel ouvre
    et ferme sa propre `requests.Session` ; une session injectée est
    réutilisée telle quelle (et reste à la charge de l'appelant).
    """

    def __init__(self, config: ServiceConfig, session: Optional[requests.Session] = None) -> None:
        self._config = config
        self._session = session

    @property
    def config(self) -> ServiceConfig:
        return self._config

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            API_KEY_HEADER: self._config.api_key,
        }

    def post(self, path: str, payload: Any, timeout: Optional[float] = None) -> None:
        """
        Envoie `payload` en JSON sur `path`.

        Retourne None en cas de succès. Lève ResponseBodyError si le serveur
        répond 4xx/5xx avec un corps {"errors": [...]}, TransportError pour
        toute erreur réseau ou un corps d'erreur illisible.
        """
        url = self._config.host + path
        body = serialization.encode(payload)
        if timeout is None:
            timeout = self._config.timeout_seconds

        log_request(logger, "Envoi de %d octets vers %s", len(body), url, path=path)

        session = self._session or requests.Session()
        try:
            response = session.post(
                url,
                headers=self._headers(),
                data=body,
                timeout=timeout,
                verify=self._config.verify_ssl,
            )
        except requests.RequestException as exc:
            log_request(logger, "Erreur transport: %s", exc, path=path)
            raise TransportError(f"Échec de la requête POST {url}: {exc}") from exc
        finally:
            if self._session is None:
                session.close()

        status = response.status_code
        log_request(logger, "Réponse reçue", path=path, status=status)

        if not is_error_status(status):
            return None

        raise ResponseBodyError(status, self._parse_error_body(status, response.content))

    @staticmethod
    def _parse_error_body(status: int, content: Optional[bytes]) -> List[str]:
        try:
            data = serialization.decode(content or b"")
            jsonschema.validate(instance=data, schema=ERROR_BODY_SCHEMA)
        except (ValueError, jsonschema.ValidationError) as exc:
            raise TransportError(f"Corps de réponse HTTP {status} illisible: {exc}") from exc
        return list(data["errors"])

    def post_metrics(self, series: Sequence[MetricSeries], timeout: Optional[float] = None) -> None:
        """
        Soumet des séries de métriques.

        https://docs.datadoghq.com/api/latest/metrics/#submit-metrics
        """
        return self.post(SERIES_PATH, {"series": list(series)}, timeout=timeout)

    def post_event(self, event: Event, timeout: Optional[float] = None) -> None:
        """
        Poste un événement dans le flux (tags, priorité, agrégation).

        https://docs.datadoghq.com/api/latest/events/#post-an-event
        """
        return self.post(EVENTS_PATH, event, timeout=timeout)

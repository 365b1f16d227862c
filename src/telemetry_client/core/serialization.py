"""
Encodage / décodage JSON des payloads envoyés à l'API.

Les modèles (MetricSeries, Event, ...) exposent `to_payload()` qui retourne
une structure JSON native ; tout le reste est encodé tel quel par `json`.
La sortie est compacte (pas d'espaces) et en UTF-8.
"""

import json
from enum import Enum
from typing import Any


def _default(value: Any) -> Any:
    to_payload = getattr(value, "to_payload", None)
    if callable(to_payload):
        return to_payload()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(value: Any) -> str:
    """
    Sérialise `value` en JSON compact.

    Un flottant non fini hors d'un modèle (ex: dict brut) lève ValueError.
    """
    return json.dumps(value, default=_default, ensure_ascii=False, allow_nan=False, separators=(",", ":"))


def encode(value: Any) -> bytes:
    return to_json(value).encode("utf-8")


def decode(data: bytes) -> Any:
    """Décode un corps JSON ; lève ValueError si le contenu n'est pas du JSON valide."""
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    return json.loads(data)

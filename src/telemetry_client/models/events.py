from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class AlertType(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"
    USER_UPDATE = "user_update"
    RECOMMENDATION = "recommendation"
    SNAPSHOT = "snapshot"


class Priority(str, Enum):
    NORMAL = "normal"
    LOW = "low"


@dataclass
class Event:
    """
    Événement posté sur /api/v1/events.

    `title` est limité à 100 caractères et `text` à 4000 caractères
    (markdown accepté en encadrant le texte par `%%% \\n` et `\\n %%%`).
    Ces limites ne sont pas vérifiées côté client.

    Tous les champs optionnels absents sont omis du JSON (jamais `null`),
    de même que `tags` lorsque la liste est vide.

        event = (
            Event("Some Title", "Some Text in Markdown")
            .set_aggregation_key("whatever")
            .add_tag("environment:prod")
        )
    """

    title: str
    text: str
    # Les événements partageant une même clé sont regroupés (100 caractères max)
    aggregation_key: Optional[str] = None
    alert_type: Optional[AlertType] = None
    # Timestamp POSIX, pas plus vieux que 7 jours
    date_happened: Optional[int] = None
    device_name: Optional[str] = None
    host: Optional[str] = None
    priority: Optional[Priority] = None
    # Identifiant de l'événement parent
    related_event_id: Optional[int] = None
    # Ex : nagios, hudson, jenkins, my_apps, chef, puppet, git, bitbucket
    source_type_name: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def set_aggregation_key(self, value: str) -> "Event":
        self.aggregation_key = value
        return self

    def set_alert_type(self, value: AlertType) -> "Event":
        self.alert_type = value
        return self

    def set_date_happened(self, value: int) -> "Event":
        self.date_happened = value
        return self

    def set_device_name(self, value: str) -> "Event":
        self.device_name = value
        return self

    def set_host(self, value: str) -> "Event":
        self.host = value
        return self

    def set_priority(self, value: Priority) -> "Event":
        self.priority = value
        return self

    def set_related_event_id(self, value: int) -> "Event":
        self.related_event_id = value
        return self

    def set_source_type_name(self, value: str) -> "Event":
        self.source_type_name = value
        return self

    def add_tag(self, value: str) -> "Event":
        self.tags.append(value)
        return self

    def set_tags(self, tags: List[str]) -> "Event":
        self.tags = list(tags)
        return self

    def to_payload(self) -> Dict[str, Any]:
        optional: Dict[str, Any] = {
            "aggregation_key": self.aggregation_key,
            "alert_type": AlertType(self.alert_type).value if self.alert_type is not None else None,
            "date_happened": self.date_happened,
            "device_name": self.device_name,
            "host": self.host,
            "priority": Priority(self.priority).value if self.priority is not None else None,
            "related_event_id": self.related_event_id,
            "source_type_name": self.source_type_name,
        }
        payload = {key: value for key, value in optional.items() if value is not None}
        if self.tags:
            payload["tags"] = list(self.tags)
        payload["text"] = self.text
        payload["title"] = self.title
        return payload

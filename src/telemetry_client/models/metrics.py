from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class MetricType(str, Enum):
    """Type d'une série : count, gauge ou rate."""

    COUNT = "count"
    GAUGE = "gauge"
    RATE = "rate"


@dataclass
class MetricPoint:
    """
    Un point horodaté (timestamp POSIX en secondes, valeur scalaire).

    Sur le fil, un point est un tableau de deux éléments `[timestamp, value]`,
    jamais un objet. La valeur est toujours envoyée comme un flottant ;
    NaN et ±inf deviennent `null`, JSON n'ayant pas de littéral pour eux.
    """

    timestamp: int
    value: float

    def __post_init__(self) -> None:
        self.timestamp = int(self.timestamp)
        self.value = float(self.value)

    def to_payload(self) -> List[Any]:
        return [self.timestamp, self.value if math.isfinite(self.value) else None]


@dataclass
class MetricSeries:
    """
    Série temporelle soumise à /api/v1/series.

    Les points doivent être des tuples (timestamp, valeur scalaire). Les
    timestamps ne peuvent pas être à plus de dix minutes dans le futur ni
    plus d'une heure dans le passé : ce n'est pas vérifié ici, le serveur
    rejette la requête.

    Construction progressive :

        series = (
            MetricSeries("cpu.usage", MetricType.GAUGE)
            .set_host("raspberrypi")
            .set_interval(42)
            .add_point(MetricPoint(123456, 12.34))
            .add_tag("whatever:tag")
        )
    """

    metric: str
    type: MetricType
    points: List[MetricPoint] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    # Hôte ayant produit la métrique
    host: Optional[str] = None
    # Intervalle (secondes) pour les types rate et count
    interval: Optional[int] = None

    def set_host(self, host: str) -> "MetricSeries":
        self.host = host
        return self

    def set_interval(self, interval: int) -> "MetricSeries":
        self.interval = interval
        return self

    def set_points(self, points: List[MetricPoint]) -> "MetricSeries":
        self.points = list(points)
        return self

    def add_point(self, point: MetricPoint) -> "MetricSeries":
        self.points.append(point)
        return self

    def set_tags(self, tags: List[str]) -> "MetricSeries":
        self.tags = list(tags)
        return self

    def add_tag(self, tag: str) -> "MetricSeries":
        self.tags.append(tag)
        return self

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.host is not None:
            payload["host"] = self.host
        if self.interval is not None:
            payload["interval"] = self.interval
        payload["metric"] = self.metric
        payload["points"] = [point.to_payload() for point in self.points]
        # tags toujours présent, même vide
        payload["tags"] = list(self.tags)
        payload["type"] = MetricType(self.type).value
        return payload

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from telemetry_client.core.logger import get_logger, log_phase
from telemetry_client.models.metrics import MetricPoint, MetricSeries, MetricType

logger = get_logger(__name__)


class BaseCollector(ABC):
    """
    Classe de base des collecteurs de métriques.

    Contrat :
      - collect() : méthode publique, robuste (ne doit jamais lever d'exception)
      - _collect_metrics() : méthode à implémenter, peut lever des exceptions internes

    Chaque collecteur produit des MetricSeries d'un point, horodatées au
    moment de la collecte et portant l'hôte et les tags fournis.
    """

    name: str = "base"

    def __init__(self, host: Optional[str] = None, tags: Sequence[str] = ()) -> None:
        self.host = host
        self.tags = list(tags)

    def collect(self) -> List[MetricSeries]:
        log_phase(logger, f"collector.{self.name}", f"Exécution du collecteur '{self.name}'")

        try:
            series = self._collect_metrics()
        except Exception as exc:
            logger.error(
                "Erreur inattendue dans le collecteur '%s': %s",
                self.name,
                exc,
                exc_info=True,
            )
            return []
        return series

    @abstractmethod
    def _collect_metrics(self) -> List[MetricSeries]:
        raise NotImplementedError

    def _gauge(self, metric: str, value: float, timestamp: int) -> MetricSeries:
        """Construit une série GAUGE d'un seul point."""
        series = MetricSeries(metric, MetricType.GAUGE, tags=list(self.tags))
        series.add_point(MetricPoint(timestamp, value))
        if self.host is not None:
            series.set_host(self.host)
        return series

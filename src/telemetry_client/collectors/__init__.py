from __future__ import annotations

from typing import List, Optional, Sequence

from telemetry_client.collectors.base_collector import BaseCollector
from telemetry_client.collectors.system import SystemCollector
from telemetry_client.models.metrics import MetricSeries


def run_builtin_collectors(host: Optional[str] = None, tags: Sequence[str] = ()) -> List[MetricSeries]:
    """Exécute les collecteurs intégrés et concatène leurs séries."""
    collectors: List[BaseCollector] = [SystemCollector(host=host, tags=tags)]
    series: List[MetricSeries] = []
    for collector in collectors:
        series.extend(collector.collect())
    return series


__all__ = ["BaseCollector", "SystemCollector", "run_builtin_collectors"]

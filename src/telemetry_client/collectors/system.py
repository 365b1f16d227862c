from __future__ import annotations

import time
from typing import Callable, List, Tuple

import psutil

from telemetry_client.core.logger import get_logger
from telemetry_client.collectors.base_collector import BaseCollector
from telemetry_client.models.metrics import MetricSeries

logger = get_logger(__name__)

# (nom de la série, sonde psutil)
_PROBES: Tuple[Tuple[str, Callable[[], float]], ...] = (
    ("system.cpu.usage_percent", lambda: psutil.cpu_percent(interval=None)),
    ("system.mem.usage_percent", lambda: psutil.virtual_memory().percent),
    ("system.swap.usage_percent", lambda: psutil.swap_memory().percent),
    ("system.uptime", lambda: max(0.0, time.time() - psutil.boot_time())),
)


class SystemCollector(BaseCollector):
    """Instantané CPU / mémoire / swap / uptime via psutil, en séries GAUGE."""

    name = "system"

    def _collect_metrics(self) -> List[MetricSeries]:
        now = int(time.time())
        series: List[MetricSeries] = []
        for metric, probe in _PROBES:
            try:
                series.append(self._gauge(metric, probe(), now))
            except Exception as exc:
                logger.debug("Échec sonde %s: %s", metric, exc)
        return series

"""
Telemetry Client Package.

Client HTTP pour la soumission de métriques et d'événements à l'API d'un
service de monitoring.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("telemetry-client")
except PackageNotFoundError:
    from telemetry_client.__version__ import __version__

from telemetry_client.core.api_client import (
    APIClient,
    APIClientError,
    ResponseBodyError,
    ServiceConfig,
    TransportError,
)
from telemetry_client.models import AlertType, Event, MetricPoint, MetricSeries, MetricType, Priority

__all__ = [
    "__version__",
    "APIClient",
    "APIClientError",
    "AlertType",
    "Event",
    "MetricPoint",
    "MetricSeries",
    "MetricType",
    "Priority",
    "ResponseBodyError",
    "ServiceConfig",
    "TransportError",
]

from telemetry_client.models.events import AlertType, Event, Priority
from telemetry_client.models.metrics import MetricPoint, MetricSeries, MetricType

__all__ = [
    "AlertType",
    "Event",
    "MetricPoint",
    "MetricSeries",
    "MetricType",
    "Priority",
]

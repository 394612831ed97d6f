"""Pipeline layer - Customer fan-out, channel routing and stream output."""

from balance_alerts.pipeline.join import fan_out, generate_customer_alerts
from balance_alerts.pipeline.publisher import (
    DEFAULT_STREAMS,
    AlertPublisher,
    PublisherError,
)
from balance_alerts.pipeline.router import route

__all__ = [
    "DEFAULT_STREAMS",
    "AlertPublisher",
    "PublisherError",
    "fan_out",
    "generate_customer_alerts",
    "route",
]

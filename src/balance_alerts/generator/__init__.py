"""Alert generation layer - Rule evaluation and message addressing."""

from balance_alerts.generator.addressing import resolve_addresses
from balance_alerts.generator.alerts import generate_alerts
from balance_alerts.generator.messages import build_message, to_major_units
from balance_alerts.generator.models import AddressedMessage, FiredAlert, OutboundMessage
from balance_alerts.generator.rules import dispatch_rules, matching_settings
from balance_alerts.generator.thresholds import EVALUATORS, evaluate

__all__ = [
    "EVALUATORS",
    "AddressedMessage",
    "FiredAlert",
    "OutboundMessage",
    "build_message",
    "dispatch_rules",
    "evaluate",
    "generate_alerts",
    "matching_settings",
    "resolve_addresses",
    "to_major_units",
]

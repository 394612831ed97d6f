"""Profile layer - Per-customer alert rules and contact addresses."""

from balance_alerts.profile.models import (
    AccountAlertSettings,
    Address,
    AlertKind,
    AlertRule,
    ChannelKind,
    CustomerAlertProfile,
)

__all__ = [
    "AccountAlertSettings",
    "Address",
    "AlertKind",
    "AlertRule",
    "ChannelKind",
    "CustomerAlertProfile",
]

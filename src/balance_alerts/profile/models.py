"""Data models for customer alert profiles."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class AlertKind(str, Enum):
    """Supported alert rule kinds. The value doubles as the message type tag."""

    BALANCE_ABOVE_THRESHOLD = "ALERT_BALANCE_ABOVE_THRESHOLD"
    BALANCE_BELOW_THRESHOLD = "ALERT_BALANCE_BELOW_THRESHOLD"
    DEBITED_ABOVE_THRESHOLD = "ALERT_DEBITED_ABOVE_THRESHOLD"
    CREDITED_ABOVE_THRESHOLD = "ALERT_CREDITED_ABOVE_THRESHOLD"


class ChannelKind(str, Enum):
    """Delivery medium requested by a rule and offered by an address."""

    EMAIL = "EMAIL"
    SMS = "SMS"
    PUSH = "PUSH"


# Address record type -> channel it is delivered over
ADDRESS_TYPES: dict[str, ChannelKind] = {
    "email": ChannelKind.EMAIL,
    "phone": ChannelKind.SMS,
    "customer_id": ChannelKind.PUSH,
}


def _parse_channels(names: Iterable[str]) -> frozenset[ChannelKind]:
    channels = set()
    for name in names:
        try:
            channels.add(ChannelKind(str(name).upper()))
        except ValueError:
            logger.warning("Ignoring unknown alert channel: %s", name)
    return frozenset(channels)


@dataclass(frozen=True)
class AlertRule:
    """A customer-configured alert condition.

    Attributes:
        kind: Which threshold check this rule performs.
        threshold: Threshold amount in minor currency units.
        channels: Channels the customer wants to be notified over.
    """

    kind: AlertKind
    threshold: Decimal
    channels: frozenset[ChannelKind]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AlertRule:
        """Create an AlertRule from a settings record.

        Raises:
            ValueError: If the alert type is not a supported kind.
            decimal.InvalidOperation: If the amount is not a valid number.
        """
        return cls(
            kind=AlertKind(data["alert_type"]),
            threshold=Decimal(str(data["amount"])),
            channels=_parse_channels(data.get("channels", [])),
        )


@dataclass(frozen=True)
class AccountAlertSettings:
    """The rule group a customer configured for one account and currency."""

    account_id: str
    currency: str
    rules: tuple[AlertRule, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AccountAlertSettings:
        """Create an AccountAlertSettings from a settings record.

        Rules with an unsupported alert type are dropped with a warning.
        """
        rules = []
        for rule_data in data.get("settings", []):
            try:
                rules.append(AlertRule.from_dict(rule_data))
            except ValueError:
                logger.warning(
                    "Skipping alert setting with unsupported type %r for account %s",
                    rule_data.get("alert_type"),
                    data["account_id"],
                )
        return cls(
            account_id=str(data["account_id"]),
            currency=str(data["currency"]),
            rules=tuple(rules),
        )

    def matches(self, account_id: str, currency: str) -> bool:
        """Return True if this group applies to the given account and currency."""
        return self.account_id == account_id and self.currency == currency


@dataclass(frozen=True)
class Address:
    """A contact address tagged with the channel it is delivered over.

    Push addresses carry the customer identifier; it is resolved to the
    customer's devices further downstream.
    """

    channel: ChannelKind
    value: str

    @classmethod
    def email(cls, address: str) -> Address:
        return cls(channel=ChannelKind.EMAIL, value=address)

    @classmethod
    def phone(cls, number: str) -> Address:
        return cls(channel=ChannelKind.SMS, value=number)

    @classmethod
    def push(cls, customer_id: str) -> Address:
        return cls(channel=ChannelKind.PUSH, value=customer_id)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Address:
        """Create an Address from a ``{"type": ..., "value": ...}`` record.

        Raises:
            ValueError: If the address type is unknown.
        """
        address_type = str(data["type"]).lower()
        if address_type not in ADDRESS_TYPES:
            raise ValueError(f"Unknown address type: {data['type']}")
        return cls(channel=ADDRESS_TYPES[address_type], value=str(data["value"]))


@dataclass(frozen=True)
class CustomerAlertProfile:
    """Everything a customer configured for alerting.

    Attributes:
        customer_id: The customer owning this profile.
        account_settings: One rule group per (account, currency).
        addresses: Registered contact addresses, each bound to one channel.
    """

    customer_id: str
    account_settings: tuple[AccountAlertSettings, ...] = ()
    addresses: tuple[Address, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CustomerAlertProfile:
        """Create a CustomerAlertProfile from a settings table record.

        Addresses of an unknown type are dropped with a warning.
        """
        addresses = []
        for address_data in data.get("addresses", []):
            try:
                addresses.append(Address.from_dict(address_data))
            except ValueError as e:
                logger.warning("Skipping address for customer %s: %s", data["customer_id"], e)

        return cls(
            customer_id=str(data["customer_id"]),
            account_settings=tuple(
                AccountAlertSettings.from_dict(s) for s in data.get("account_settings", [])
            ),
            addresses=tuple(addresses),
        )

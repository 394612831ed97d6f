"""Data models for the alert generator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import NamedTuple

from balance_alerts.profile.models import Address, ChannelKind


@dataclass(frozen=True)
class OutboundMessage:
    """A notification ready to be delivered to one or more addresses.

    Attributes:
        message_type: Tag of the alert kind that produced this message.
        params: Flat template parameters, all values pre-formatted as strings.
        timestamp: When the message was generated (not when the entry was booked).
    """

    message_type: str
    params: dict[str, str]
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, object]:
        """Serialize to dictionary for publishing."""
        return {
            "message_type": self.message_type,
            "timestamp": self.timestamp.isoformat(),
            "params": dict(self.params),
        }


@dataclass(frozen=True)
class FiredAlert:
    """A rule that fired, before it has been bound to any address."""

    channels: frozenset[ChannelKind]
    message: OutboundMessage


class AddressedMessage(NamedTuple):
    """An outbound message paired with one concrete destination."""

    address: Address
    message: OutboundMessage

    @property
    def channel(self) -> ChannelKind:
        """Return the channel this pair must be routed to."""
        return self.address.channel

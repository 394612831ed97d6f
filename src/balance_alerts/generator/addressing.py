"""Address resolution for fired alerts."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from balance_alerts.profile.models import Address, ChannelKind


def resolve_addresses(
    channels: Iterable[ChannelKind], addresses: Iterable[Address]
) -> Iterator[Address]:
    """Yield the addresses whose channel was requested.

    Addresses on channels that were not requested are skipped, and a
    requested channel without any address simply yields nothing.
    """
    requested = frozenset(channels)
    return (address for address in addresses if address.channel in requested)

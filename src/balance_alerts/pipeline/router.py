"""Channel routing for addressed messages."""

from __future__ import annotations

from collections.abc import Iterable

from balance_alerts.generator.models import AddressedMessage
from balance_alerts.profile.models import ChannelKind


def route(
    messages: Iterable[AddressedMessage],
) -> dict[ChannelKind, list[AddressedMessage]]:
    """Partition addressed messages by the channel of their address.

    Every channel is present in the result, possibly with an empty list.
    Input order is preserved within each channel.
    """
    routed: dict[ChannelKind, list[AddressedMessage]] = {kind: [] for kind in ChannelKind}
    for addressed in messages:
        routed[addressed.channel].append(addressed)
    return routed

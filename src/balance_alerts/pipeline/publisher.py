"""Redis Streams publisher for addressed alert messages.

Each addressed message is written to the stream configured for the
channel of its address, so email, SMS and push senders can consume
their own stream independently.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence

from redis.asyncio import Redis

from balance_alerts.generator.models import AddressedMessage
from balance_alerts.profile.models import ChannelKind

logger = logging.getLogger(__name__)


# Default configuration
DEFAULT_STREAMS: dict[ChannelKind, str] = {
    ChannelKind.EMAIL: "outboundemailmessage",
    ChannelKind.SMS: "outboundsmsmessage",
    ChannelKind.PUSH: "outboundcustomerpushmessage",
}
DEFAULT_MAX_LEN = 100_000  # 100k messages per stream


class PublisherError(Exception):
    """Base exception for publisher errors."""

    pass


def _serialize_addressed_message(addressed: AddressedMessage) -> dict[str, str]:
    """Serialize an AddressedMessage to a dict suitable for Redis Streams.

    Redis Streams require string key-value pairs, so the parameter map is
    stored as a JSON object.

    Args:
        addressed: The AddressedMessage to serialize.

    Returns:
        Dictionary with string keys and values.
    """
    message = addressed.message
    return {
        "address": addressed.address.value,
        "channel": addressed.address.channel.value,
        "message_type": message.message_type,
        "timestamp": message.timestamp.isoformat(),
        "params": json.dumps(message.params, sort_keys=True),
    }


class AlertPublisher:
    """Publisher writing addressed messages to per-channel Redis Streams.

    Example:
        ```python
        redis = Redis.from_url("redis://localhost:6379")
        publisher = AlertPublisher(redis)

        for addressed in generate_alerts(entry, profile):
            await publisher.publish(addressed)
        ```
    """

    def __init__(
        self,
        redis: Redis,
        streams: Mapping[ChannelKind, str] | None = None,
        *,
        max_len: int = DEFAULT_MAX_LEN,
    ) -> None:
        """Initialize the alert publisher.

        Args:
            redis: Redis async client.
            streams: Stream name per channel. Defaults to DEFAULT_STREAMS.
            max_len: Maximum number of entries to keep in each stream.
        """
        self._redis = redis
        self._streams = dict(streams) if streams is not None else DEFAULT_STREAMS.copy()
        self._max_len = max_len

    def stream_for(self, channel: ChannelKind) -> str:
        """Return the stream name for a channel.

        Raises:
            PublisherError: If no stream is configured for the channel.
        """
        try:
            return self._streams[channel]
        except KeyError:
            raise PublisherError(f"No stream configured for channel {channel.value}") from None

    async def publish(self, addressed: AddressedMessage) -> str:
        """Publish a single addressed message to its channel's stream.

        Args:
            addressed: The AddressedMessage to publish.

        Returns:
            The entry ID assigned by Redis.
        """
        stream = self.stream_for(addressed.channel)
        data = _serialize_addressed_message(addressed)
        # redis-py typing expects broader dict type than dict[str, str]
        entry_id = await self._redis.xadd(
            stream,
            data,  # type: ignore[arg-type]
            maxlen=self._max_len,
        )
        logger.debug("Published %s to %s", addressed.message.message_type, stream)
        if isinstance(entry_id, bytes):
            return entry_id.decode()
        return str(entry_id)

    async def publish_batch(self, messages: Sequence[AddressedMessage]) -> list[str]:
        """Publish multiple addressed messages in one round trip.

        Uses a Redis pipeline for efficiency. Streams are resolved for all
        messages before anything is sent.

        Args:
            messages: Sequence of AddressedMessages to publish.

        Returns:
            List of entry IDs assigned by Redis, in input order.
        """
        if not messages:
            return []

        streams = [self.stream_for(addressed.channel) for addressed in messages]

        pipe = self._redis.pipeline()
        for stream, addressed in zip(streams, messages, strict=True):
            data = _serialize_addressed_message(addressed)
            pipe.xadd(stream, data, maxlen=self._max_len)  # type: ignore[arg-type]

        results = await pipe.execute()
        logger.info("Published %d alert messages", len(results))

        entry_ids: list[str] = []
        for entry_id in results:
            if isinstance(entry_id, bytes):
                entry_ids.append(entry_id.decode())
            else:
                entry_ids.append(str(entry_id))

        return entry_ids

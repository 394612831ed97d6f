"""Tests for the Redis Streams alert publisher."""

import json
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from balance_alerts.generator.models import AddressedMessage, OutboundMessage
from balance_alerts.pipeline.publisher import (
    DEFAULT_MAX_LEN,
    DEFAULT_STREAMS,
    AlertPublisher,
    PublisherError,
    _serialize_addressed_message,
)
from balance_alerts.profile.models import Address, ChannelKind


# Test fixtures
@pytest.fixture
def sample_message() -> OutboundMessage:
    """Create a sample outbound message."""
    return OutboundMessage(
        message_type="ALERT_BALANCE_BELOW_THRESHOLD",
        params={"balance_amount": "80.00", "balance_amount_currency": "EUR"},
        timestamp=datetime(2026, 1, 4, 12, 0, 0, tzinfo=UTC),
    )


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Create a mock Redis client."""
    redis = AsyncMock()
    redis.xadd = AsyncMock(return_value=b"1767528000000-0")
    redis.pipeline = MagicMock()
    return redis


class TestSerialization:
    """Tests for the serialization helper."""

    def test_serialize_addressed_message(self, sample_message: OutboundMessage) -> None:
        """Test serializing an addressed message to stream fields."""
        data = _serialize_addressed_message(
            AddressedMessage(Address.email("jan@example.com"), sample_message)
        )

        assert data == {
            "address": "jan@example.com",
            "channel": "EMAIL",
            "message_type": "ALERT_BALANCE_BELOW_THRESHOLD",
            "timestamp": "2026-01-04T12:00:00+00:00",
            "params": json.dumps(
                {"balance_amount": "80.00", "balance_amount_currency": "EUR"},
                sort_keys=True,
            ),
        }
        assert all(isinstance(v, str) for v in data.values())


class TestAlertPublisher:
    """Tests for AlertPublisher."""

    def test_default_streams(self, mock_redis: AsyncMock) -> None:
        """Test default stream names per channel."""
        publisher = AlertPublisher(mock_redis)

        assert publisher.stream_for(ChannelKind.EMAIL) == DEFAULT_STREAMS[ChannelKind.EMAIL]
        assert publisher.stream_for(ChannelKind.SMS) == "outboundsmsmessage"
        assert publisher.stream_for(ChannelKind.PUSH) == "outboundcustomerpushmessage"

    def test_missing_stream_raises(self, mock_redis: AsyncMock) -> None:
        """Test that an unmapped channel raises PublisherError."""
        publisher = AlertPublisher(mock_redis, {ChannelKind.EMAIL: "mail"})

        with pytest.raises(PublisherError, match="SMS"):
            publisher.stream_for(ChannelKind.SMS)

    @pytest.mark.asyncio
    async def test_publish_routes_by_channel(
        self, mock_redis: AsyncMock, sample_message: OutboundMessage
    ) -> None:
        """Test a message is written to its channel's stream."""
        publisher = AlertPublisher(mock_redis)

        entry_id = await publisher.publish(
            AddressedMessage(Address.phone("+31600000000"), sample_message)
        )

        assert entry_id == "1767528000000-0"
        mock_redis.xadd.assert_called_once()
        args, kwargs = mock_redis.xadd.call_args
        assert args[0] == "outboundsmsmessage"
        assert args[1]["address"] == "+31600000000"
        assert kwargs["maxlen"] == DEFAULT_MAX_LEN

    @pytest.mark.asyncio
    async def test_publish_custom_streams(
        self, mock_redis: AsyncMock, sample_message: OutboundMessage
    ) -> None:
        """Test custom stream names and max length are used."""
        mock_redis.xadd.return_value = "1-0"
        publisher = AlertPublisher(
            mock_redis,
            {ChannelKind.PUSH: "push-out"},
            max_len=10,
        )

        entry_id = await publisher.publish(AddressedMessage(Address.push("c1"), sample_message))

        assert entry_id == "1-0"
        args, kwargs = mock_redis.xadd.call_args
        assert args[0] == "push-out"
        assert kwargs["maxlen"] == 10

    @pytest.mark.asyncio
    async def test_publish_batch(
        self, mock_redis: AsyncMock, sample_message: OutboundMessage
    ) -> None:
        """Test batch publishing through a Redis pipeline."""
        mock_pipe = MagicMock()
        mock_pipe.execute = AsyncMock(return_value=[b"1-0", "2-0"])
        mock_redis.pipeline.return_value = mock_pipe
        publisher = AlertPublisher(mock_redis)

        entry_ids = await publisher.publish_batch(
            [
                AddressedMessage(Address.email("a@example.com"), sample_message),
                AddressedMessage(Address.push("c1"), sample_message),
            ]
        )

        assert entry_ids == ["1-0", "2-0"]
        streams = [c.args[0] for c in mock_pipe.xadd.call_args_list]
        assert streams == ["outboundemailmessage", "outboundcustomerpushmessage"]
        mock_pipe.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_publish_batch_empty(self, mock_redis: AsyncMock) -> None:
        """Test publishing an empty batch does not touch Redis."""
        publisher = AlertPublisher(mock_redis)

        assert await publisher.publish_batch([]) == []
        mock_redis.pipeline.assert_not_called()

    @pytest.mark.asyncio
    async def test_publish_batch_unmapped_channel_sends_nothing(
        self, mock_redis: AsyncMock, sample_message: OutboundMessage
    ) -> None:
        """Test a batch with an unmapped channel fails before sending."""
        publisher = AlertPublisher(mock_redis, {ChannelKind.EMAIL: "mail"})

        with pytest.raises(PublisherError):
            await publisher.publish_batch(
                [
                    AddressedMessage(Address.email("a@example.com"), sample_message),
                    AddressedMessage(Address.phone("+3160"), sample_message),
                ]
            )

        mock_redis.pipeline.assert_not_called()

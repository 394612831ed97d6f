"""Outbound message assembly and amount formatting."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from decimal import MAX_PREC, Decimal, localcontext

from balance_alerts.generator.models import OutboundMessage
from balance_alerts.profile.models import AlertKind

# Amounts are carried in cents and rendered in whole currency units
MINOR_UNIT_DIGITS = 2


def to_major_units(amount: Decimal) -> str:
    """Render a minor-unit amount in major units, e.g. ``15000`` -> ``"150.00"``.

    The decimal point is shifted exactly and the result is always written
    in plain notation, so ``1E+4`` renders as ``"100"``.
    """
    with localcontext(prec=MAX_PREC):
        major = amount.scaleb(-MINOR_UNIT_DIGITS)
    return format(major, "f")


def build_message(kind: AlertKind, params: Iterable[tuple[str, str]]) -> OutboundMessage:
    """Assemble an outbound message for a fired rule.

    Args:
        kind: The rule kind; its value becomes the message type.
        params: Key/value pairs collected into the parameter map.

    Returns:
        OutboundMessage stamped with the current time.
    """
    return OutboundMessage(
        message_type=kind.value,
        params=dict(params),
        timestamp=datetime.now(UTC),
    )

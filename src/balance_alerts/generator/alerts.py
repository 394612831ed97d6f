"""Alert generation entry point.

Turns one ledger entry and the owning customer's alert profile into the
list of addressed messages to deliver:

1. Keep the profile's rule groups for the entry's account and currency
2. Evaluate every rule in those groups against the entry
3. Bind each fired alert to every address on a requested channel

The function is pure apart from logging and may be called concurrently.
"""

from __future__ import annotations

import logging

from balance_alerts.generator.addressing import resolve_addresses
from balance_alerts.generator.models import AddressedMessage
from balance_alerts.generator.rules import dispatch_rules, matching_settings
from balance_alerts.ledger.models import LedgerEntry
from balance_alerts.profile.models import CustomerAlertProfile

logger = logging.getLogger(__name__)


def generate_alerts(
    entry: LedgerEntry, profile: CustomerAlertProfile | None
) -> list[AddressedMessage]:
    """Generate addressed alert messages for a ledger entry.

    Args:
        entry: The posted ledger entry.
        profile: The customer's alert profile, or None when the customer
            has not configured any alerting.

    Returns:
        One AddressedMessage per (fired alert, matching address). Empty when
        there is no profile, nothing fires, or no address matches.

    Raises:
        decimal.InvalidOperation: Propagated from malformed numeric input.
    """
    if profile is None:
        return []

    settings = matching_settings(entry, profile)
    fired = dispatch_rules(entry, settings)

    addressed = [
        AddressedMessage(address=address, message=alert.message)
        for alert in fired
        for address in resolve_addresses(alert.channels, profile.addresses)
    ]

    if fired:
        logger.debug(
            "Generated alerts: customer=%s, account=%s, fired=%d, addressed=%d",
            profile.customer_id,
            entry.account_id,
            len(fired),
            len(addressed),
        )
    return addressed

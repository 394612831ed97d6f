"""Customer fan-out for ledger entries.

A ledger entry is keyed by account, while alert profiles are keyed by
customer. An account may be shared by several customers (or none), so each
entry is fanned out to every customer of its account and evaluated against
that customer's profile. Customers without a profile produce no alerts.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence

from balance_alerts.generator.alerts import generate_alerts
from balance_alerts.generator.models import AddressedMessage
from balance_alerts.ledger.models import LedgerEntry
from balance_alerts.profile.models import CustomerAlertProfile

logger = logging.getLogger(__name__)


def fan_out(
    entry: LedgerEntry, customer_ids: Sequence[str] | None
) -> Iterator[tuple[str, LedgerEntry]]:
    """Re-key an entry by each customer owning its account."""
    for customer_id in customer_ids or ():
        yield customer_id, entry


def generate_customer_alerts(
    entry: LedgerEntry,
    account_customers: Mapping[str, Sequence[str]],
    profiles: Mapping[str, CustomerAlertProfile],
) -> list[tuple[str, AddressedMessage]]:
    """Generate addressed alerts for every customer of the entry's account.

    Args:
        entry: The posted ledger entry.
        account_customers: Account id -> ids of the customers owning it.
        profiles: Customer id -> alert profile.

    Returns:
        (customer_id, AddressedMessage) pairs, grouped by customer in the
        order the account mapping lists them.
    """
    customer_ids = account_customers.get(entry.account_id)
    if not customer_ids:
        logger.debug("No customers for account %s", entry.account_id)
        return []

    results: list[tuple[str, AddressedMessage]] = []
    for customer_id, customer_entry in fan_out(entry, customer_ids):
        profile = profiles.get(customer_id)
        for addressed in generate_alerts(customer_entry, profile):
            results.append((customer_id, addressed))
    return results

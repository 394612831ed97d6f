"""Rule dispatch across a customer's per-account settings."""

from __future__ import annotations

from collections.abc import Iterable

from balance_alerts.generator.models import FiredAlert
from balance_alerts.generator.thresholds import EVALUATORS
from balance_alerts.ledger.models import LedgerEntry
from balance_alerts.profile.models import AccountAlertSettings, CustomerAlertProfile


def matching_settings(
    entry: LedgerEntry, profile: CustomerAlertProfile
) -> list[AccountAlertSettings]:
    """Return the profile's rule groups for the entry's account and currency."""
    return [
        settings
        for settings in profile.account_settings
        if settings.matches(entry.account_id, entry.account_currency)
    ]


def dispatch_rules(
    entry: LedgerEntry, settings: Iterable[AccountAlertSettings]
) -> list[FiredAlert]:
    """Run every evaluator against every rule and collect what fired.

    Results keep the order of rule groups, then rules within a group,
    then evaluators.

    Args:
        entry: The posted ledger entry.
        settings: Rule groups already matched to the entry's account.

    Returns:
        One FiredAlert per rule that fired.
    """
    fired: list[FiredAlert] = []
    for group in settings:
        for rule in group.rules:
            for evaluator in EVALUATORS:
                alert = evaluator(entry, rule)
                if alert is not None:
                    fired.append(alert)
    return fired

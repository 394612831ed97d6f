"""Threshold evaluation for balance and booking alert rules.

Each evaluator takes one ledger entry and one rule and returns a FiredAlert
when the rule fires, or None otherwise. An evaluator ignores rules of any
kind but its own, so all of them can safely be run against every rule.

Balance rules fire on the crossing edge only: the booking must move the
balance across the threshold. Debit/credit rules fire on every qualifying
booking regardless of the balance before it.

All comparisons use Decimal arithmetic on minor-unit amounts.
"""

from __future__ import annotations

from collections.abc import Callable

from balance_alerts.generator.messages import build_message, to_major_units
from balance_alerts.generator.models import FiredAlert
from balance_alerts.ledger.models import LedgerEntry
from balance_alerts.profile.models import AlertKind, AlertRule

Evaluator = Callable[[LedgerEntry, AlertRule], FiredAlert | None]


def _base_params(entry: LedgerEntry, rule: AlertRule) -> list[tuple[str, str]]:
    currency = entry.account_currency
    return [
        ("alert_settings_account_number", entry.account_id),
        ("alert_settings_account_account", currency),
        ("alert_settings_amount", to_major_units(rule.threshold)),
        ("alert_settings_amount_currency", currency),
        ("balance_amount", to_major_units(entry.signed_balance)),
        ("balance_amount_currency", currency),
    ]


def _booking_params(entry: LedgerEntry, rule: AlertRule) -> list[tuple[str, str]]:
    return _base_params(entry, rule) + [
        ("alert_amount_amount", to_major_units(entry.booking_amount)),
        ("alert_amount_amount_currency", entry.account_currency),
    ]


def _fire(rule: AlertRule, params: list[tuple[str, str]]) -> FiredAlert:
    return FiredAlert(channels=rule.channels, message=build_message(rule.kind, params))


def balance_above(entry: LedgerEntry, rule: AlertRule) -> FiredAlert | None:
    """Fire when this booking lifts the balance above the threshold."""
    if rule.kind is not AlertKind.BALANCE_ABOVE_THRESHOLD:
        return None

    balance = entry.signed_balance
    if balance > rule.threshold and entry.prior_balance <= rule.threshold:
        return _fire(rule, _base_params(entry, rule))
    return None


def balance_below(entry: LedgerEntry, rule: AlertRule) -> FiredAlert | None:
    """Fire when this booking drops the balance below the threshold."""
    if rule.kind is not AlertKind.BALANCE_BELOW_THRESHOLD:
        return None

    balance = entry.signed_balance
    if balance < rule.threshold and entry.prior_balance >= rule.threshold:
        return _fire(rule, _base_params(entry, rule))
    return None


def credited_above(entry: LedgerEntry, rule: AlertRule) -> FiredAlert | None:
    """Fire on a credit booking whose size exceeds the threshold."""
    if rule.kind is not AlertKind.CREDITED_ABOVE_THRESHOLD:
        return None

    if entry.is_credit and entry.signed_amount.copy_abs() > rule.threshold:
        return _fire(rule, _booking_params(entry, rule))
    return None


def debited_above(entry: LedgerEntry, rule: AlertRule) -> FiredAlert | None:
    """Fire on a debit booking whose size exceeds the threshold."""
    if rule.kind is not AlertKind.DEBITED_ABOVE_THRESHOLD:
        return None

    if entry.is_debit and entry.signed_amount.copy_abs() > rule.threshold:
        return _fire(rule, _booking_params(entry, rule))
    return None


# Run order for every rule; at most one of these matches a given rule kind
EVALUATORS: tuple[Evaluator, ...] = (
    balance_above,
    balance_below,
    credited_above,
    debited_above,
)


def evaluate(entry: LedgerEntry, rule: AlertRule) -> FiredAlert | None:
    """Evaluate a single rule against a ledger entry.

    Args:
        entry: The posted ledger entry.
        rule: The alert rule to check.

    Returns:
        FiredAlert if the rule fires, None otherwise.
    """
    for evaluator in EVALUATORS:
        fired = evaluator(entry, rule)
        if fired is not None:
            return fired
    return None

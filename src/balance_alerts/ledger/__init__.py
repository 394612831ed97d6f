"""Ledger layer - Posted account entries consumed by the alert engine."""

from balance_alerts.ledger.models import CreditDebitIndicator, LedgerEntry

__all__ = [
    "CreditDebitIndicator",
    "LedgerEntry",
]

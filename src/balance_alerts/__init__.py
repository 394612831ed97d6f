"""Balance Alerts - Threshold alerting for account ledger entries."""

__version__ = "0.1.0"

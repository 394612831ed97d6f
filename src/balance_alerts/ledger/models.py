"""Data models for the ledger module."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import MAX_PREC, Decimal, localcontext
from enum import Enum
from typing import Any


class CreditDebitIndicator(str, Enum):
    """Direction of a booking or balance, as reported by the ledger."""

    CREDIT = "CRDT"
    DEBIT = "DBIT"

    def sign(self, magnitude: Decimal) -> Decimal:
        """Apply this indicator to an unsigned magnitude."""
        return magnitude.copy_negate() if self is CreditDebitIndicator.DEBIT else magnitude


@dataclass(frozen=True)
class LedgerEntry:
    """A single posted transaction together with the balance it produced.

    Amounts are unsigned magnitudes in minor currency units (cents); the
    direction of each lives in its own credit/debit indicator.

    Attributes:
        account_id: Identifier of the booked account.
        account_currency: ISO currency code of the account.
        booking_amount: Magnitude of the booking.
        booking_indicator: Whether the booking credited or debited the account.
        balance_after_booking: Magnitude of the balance after this booking.
        balance_indicator: Whether the resulting balance is in credit or debit.
    """

    account_id: str
    account_currency: str
    booking_amount: Decimal
    booking_indicator: CreditDebitIndicator
    balance_after_booking: Decimal
    balance_indicator: CreditDebitIndicator

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LedgerEntry:
        """Create a LedgerEntry from an upstream ledger record.

        Raises:
            KeyError: If a required field is missing.
            decimal.InvalidOperation: If an amount is not a valid number.
            ValueError: If an indicator is neither CRDT nor DBIT.
        """
        return cls(
            account_id=str(data["account_id"]),
            account_currency=str(data["account_currency"]),
            booking_amount=Decimal(str(data["booking_amount"])),
            booking_indicator=CreditDebitIndicator(data["booking_indicator"]),
            balance_after_booking=Decimal(str(data["balance_after_booking"])),
            balance_indicator=CreditDebitIndicator(data["balance_indicator"]),
        )

    @property
    def signed_amount(self) -> Decimal:
        """Return the booking amount, negative for debits."""
        return self.booking_indicator.sign(self.booking_amount)

    @property
    def signed_balance(self) -> Decimal:
        """Return the balance after booking, negative when in debit."""
        return self.balance_indicator.sign(self.balance_after_booking)

    @property
    def prior_balance(self) -> Decimal:
        """Return the balance as it was before this booking.

        Computed without rounding, whatever the number of digits.
        """
        with localcontext(prec=MAX_PREC):
            return self.signed_balance - self.signed_amount

    @property
    def is_debit(self) -> bool:
        return self.booking_indicator is CreditDebitIndicator.DEBIT

    @property
    def is_credit(self) -> bool:
        return self.booking_indicator is CreditDebitIndicator.CREDIT

    def to_dict(self) -> dict[str, str]:
        """Serialize to the same record shape accepted by from_dict."""
        return {
            "account_id": self.account_id,
            "account_currency": self.account_currency,
            "booking_amount": str(self.booking_amount),
            "booking_indicator": self.booking_indicator.value,
            "balance_after_booking": str(self.balance_after_booking),
            "balance_indicator": self.balance_indicator.value,
        }

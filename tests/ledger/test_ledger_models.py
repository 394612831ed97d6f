"""Tests for ledger data models."""

from decimal import Decimal, InvalidOperation

import pytest

from balance_alerts.ledger.models import CreditDebitIndicator, LedgerEntry


def make_entry(
    amount: str = "20000",
    booking: CreditDebitIndicator = CreditDebitIndicator.CREDIT,
    balance: str = "15000",
    balance_indicator: CreditDebitIndicator = CreditDebitIndicator.CREDIT,
) -> LedgerEntry:
    return LedgerEntry(
        account_id="NL01BANK0123456789",
        account_currency="EUR",
        booking_amount=Decimal(amount),
        booking_indicator=booking,
        balance_after_booking=Decimal(balance),
        balance_indicator=balance_indicator,
    )


class TestCreditDebitIndicator:
    """Tests for CreditDebitIndicator."""

    def test_wire_values(self) -> None:
        """Test indicator values match the ledger codes."""
        assert CreditDebitIndicator("CRDT") is CreditDebitIndicator.CREDIT
        assert CreditDebitIndicator("DBIT") is CreditDebitIndicator.DEBIT

    def test_unknown_value_raises(self) -> None:
        """Test that unknown indicator codes are rejected."""
        with pytest.raises(ValueError):
            CreditDebitIndicator("XXXX")

    def test_sign(self) -> None:
        """Test that debit negates and credit keeps the magnitude."""
        assert CreditDebitIndicator.CREDIT.sign(Decimal("12.50")) == Decimal("12.50")
        assert CreditDebitIndicator.DEBIT.sign(Decimal("12.50")) == Decimal("-12.50")


class TestLedgerEntry:
    """Tests for LedgerEntry model."""

    def test_signed_values_credit(self) -> None:
        """Test signed amounts for a credit booking on a positive balance."""
        entry = make_entry()

        assert entry.signed_amount == Decimal("20000")
        assert entry.signed_balance == Decimal("15000")
        assert entry.prior_balance == Decimal("-5000")

    def test_signed_values_debit(self) -> None:
        """Test signed amounts for a debit booking into overdraft."""
        entry = make_entry(
            amount="3000",
            booking=CreditDebitIndicator.DEBIT,
            balance="1000",
            balance_indicator=CreditDebitIndicator.DEBIT,
        )

        assert entry.signed_amount == Decimal("-3000")
        assert entry.signed_balance == Decimal("-1000")
        assert entry.prior_balance == Decimal("2000")

    def test_booking_direction(self) -> None:
        """Test is_credit / is_debit follow the booking indicator only."""
        entry = make_entry(balance_indicator=CreditDebitIndicator.DEBIT)

        assert entry.is_credit is True
        assert entry.is_debit is False

    def test_prior_balance_is_exact(self) -> None:
        """Test that decimal arithmetic does not introduce rounding."""
        entry = make_entry(amount="0.1", balance="0.3")

        assert entry.prior_balance == Decimal("0.2")

    def test_prior_balance_keeps_every_digit(self) -> None:
        """Test balances wider than the default decimal precision are not rounded."""
        entry = make_entry(amount="1", balance=str(10**28 + 2))

        assert entry.prior_balance == Decimal(10**28 + 1)

    def test_sign_keeps_every_digit(self) -> None:
        """Test that negating a very long magnitude is exact."""
        magnitude = Decimal("1234567890123456789012345678901")

        assert CreditDebitIndicator.DEBIT.sign(magnitude) == Decimal(
            "-1234567890123456789012345678901"
        )

    def test_from_dict(self) -> None:
        """Test creating LedgerEntry from a ledger record."""
        data = {
            "account_id": "NL01BANK0123456789",
            "account_currency": "EUR",
            "booking_amount": "20000",
            "booking_indicator": "CRDT",
            "balance_after_booking": 15000,
            "balance_indicator": "DBIT",
        }
        entry = LedgerEntry.from_dict(data)

        assert entry.account_id == "NL01BANK0123456789"
        assert entry.account_currency == "EUR"
        assert entry.booking_amount == Decimal("20000")
        assert entry.booking_indicator is CreditDebitIndicator.CREDIT
        assert entry.balance_after_booking == Decimal("15000")
        assert entry.balance_indicator is CreditDebitIndicator.DEBIT

    def test_from_dict_malformed_amount_raises(self) -> None:
        """Test that malformed numbers propagate instead of being swallowed."""
        data = {
            "account_id": "NL01",
            "account_currency": "EUR",
            "booking_amount": "12,00",
            "booking_indicator": "CRDT",
            "balance_after_booking": "100",
            "balance_indicator": "CRDT",
        }
        with pytest.raises(InvalidOperation):
            LedgerEntry.from_dict(data)

    def test_from_dict_missing_field_raises(self) -> None:
        """Test that a missing field raises KeyError."""
        with pytest.raises(KeyError):
            LedgerEntry.from_dict({"account_id": "NL01"})

    def test_to_dict_matches_from_dict_shape(self) -> None:
        """Test that to_dict produces a record from_dict accepts."""
        entry = make_entry(booking=CreditDebitIndicator.DEBIT)

        assert LedgerEntry.from_dict(entry.to_dict()) == entry

    def test_frozen(self) -> None:
        """Test that LedgerEntry is immutable."""
        entry = make_entry()
        with pytest.raises(AttributeError):
            entry.account_id = "other"  # type: ignore[misc]

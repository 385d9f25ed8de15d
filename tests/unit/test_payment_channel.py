"""Tests for the PaymentChannel: balances and in-transaction transfers."""

from __future__ import annotations

from decimal import Decimal

import pytest

from mintmarket.core.errors import PaymentFailedError
from mintmarket.core.payment_channel import PaymentChannel
from mintmarket.core.store import MarketStore


class TestBalances:
    def test_unknown_account_has_zero(self, payments: PaymentChannel):
        assert payments.balance_of("nobody") == 0

    def test_deposit_accumulates(self, payments: PaymentChannel):
        payments.deposit("alice", 100)
        assert payments.deposit("alice", 50) == 150
        assert payments.balance_of("alice") == 150

    @pytest.mark.parametrize("amount", [0, -5])
    def test_deposit_rejects_non_positive(self, payments: PaymentChannel, amount: int):
        with pytest.raises(ValueError):
            payments.deposit("alice", amount)

    @pytest.mark.parametrize(
        "amount", [1.5, True, Decimal("2")], ids=["float", "bool", "decimal"]
    )
    def test_deposit_rejects_non_integer(self, payments: PaymentChannel, amount):
        with pytest.raises(ValueError, match="positive integer"):
            payments.deposit("alice", amount)
        assert payments.balance_of("alice") == 0

    def test_account_usable_after_rejected_deposit(self, payments: PaymentChannel):
        payments.deposit("alice", 10)
        with pytest.raises(ValueError):
            payments.deposit("alice", 1.5)
        assert payments.deposit("alice", 5) == 15

    def test_large_amounts_are_exact(self, payments: PaymentChannel):
        huge = 10**30 + 7
        payments.deposit("whale", huge)
        assert payments.balance_of("whale") == huge

    def test_open_account_is_idempotent(self, payments: PaymentChannel):
        payments.deposit("alice", 10)
        payments.open_account("alice")
        assert payments.balance_of("alice") == 10


class TestTransfer:
    def test_transfer_moves_funds(self, payments: PaymentChannel, store: MarketStore):
        payments.deposit("alice", 100)
        with store.transaction() as tx:
            payments.transfer(tx, "alice", "bob", 40)
        assert payments.balance_of("alice") == 60
        assert payments.balance_of("bob") == 40

    def test_insufficient_funds(self, payments: PaymentChannel, store: MarketStore):
        payments.deposit("alice", 10)
        with pytest.raises(PaymentFailedError, match="Insufficient funds"):
            with store.transaction() as tx:
                payments.transfer(tx, "alice", "bob", 11)
        assert payments.balance_of("alice") == 10
        assert payments.balance_of("bob") == 0

    def test_refusing_recipient(self, payments: PaymentChannel, store: MarketStore):
        payments.deposit("alice", 10)
        payments.open_account("vault", accepts_payments=False)
        with pytest.raises(PaymentFailedError, match="cannot accept payments"):
            with store.transaction() as tx:
                payments.transfer(tx, "alice", "vault", 5)
        assert payments.balance_of("alice") == 10

    def test_set_accepts_payments_toggle(self, payments: PaymentChannel,
                                         store: MarketStore):
        payments.deposit("alice", 10)
        payments.set_accepts_payments("bob", False)
        payments.set_accepts_payments("bob", True)
        with store.transaction() as tx:
            payments.transfer(tx, "alice", "bob", 10)
        assert payments.balance_of("bob") == 10

    def test_non_positive_transfer(self, payments: PaymentChannel, store: MarketStore):
        with pytest.raises(PaymentFailedError):
            with store.transaction() as tx:
                payments.transfer(tx, "alice", "bob", 0)

    def test_non_integer_transfer(self, payments: PaymentChannel, store: MarketStore):
        payments.deposit("alice", 10)
        with pytest.raises(PaymentFailedError, match="positive integer"):
            with store.transaction() as tx:
                payments.transfer(tx, "alice", "bob", 2.5)
        assert payments.balance_of("alice") == 10
        assert payments.balance_of("bob") == 0

    def test_self_transfer_keeps_balance(self, payments: PaymentChannel,
                                         store: MarketStore):
        payments.deposit("alice", 10)
        with store.transaction() as tx:
            payments.transfer(tx, "alice", "alice", 10)
        assert payments.balance_of("alice") == 10

"""Payment Channel: per-account balances and atomic value transfer.

A transfer always runs inside the transaction of the market call that
carries the payment, so the funds move if and only if that call commits.
"""

from __future__ import annotations

import logging
import sqlite3

from mintmarket.core.errors import PaymentFailedError
from mintmarket.core.store import MarketStore

logger = logging.getLogger(__name__)


class PaymentChannel:
    """Holds account balances in integer base units.

    Parameters
    ----------
    store:
        The shared market store.
    """

    def __init__(self, store: MarketStore) -> None:
        self._store = store

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def open_account(self, account: str, accepts_payments: bool = True) -> None:
        """Create *account* with a zero balance if it does not exist yet."""
        if not account:
            raise ValueError("Account reference must be non-empty.")
        with self._store.transaction() as tx:
            self._ensure_account(tx, account, accepts_payments)

    def set_accepts_payments(self, account: str, accepts_payments: bool) -> None:
        """Allow or refuse incoming payments for *account*."""
        with self._store.transaction() as tx:
            self._ensure_account(tx, account)
            tx.execute(
                "UPDATE accounts SET accepts_payments = ? WHERE account = ?",
                (int(accepts_payments), account),
            )
        logger.info(
            "Account '%s' %s incoming payments.",
            account,
            "accepts" if accepts_payments else "refuses",
        )

    def deposit(self, account: str, amount: int) -> int:
        """Credit *amount* base units to *account*; return the new balance."""
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValueError(
                f"Deposit amount must be a positive integer, got {amount!r}."
            )
        with self._store.transaction() as tx:
            self._ensure_account(tx, account)
            balance = self._balance(tx, account) + amount
            self._set_balance(tx, account, balance)
        logger.debug("Deposited %d to '%s' (balance %d).", amount, account, balance)
        return balance

    def balance_of(self, account: str, conn: sqlite3.Connection | None = None) -> int:
        """Balance of *account*; unknown accounts hold zero."""
        with self._store.read(conn) as db:
            return self._balance(db, account)

    # ------------------------------------------------------------------
    # Transfer
    # ------------------------------------------------------------------

    def transfer(
        self,
        conn: sqlite3.Connection,
        sender: str,
        recipient: str,
        amount: int,
    ) -> None:
        """Move *amount* from *sender* to *recipient* inside *conn*'s transaction.

        Raises
        ------
        PaymentFailedError
            If the amount is not positive, the sender cannot cover it, or
            the recipient refuses payments.  The caller's transaction then
            rolls back along with everything else it did.
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise PaymentFailedError(
                f"Transfer amount must be a positive integer, got {amount!r}",
                sender=sender, recipient=recipient, amount=amount,
            )

        sender_balance = self._balance(conn, sender)
        if sender_balance < amount:
            raise PaymentFailedError(
                f"Insufficient funds: '{sender}' holds {sender_balance}, "
                f"needs {amount}",
                sender=sender, recipient=recipient, amount=amount,
            )

        self._ensure_account(conn, recipient)
        accepts = conn.execute(
            "SELECT accepts_payments FROM accounts WHERE account = ?",
            (recipient,),
        ).fetchone()[0]
        if not accepts:
            raise PaymentFailedError(
                f"Account '{recipient}' cannot accept payments",
                sender=sender, recipient=recipient, amount=amount,
            )

        if recipient == sender:
            return
        self._set_balance(conn, sender, sender_balance - amount)
        self._set_balance(conn, recipient, self._balance(conn, recipient) + amount)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _ensure_account(
        conn: sqlite3.Connection, account: str, accepts_payments: bool = True
    ) -> None:
        conn.execute(
            "INSERT OR IGNORE INTO accounts (account, balance, accepts_payments) "
            "VALUES (?, '0', ?)",
            (account, int(accepts_payments)),
        )

    @staticmethod
    def _balance(conn: sqlite3.Connection, account: str) -> int:
        row = conn.execute(
            "SELECT balance FROM accounts WHERE account = ?", (account,)
        ).fetchone()
        return int(row[0]) if row else 0

    @staticmethod
    def _set_balance(conn: sqlite3.Connection, account: str, balance: int) -> None:
        conn.execute(
            "UPDATE accounts SET balance = ? WHERE account = ?",
            (str(balance), account),
        )

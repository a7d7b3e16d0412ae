"""
account.py - Per-client balance state

An Account holds the available and held funds of one client together with
the lock flag. Its five primitive operations are the only way balances change,
and each of them is all-or-nothing: when an operation raises, available and
held are exactly what they were before the call.

Lock semantics:
    deposit, withdraw, hold and release raise AccountLocked on a locked account.
    chargeback always runs and sets the lock. Nothing ever clears it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal

from .core import (
    ClientId, MonetaryValue,
    AccountLocked,
    check_client_id,
)
from .records import AccountSnapshot


@dataclass
class Account:
    """
    The state of one client's account at a given point in time.

    Attributes:
        client_id: Owner of the account (unsigned 16-bit).
        available: Funds available for trading, staking and withdrawal.
        held: Funds frozen while a dispute is open.
        locked: Set by a chargeback. A locked account accepts no further movements.
    """
    client_id: ClientId
    available: MonetaryValue = field(default_factory=MonetaryValue.zero)
    held: MonetaryValue = field(default_factory=MonetaryValue.zero)
    locked: bool = False

    def __post_init__(self):
        check_client_id(self.client_id)

    @property
    def total(self) -> Decimal:
        """Available plus held funds."""
        return self.available.as_decimal() + self.held.as_decimal()

    def deposit(self, amount: MonetaryValue) -> None:
        """Add amount to the available funds."""
        self._check_lock()
        self.available = self.available.overdrawing_add(amount)

    def withdraw(self, amount: MonetaryValue) -> None:
        """Remove amount from the available funds, raising NegativeBalance on an overdraft."""
        self._check_lock()
        self.available = self.available.overdrawing_sub(amount)

    def hold(self, amount: MonetaryValue) -> None:
        """
        Freeze amount while a dispute is being settled.

        Moves amount from available to held.

        Raises:
            AccountLocked: If the account is locked
            NegativeBalance: If less than amount is available (e.g. already withdrawn)
        """
        self._check_lock()
        available = self.available.overdrawing_sub(amount)
        held = self.held.overdrawing_add(amount)
        self.available, self.held = available, held

    def release(self, amount: MonetaryValue) -> None:
        """
        Unfreeze amount, typically when a dispute is resolved.

        Moves amount from held back to available.

        Raises:
            AccountLocked: If the account is locked
            NegativeBalance: If less than amount is held
        """
        self._check_lock()
        held = self.held.overdrawing_sub(amount)
        available = self.available.overdrawing_add(amount)
        self.available, self.held = available, held

    def chargeback(self, amount: MonetaryValue) -> None:
        """
        Remove amount from the held funds and lock the account.

        Runs regardless of the lock. The lock is set before the subtraction
        and stays set even if the subtraction raises NegativeBalance.
        """
        self.locked = True
        self.held = self.held.overdrawing_sub(amount)

    def snapshot(self) -> AccountSnapshot:
        """Return the output record for this account."""
        return AccountSnapshot.from_account(self)

    def _check_lock(self) -> None:
        if self.locked:
            raise AccountLocked(self.client_id)

    def __repr__(self) -> str:
        lock = ", locked" if self.locked else ""
        return (
            f"Account(client={self.client_id}, available={self.available}, "
            f"held={self.held}{lock})"
        )

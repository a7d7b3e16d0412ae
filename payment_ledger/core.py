"""
Core types for the payment ledger.

This module provides the foundational data structures used by the account
state machine:
1. MonetaryValue: non-negative fixed-precision money with overdraft checks
2. Identifiers: range checks for client and transaction ids
3. Transaction kinds: one frozen dataclass per kind, plus the Transaction record
4. Exceptions: LedgerError and the domain-specific error types

Nothing in this module mutates shared state. Accounts and the processor
build on these types.
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN, getcontext
from typing import Optional, Union


# ============================================================================
# DECIMAL CONTEXT CONFIGURATION
# ============================================================================
#
# Monetary arithmetic must be exact and deterministic, so the global context
# is configured once at import time.
#
#   - prec=50: far beyond any realistic balance at 4 decimal places
#   - rounding=ROUND_HALF_EVEN: banker's rounding when quantizing amounts
#
_LEDGER_DECIMAL_CONTEXT = getcontext()
_LEDGER_DECIMAL_CONTEXT.prec = 50
_LEDGER_DECIMAL_CONTEXT.rounding = ROUND_HALF_EVEN


# ============================================================================
# CONSTANTS
# ============================================================================

# Every amount is stored with exactly this many fractional digits.
MONETARY_DECIMAL_PLACES = 4
MONETARY_QUANTUM = Decimal(10) ** -MONETARY_DECIMAL_PLACES

# Client ids are unsigned 16-bit, transaction ids unsigned 32-bit.
MAX_CLIENT_ID = 2 ** 16 - 1
MAX_TRANSACTION_ID = 2 ** 32 - 1


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all payment ledger errors."""
    pass


class InvalidRecord(LedgerError):
    """Raised when a raw record cannot be turned into a valid transaction."""
    pass


class TransactionError(LedgerError):
    """Base class for failures raised by account operations."""
    pass


class NegativeBalance(TransactionError):
    """Raised when an amount or a balance would become negative."""

    def __init__(self, value: Decimal):
        self.value = value
        super().__init__(f"a monetary value cannot be negative: {value}")


class AccountLocked(TransactionError):
    """Raised when a locked account is asked to move funds."""

    def __init__(self, client_id: Optional[int] = None):
        self.client_id = client_id
        if client_id is None:
            super().__init__("account is locked")
        else:
            super().__init__(f"account {client_id} is locked")


class PaymentProcessingError(LedgerError):
    """Base class for failures raised by the payment processor."""
    pass


class TransactionFailed(PaymentProcessingError):
    """
    An account operation rejected the transaction.

    The underlying TransactionError is kept on ``error`` and chained as
    ``__cause__``.
    """

    def __init__(self, error: TransactionError):
        self.error = error
        super().__init__(f"an error occurred during the underlying transaction: {error}")


class DisputeAlreadyExists(PaymentProcessingError):
    """Raised when a transaction is disputed more than once."""

    def __init__(self, client_id: int, tx_id: int):
        self.client_id = client_id
        self.tx_id = tx_id
        super().__init__(f"multiple disputes on transaction {tx_id} of client {client_id}")


class NoDispute(PaymentProcessingError):
    """Raised when a resolve or chargeback references a transaction that is not in dispute."""

    def __init__(self, client_id: int, tx_id: int):
        self.client_id = client_id
        self.tx_id = tx_id
        super().__init__(f"transaction {tx_id} of client {client_id} is not in dispute")


# ============================================================================
# IDENTIFIERS
# ============================================================================

ClientId = int
TransactionId = int


def check_client_id(value: int) -> ClientId:
    """Return value if it fits an unsigned 16-bit client id, else raise InvalidRecord."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRecord(f"client id must be an integer, got {value!r}")
    if not 0 <= value <= MAX_CLIENT_ID:
        raise InvalidRecord(f"client id out of range: {value}")
    return value


def check_transaction_id(value: int) -> TransactionId:
    """Return value if it fits an unsigned 32-bit transaction id, else raise InvalidRecord."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRecord(f"transaction id must be an integer, got {value!r}")
    if not 0 <= value <= MAX_TRANSACTION_ID:
        raise InvalidRecord(f"transaction id out of range: {value}")
    return value


# ============================================================================
# MONETARY VALUE
# ============================================================================

@dataclass(frozen=True, slots=True, order=True)
class MonetaryValue:
    """
    A non-negative amount of money with exactly four fractional digits.

    Instances are created through from_decimal(), which rejects negative input
    and rounds half-even to MONETARY_DECIMAL_PLACES. Arithmetic goes through
    overdrawing_add() and overdrawing_sub(), which return new values and raise
    NegativeBalance instead of ever producing a negative amount.

    This class is immutable (frozen=True), ordered and hashable.
    """
    value: Decimal

    def __post_init__(self):
        if not isinstance(self.value, Decimal):
            raise ValueError(f"MonetaryValue requires a Decimal, got {type(self.value)}")
        if not self.value.is_finite():
            raise ValueError(f"MonetaryValue must be finite, got {self.value}")
        if self.value < 0:
            raise NegativeBalance(self.value)
        object.__setattr__(self, 'value', _quantize(self.value))

    @classmethod
    def from_decimal(cls, raw: Union[Decimal, int, str]) -> MonetaryValue:
        """
        Build a MonetaryValue from an untrusted amount.

        Args:
            raw: Decimal, int or numeric string

        Returns:
            The amount rounded to four decimal places

        Raises:
            NegativeBalance: If raw is below zero or a signed zero (-0)
            ValueError: If raw is not a finite number or too large to hold
                        four decimal places
        """
        if isinstance(raw, float):
            raise ValueError("MonetaryValue cannot be built from a float")
        try:
            amount = raw if isinstance(raw, Decimal) else Decimal(raw)
        except (InvalidOperation, TypeError) as exc:
            raise ValueError(f"not a decimal amount: {raw!r}") from exc
        if not amount.is_finite():
            raise ValueError(f"amount must be finite, got {amount}")
        # is_signed() also catches -0
        if amount.is_signed():
            raise NegativeBalance(amount)
        return cls(amount)

    @classmethod
    def zero(cls) -> MonetaryValue:
        return cls(Decimal(0))

    def overdrawing_add(self, rhs: MonetaryValue) -> MonetaryValue:
        """Calculate self + rhs, raising NegativeBalance on an overdraft."""
        result = self.value + rhs.value
        if result < 0:
            raise NegativeBalance(result)
        return MonetaryValue(result)

    def overdrawing_sub(self, rhs: MonetaryValue) -> MonetaryValue:
        """Calculate self - rhs, raising NegativeBalance if rhs exceeds self."""
        if self.value < rhs.value:
            raise NegativeBalance(self.value - rhs.value)
        return MonetaryValue(self.value - rhs.value)

    def as_decimal(self) -> Decimal:
        return self.value

    def is_zero(self) -> bool:
        return self.value == 0

    def __str__(self) -> str:
        return format(self.value, "f")

    def __repr__(self) -> str:
        return f"MonetaryValue({self})"


def _quantize(amount: Decimal) -> Decimal:
    try:
        quantized = amount.quantize(MONETARY_QUANTUM, rounding=ROUND_HALF_EVEN)
    except InvalidOperation:
        raise ValueError(f"amount out of range: {amount}") from None
    # abs() folds -0 into 0 so zero always prints without a sign
    return abs(quantized) if quantized == 0 else quantized


# ============================================================================
# TRANSACTIONS
# ============================================================================

@dataclass(frozen=True, slots=True)
class Deposit:
    """A credit to the client's account."""
    amount: MonetaryValue


@dataclass(frozen=True, slots=True)
class Withdrawal:
    """A debit from the client's account."""
    amount: MonetaryValue


@dataclass(frozen=True, slots=True)
class Dispute:
    """A claim that an earlier deposit was erroneous and should be reversed."""
    pass


@dataclass(frozen=True, slots=True)
class Resolve:
    """Settles a dispute by releasing the held funds."""
    pass


@dataclass(frozen=True, slots=True)
class Chargeback:
    """Settles a dispute by reversing the deposit and locking the account."""
    pass


TransactionKind = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]

_KIND_NAMES = {
    Deposit: "deposit",
    Withdrawal: "withdrawal",
    Dispute: "dispute",
    Resolve: "resolve",
    Chargeback: "chargeback",
}


@dataclass(frozen=True, slots=True)
class Transaction:
    """
    An identified event applied to one client's account.

    Deposit and Withdrawal kinds carry an amount. Dispute, Resolve and
    Chargeback reference an earlier deposit through ``id`` and carry none.

    Attributes:
        id: Transaction id (unsigned 32-bit). Only unique within a client's history.
        kind: One of the five transaction kind dataclasses.
    """
    id: TransactionId
    kind: TransactionKind

    def __post_init__(self):
        check_transaction_id(self.id)
        if type(self.kind) not in _KIND_NAMES:
            raise ValueError(f"unknown transaction kind: {self.kind!r}")

    @property
    def amount(self) -> Optional[MonetaryValue]:
        if isinstance(self.kind, (Deposit, Withdrawal)):
            return self.kind.amount
        return None

    @property
    def kind_name(self) -> str:
        return _KIND_NAMES[type(self.kind)]

    def __repr__(self) -> str:
        if self.amount is None:
            return f"Transaction({self.kind_name} #{self.id})"
        return f"Transaction({self.kind_name} #{self.id}: {self.amount})"

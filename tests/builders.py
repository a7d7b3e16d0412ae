"""
builders.py - Test helpers for building transactions and records

Short constructors so tests read like the transaction log they describe:

    processor.process(1, deposit(1, "1.0"))
    processor.process(1, dispute(1))
"""

from __future__ import annotations
from decimal import Decimal
from typing import Optional, Tuple, Union
import io

from payment_ledger import (
    MonetaryValue, PaymentProcessor, Transaction,
    Deposit, Withdrawal, Dispute, Resolve, Chargeback,
    TransactionRecord, TransactionType,
)


def money(amount: Union[str, int, Decimal]) -> MonetaryValue:
    return MonetaryValue.from_decimal(Decimal(str(amount)))


def deposit(tx_id: int, amount: Union[str, int, Decimal]) -> Transaction:
    return Transaction(tx_id, Deposit(money(amount)))


def withdrawal(tx_id: int, amount: Union[str, int, Decimal]) -> Transaction:
    return Transaction(tx_id, Withdrawal(money(amount)))


def dispute(tx_id: int) -> Transaction:
    return Transaction(tx_id, Dispute())


def resolve(tx_id: int) -> Transaction:
    return Transaction(tx_id, Resolve())


def chargeback(tx_id: int) -> Transaction:
    return Transaction(tx_id, Chargeback())


def record(kind: str, client: int, tx: int, amount: Optional[str] = None) -> TransactionRecord:
    return TransactionRecord(
        type=TransactionType(kind),
        client=client,
        tx=tx,
        amount=None if amount is None else Decimal(amount),
    )


def csv_stream(text: str) -> io.StringIO:
    """Wrap dedented CSV text in a stream, dropping blank leading lines."""
    lines = [line.strip() for line in text.strip().splitlines()]
    return io.StringIO("\n".join(lines) + "\n")


def balances(processor: PaymentProcessor, client_id: int) -> Tuple[Decimal, Decimal, bool]:
    """Return (available, held, locked) of a client's account."""
    account = processor.get_account(client_id)
    assert account is not None, f"client {client_id} has no account"
    return account.available.as_decimal(), account.held.as_decimal(), account.locked

"""
records.py - External record formats

The ledger reads a tabular stream of transaction records and writes one
snapshot row per account:

    input:  type,client,tx,amount
    output: client,available,held,total,locked

This module owns the conversion between those rows and the ledger's types:
1. parse_row() turns trimmed text fields into a TransactionRecord
2. to_transaction() validates a TransactionRecord into a Transaction
3. read_records() / write_snapshots() stream CSV in and out

Malformed rows are reported through logging and skipped. They never stop a run.
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Iterable, Iterator, List, Mapping, Optional, TextIO, TYPE_CHECKING
import csv
import logging

from .core import (
    ClientId, TransactionId, MonetaryValue, Transaction,
    Deposit, Withdrawal, Dispute, Resolve, Chargeback,
    InvalidRecord, NegativeBalance,
    check_client_id, check_transaction_id,
)

if TYPE_CHECKING:
    from .account import Account

logger = logging.getLogger(__name__)


INPUT_FIELDS = ("type", "client", "tx", "amount")
OUTPUT_FIELDS = ("client", "available", "held", "total", "locked")
REQUIRED_INPUT_FIELDS = ("type", "client", "tx")


class TransactionType(Enum):
    """Textual tag of an input record."""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @classmethod
    def parse(cls, text: str) -> TransactionType:
        """Parse a tag case-insensitively, ignoring surrounding whitespace."""
        try:
            return cls(text.strip().lower())
        except ValueError:
            raise InvalidRecord(f"unknown transaction type: {text!r}") from None


@dataclass(frozen=True, slots=True)
class TransactionRecord:
    """
    One raw input row with typed fields but no business validation.

    The amount may be missing, negative or present on a record kind that
    ignores it. to_transaction() decides what is acceptable.
    """
    type: TransactionType
    client: ClientId
    tx: TransactionId
    amount: Optional[Decimal] = None

    def as_row(self) -> List[str]:
        amount = "" if self.amount is None else format(self.amount, "f")
        return [self.type.value, str(self.client), str(self.tx), amount]


@dataclass(frozen=True, slots=True)
class AccountSnapshot:
    """
    Final state of one account as written to the output.

    ``total`` is always available + held.
    """
    client: ClientId
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool

    @classmethod
    def from_account(cls, account: Account) -> AccountSnapshot:
        available = account.available.as_decimal()
        held = account.held.as_decimal()
        return cls(
            client=account.client_id,
            available=available,
            held=held,
            total=available + held,
            locked=account.locked,
        )

    def as_row(self) -> List[str]:
        return [
            str(self.client),
            format(self.available, "f"),
            format(self.held, "f"),
            format(self.total, "f"),
            "true" if self.locked else "false",
        ]


# ============================================================================
# PARSING AND VALIDATION
# ============================================================================

def _parse_int(name: str, text: Optional[str]) -> int:
    if text is None or not text.strip():
        raise InvalidRecord(f"missing {name} field")
    digits = text.strip()
    # plain ASCII digits only: no sign, no underscores, no other scripts
    if not (digits.isascii() and digits.isdigit()):
        raise InvalidRecord(f"{name} is not an integer: {text!r}")
    return int(digits)


def _parse_amount(text: Optional[str]) -> Optional[Decimal]:
    if text is None or not text.strip():
        return None
    try:
        amount = Decimal(text.strip())
    except InvalidOperation:
        raise InvalidRecord(f"amount is not a decimal: {text!r}") from None
    if not amount.is_finite():
        raise InvalidRecord(f"amount must be finite, got {text!r}")
    return amount


def parse_row(row: Mapping[str, Optional[str]]) -> TransactionRecord:
    """
    Build a TransactionRecord from a mapping of field name to text.

    Whitespace around every field is ignored and an empty amount counts as
    missing.

    Raises:
        InvalidRecord: If a field is missing, unparsable or out of range
    """
    type_text = row.get("type")
    if type_text is None:
        raise InvalidRecord("missing type field")
    return TransactionRecord(
        type=TransactionType.parse(type_text),
        client=check_client_id(_parse_int("client", row.get("client"))),
        tx=check_transaction_id(_parse_int("tx", row.get("tx"))),
        amount=_parse_amount(row.get("amount")),
    )


def to_transaction(record: TransactionRecord) -> Transaction:
    """
    Validate a raw record into a Transaction.

    Deposits and withdrawals need a non-negative amount. The other kinds
    reference an earlier transaction and ignore any amount they carry.

    Raises:
        InvalidRecord: If the amount is missing, negative or out of range
    """
    if record.type in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL):
        if record.amount is None:
            raise InvalidRecord(f"a {record.type.value} transaction should contain an amount")
        try:
            amount = MonetaryValue.from_decimal(record.amount)
        except (NegativeBalance, ValueError) as exc:
            raise InvalidRecord(
                f"unable to convert {record.type.value} amount to a monetary value: {exc}"
            ) from exc
        if record.type is TransactionType.DEPOSIT:
            return Transaction(record.tx, Deposit(amount))
        return Transaction(record.tx, Withdrawal(amount))

    if record.type is TransactionType.DISPUTE:
        return Transaction(record.tx, Dispute())
    if record.type is TransactionType.RESOLVE:
        return Transaction(record.tx, Resolve())
    return Transaction(record.tx, Chargeback())


# ============================================================================
# CSV STREAMS
# ============================================================================

def read_records(stream: TextIO) -> Iterator[TransactionRecord]:
    """
    Yield TransactionRecords from a CSV stream with a header row.

    Columns may come in any order and header names are matched after
    trimming and lower-casing. Rows that fail to parse, including rows the
    CSV reader itself rejects (e.g. an oversized field), are logged and skipped.

    Raises:
        InvalidRecord: If the header is unreadable or lacks one of the type,
                       client or tx columns
    """
    reader = csv.reader(stream)
    try:
        header = next(reader, None)
    except csv.Error as exc:
        raise InvalidRecord(f"unreadable input header: {exc}") from exc
    if header is None:
        return
    names = [name.strip().lower() for name in header]
    missing = [name for name in REQUIRED_INPUT_FIELDS if name not in names]
    if missing:
        raise InvalidRecord(f"input header is missing columns: {', '.join(missing)}")

    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as exc:
            # the reader drops the offending line and resumes on the next one
            logger.warning("skipping line %d: %s", reader.line_num, exc)
            continue

        if not any(field.strip() for field in row):
            continue
        try:
            yield parse_row(dict(zip(names, row)))
        except InvalidRecord as exc:
            logger.warning("skipping line %d: %s", reader.line_num, exc)


def write_records(records: Iterable[TransactionRecord], stream: TextIO) -> int:
    """Write records in the input layout. Returns the number of rows written."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(INPUT_FIELDS)
    count = 0
    for record in records:
        writer.writerow(record.as_row())
        count += 1
    return count


def write_snapshots(snapshots: Iterable[AccountSnapshot], stream: TextIO) -> int:
    """Write account snapshots in the output layout. Returns the number of rows written."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_FIELDS)
    count = 0
    for snapshot in snapshots:
        writer.writerow(snapshot.as_row())
        count += 1
    return count

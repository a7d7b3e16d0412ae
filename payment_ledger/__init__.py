"""
payment_ledger - Client account ledger with dispute handling

Derives, per client, the available funds, held funds and lock status from a
sequential log of deposits, withdrawals, disputes, resolves and chargebacks.

Usage:
    from payment_ledger import (
        PaymentProcessor, Transaction, Deposit, Dispute, Resolve, MonetaryValue,
    )

    processor = PaymentProcessor()
    processor.process(1, Transaction(1, Deposit(MonetaryValue.from_decimal("1.0"))))
    processor.process(1, Transaction(1, Dispute()))
    processor.process(1, Transaction(1, Resolve()))

    for account in processor.accounts():
        print(account.snapshot())

    # Or run a whole CSV stream, skipping bad records
    with open("transactions.csv", newline="") as stream:
        summary = process_records(read_records(stream))
"""

# Core types
from .core import (
    MonetaryValue,
    Transaction,
    TransactionKind,
    Deposit,
    Withdrawal,
    Dispute,
    Resolve,
    Chargeback,
    ClientId,
    TransactionId,
    check_client_id,
    check_transaction_id,
    LedgerError,
    InvalidRecord,
    TransactionError,
    NegativeBalance,
    AccountLocked,
    PaymentProcessingError,
    TransactionFailed,
    DisputeAlreadyExists,
    NoDispute,
    MONETARY_DECIMAL_PLACES,
    MAX_CLIENT_ID,
    MAX_TRANSACTION_ID,
)

# Accounts
from .account import Account

# Processor
from .processor import (
    PaymentProcessor,
    AccountLog,
    ProcessResult,
    DisputeStatus,
    RunSummary,
    process_records,
)

# Records
from .records import (
    TransactionType,
    TransactionRecord,
    AccountSnapshot,
    parse_row,
    to_transaction,
    read_records,
    write_records,
    write_snapshots,
)

# Generator
from .generator import generate_rows

__all__ = [
    # Core
    'MonetaryValue', 'Transaction', 'TransactionKind',
    'Deposit', 'Withdrawal', 'Dispute', 'Resolve', 'Chargeback',
    'ClientId', 'TransactionId', 'check_client_id', 'check_transaction_id',
    'MONETARY_DECIMAL_PLACES', 'MAX_CLIENT_ID', 'MAX_TRANSACTION_ID',
    # Exceptions
    'LedgerError', 'InvalidRecord', 'TransactionError', 'NegativeBalance',
    'AccountLocked', 'PaymentProcessingError', 'TransactionFailed',
    'DisputeAlreadyExists', 'NoDispute',
    # Accounts
    'Account',
    # Processor
    'PaymentProcessor', 'AccountLog', 'ProcessResult', 'DisputeStatus',
    'RunSummary', 'process_records',
    # Records
    'TransactionType', 'TransactionRecord', 'AccountSnapshot',
    'parse_row', 'to_transaction', 'read_records', 'write_records', 'write_snapshots',
    # Generator
    'generate_rows',
]

__version__ = '1.0.0'

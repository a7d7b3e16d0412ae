"""
processor.py - Payment processing state machine

The PaymentProcessor is the only component that mutates accounts. It keeps
one AccountLog per client, created the first time the client appears, and
applies transactions strictly in input order.

Key responsibilities:
    - Routes each transaction kind to the matching Account operation
    - Keeps an append-only history of applied transactions per client
    - Tracks the dispute lifecycle (dispute -> resolve | chargeback) per deposit
    - Wraps account failures in TransactionFailed; nothing is rolled back or retried

Clients are fully isolated: transaction ids only need to be unique within one
client's history, and no rule ever looks at another client's log.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional

import logging

from .account import Account
from .core import (
    ClientId, TransactionId, MonetaryValue, Transaction,
    Deposit, Withdrawal, Dispute, Resolve, Chargeback,
    LedgerError, TransactionError, TransactionFailed,
    DisputeAlreadyExists, NoDispute, InvalidRecord,
    check_client_id,
)
from .records import TransactionRecord, to_transaction
from .utils import timing

logger = logging.getLogger(__name__)


class ProcessResult(Enum):
    """
    Outcome of a successful process() call.

    APPLIED: The transaction changed the account and was appended to history.
    IGNORED: A dispute, resolve or chargeback whose target is not a known
             deposit. Nothing changed and nothing was recorded.
    """
    APPLIED = "applied"
    IGNORED = "ignored"


class DisputeStatus(Enum):
    """Where a disputed deposit stands in its lifecycle."""
    OPEN = "open"
    RESOLVED = "resolved"
    CHARGED_BACK = "charged_back"


class AccountLog:
    """
    One client's account together with the transactions applied to it.

    The history is append-only. The deposit and dispute indexes are derived
    from it and only exist to avoid scanning the history on every lookup.
    """

    def __init__(self, client_id: ClientId):
        self.state = Account(client_id)
        self.history: List[Transaction] = []
        # first deposit recorded under each id
        self._deposits: Dict[TransactionId, MonetaryValue] = {}
        self._disputes: Dict[TransactionId, DisputeStatus] = {}

    @property
    def client_id(self) -> ClientId:
        return self.state.client_id

    def find_deposit(self, tx_id: TransactionId) -> Optional[MonetaryValue]:
        """Amount of the first deposit recorded under tx_id, or None."""
        return self._deposits.get(tx_id)

    def dispute_status(self, tx_id: TransactionId) -> Optional[DisputeStatus]:
        """Lifecycle status of tx_id, or None if it was never disputed."""
        return self._disputes.get(tx_id)

    def append(self, transaction: Transaction) -> None:
        """Record an applied transaction and update the indexes."""
        self.history.append(transaction)
        kind = transaction.kind
        if isinstance(kind, Deposit):
            self._deposits.setdefault(transaction.id, kind.amount)
        elif isinstance(kind, Dispute):
            self._disputes[transaction.id] = DisputeStatus.OPEN
        elif isinstance(kind, Resolve):
            self._disputes[transaction.id] = DisputeStatus.RESOLVED
        elif isinstance(kind, Chargeback):
            self._disputes[transaction.id] = DisputeStatus.CHARGED_BACK

    def __len__(self) -> int:
        return len(self.history)

    def __repr__(self) -> str:
        return f"AccountLog({self.state!r}, {len(self.history)} transactions)"


class PaymentProcessor:
    """
    A state machine that takes client transactions and incrementally builds
    accounts from the transaction history.

    Thread Safety:
        Not thread-safe. The processor is meant to be the single writer of a
        run; parallel runs should shard clients across separate processors.

    Example:
        processor = PaymentProcessor()
        processor.process(1, Transaction(1, Deposit(MonetaryValue.from_decimal("1.0"))))
        processor.process(1, Transaction(1, Dispute()))
        for account in processor.accounts():
            print(account)
    """

    def __init__(self):
        self._logs: Dict[ClientId, AccountLog] = {}

    # ========================================================================
    # READ ACCESS
    # ========================================================================

    def account_log(self, client_id: ClientId) -> Optional[AccountLog]:
        """Return the log of a client, or None if the client was never seen."""
        return self._logs.get(client_id)

    def get_account(self, client_id: ClientId) -> Optional[Account]:
        """Return the current account of a client, or None if the client was never seen."""
        log = self._logs.get(client_id)
        return log.state if log is not None else None

    def clients(self) -> List[ClientId]:
        return list(self._logs)

    def __len__(self) -> int:
        return len(self._logs)

    def __contains__(self, client_id: object) -> bool:
        return client_id in self._logs

    # ========================================================================
    # PROCESSING (Mutating)
    # ========================================================================

    def process(self, client_id: ClientId, transaction: Transaction) -> ProcessResult:
        """
        Apply a transaction to the client's account.

        The client's account is created on first use. A transaction that
        raises is not recorded, and the account keeps every operation that
        succeeded before it.

        Args:
            client_id: Client the transaction belongs to
            transaction: Validated transaction

        Returns:
            ProcessResult.APPLIED if the account changed and the transaction was recorded
            ProcessResult.IGNORED if a lifecycle transaction does not target a known deposit

        Raises:
            TransactionFailed: If the account rejected the operation
                               (NegativeBalance or AccountLocked as ``error``)
            DisputeAlreadyExists: If the referenced transaction was already disputed
            NoDispute: If a resolve or chargeback finds no open dispute
        """
        log = self._logs.get(client_id)
        if log is None:
            log = AccountLog(check_client_id(client_id))
            self._logs[client_id] = log

        kind = transaction.kind
        if isinstance(kind, Deposit):
            self._apply(log, transaction, log.state.deposit, kind.amount)
            return ProcessResult.APPLIED

        if isinstance(kind, Withdrawal):
            self._apply(log, transaction, log.state.withdraw, kind.amount)
            return ProcessResult.APPLIED

        if isinstance(kind, Dispute):
            if log.dispute_status(transaction.id) is not None:
                raise DisputeAlreadyExists(client_id, transaction.id)
            disputed = log.find_deposit(transaction.id)
            if disputed is None:
                return self._ignore(log, transaction)
            self._apply(log, transaction, log.state.hold, disputed)
            return ProcessResult.APPLIED

        # Resolve and Chargeback both settle an open dispute
        if log.dispute_status(transaction.id) is not DisputeStatus.OPEN:
            raise NoDispute(client_id, transaction.id)
        disputed = log.find_deposit(transaction.id)
        if disputed is None:
            return self._ignore(log, transaction)
        if isinstance(kind, Resolve):
            self._apply(log, transaction, log.state.release, disputed)
        else:
            self._apply(log, transaction, log.state.chargeback, disputed)
        return ProcessResult.APPLIED

    @staticmethod
    def _apply(log: AccountLog, transaction: Transaction, operation, amount: MonetaryValue) -> None:
        try:
            operation(amount)
        except TransactionError as exc:
            raise TransactionFailed(exc) from exc
        log.append(transaction)

    @staticmethod
    def _ignore(log: AccountLog, transaction: Transaction) -> ProcessResult:
        logger.debug(
            "client %d: %s does not reference a deposit, ignoring",
            log.client_id, transaction,
        )
        return ProcessResult.IGNORED

    # ========================================================================
    # TERMINATION
    # ========================================================================

    def accounts(self) -> Iterator[Account]:
        """
        Drain the processor, returning an iterator over the final state of
        every known account.

        The processor is emptied by the call itself, before iteration starts,
        so transactions processed afterwards never reach the drained accounts.
        No ordering across clients is guaranteed.
        """
        logs, self._logs = self._logs, {}
        return (log.state for log in logs.values())


# ============================================================================
# WHOLE RUNS
# ============================================================================

@dataclass
class RunSummary:
    """
    Counters for one run over a record stream.

    Attributes:
        processor: The processor holding the resulting accounts.
        applied: Transactions applied and recorded.
        ignored: Lifecycle transactions that targeted no known deposit.
        rejected: Transactions refused by the processor.
        invalid: Records that failed validation.
    """
    processor: PaymentProcessor = field(default_factory=PaymentProcessor)
    applied: int = 0
    ignored: int = 0
    rejected: int = 0
    invalid: int = 0

    @property
    def total(self) -> int:
        return self.applied + self.ignored + self.rejected + self.invalid


@timing
def process_records(
    records: Iterable[TransactionRecord],
    processor: Optional[PaymentProcessor] = None,
) -> RunSummary:
    """
    Validate and process every record of a stream, in order.

    No single failure stops the run: invalid records and rejected
    transactions are logged, counted and skipped.

    Args:
        records: Raw transaction records
        processor: Processor to feed (a new one is created if omitted)

    Returns:
        RunSummary with the counters and the processor
    """
    summary = RunSummary(processor=processor if processor is not None else PaymentProcessor())
    for record in records:
        try:
            transaction = to_transaction(record)
        except InvalidRecord as exc:
            summary.invalid += 1
            logger.warning("client %d, tx %d: invalid %s record: %s",
                           record.client, record.tx, record.type.value, exc)
            continue

        try:
            result = summary.processor.process(record.client, transaction)
        except LedgerError as exc:
            summary.rejected += 1
            logger.warning("client %d, tx %d: failed to apply %s: %s",
                           record.client, record.tx, transaction.kind_name, exc)
            continue

        if result is ProcessResult.APPLIED:
            summary.applied += 1
        else:
            summary.ignored += 1

    logger.info(
        "processed %d records: %d applied, %d ignored, %d rejected, %d invalid",
        summary.total, summary.applied, summary.ignored, summary.rejected, summary.invalid,
    )
    return summary

"""
generator.py - Random transaction history generator

Produces chaos input for load testing and robustness checks. Data
correctness is not guaranteed: amounts may be negative, withdrawals may
overdraw and lifecycle records may reference transactions that never
existed. The processor must survive all of it.

Disputes pick an earlier deposit of the same client, resolves and
chargebacks pick an earlier dispute, falling back to id 0 when there is
nothing to reference.
"""

from __future__ import annotations
from decimal import Decimal
from typing import Dict, Iterator, List, Optional
import random

from .core import MAX_CLIENT_ID, MAX_TRANSACTION_ID, MONETARY_QUANTUM
from .records import TransactionRecord, TransactionType

DEFAULT_ROWS = 1_000_000
DEFAULT_CLIENTS = MAX_CLIENT_ID

# Raw amounts are drawn with one more fractional digit than the ledger keeps.
_AMOUNT_SCALE = Decimal("0.00001")
_AMOUNT_BOUND = 10 ** 12


def _random_amount(rng: random.Random) -> Decimal:
    raw = rng.randint(-_AMOUNT_BOUND, _AMOUNT_BOUND) * _AMOUNT_SCALE
    return raw.quantize(MONETARY_QUANTUM)


def _pick(rng: random.Random, candidates: List[int]) -> int:
    return rng.choice(candidates) if candidates else 0


def generate_client_rows(
    client_id: int,
    count: int,
    rng: random.Random,
) -> Iterator[TransactionRecord]:
    """Generate count records for one client, each able to reference the ones before it."""
    history: Dict[TransactionType, List[int]] = {kind: [] for kind in TransactionType}
    kinds = list(TransactionType)

    for _ in range(count):
        kind = rng.choice(kinds)
        if kind in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL):
            record = TransactionRecord(
                type=kind,
                client=client_id,
                tx=rng.randint(0, MAX_TRANSACTION_ID),
                amount=_random_amount(rng),
            )
        elif kind is TransactionType.DISPUTE:
            record = TransactionRecord(kind, client_id, _pick(rng, history[TransactionType.DEPOSIT]))
        else:
            record = TransactionRecord(kind, client_id, _pick(rng, history[TransactionType.DISPUTE]))
        history[kind].append(record.tx)
        yield record


def generate_rows(
    rows: int = DEFAULT_ROWS,
    clients: int = DEFAULT_CLIENTS,
    seed: Optional[int] = None,
) -> Iterator[TransactionRecord]:
    """
    Generate a random transaction history.

    Rows are spread as evenly as possible over client ids 0..clients-1 and
    emitted client by client.

    Args:
        rows: Total number of records
        clients: Number of distinct clients (1..65536)
        seed: Seed for a reproducible history

    Returns:
        Iterator of TransactionRecords
    """
    if rows < 0:
        raise ValueError(f"rows must be non-negative, got {rows}")
    if not 1 <= clients <= MAX_CLIENT_ID + 1:
        raise ValueError(f"clients must be between 1 and {MAX_CLIENT_ID + 1}, got {clients}")

    return _generate(rows, clients, random.Random(seed))


def _generate(rows: int, clients: int, rng: random.Random) -> Iterator[TransactionRecord]:
    per_client, extra = divmod(rows, clients)
    for client_id in range(clients):
        count = per_client + (1 if client_id < extra else 0)
        if count == 0:
            break
        yield from generate_client_rows(client_id, count, rng)

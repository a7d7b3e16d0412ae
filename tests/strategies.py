"""
strategies.py - Hypothesis strategies for transaction histories

Small id spaces on purpose: with only a handful of clients and transaction
ids, generated lifecycle records hit real deposits often enough to exercise
holds, releases and chargebacks rather than only the no-op paths.
"""

from decimal import Decimal

from hypothesis import strategies as st

from payment_ledger import (
    MonetaryValue, Transaction, TransactionRecord, TransactionType,
    Deposit, Withdrawal, Dispute, Resolve, Chargeback,
    MAX_CLIENT_ID, MAX_TRANSACTION_ID,
)

CLIENTS = st.integers(min_value=1, max_value=3)
TX_IDS = st.integers(min_value=1, max_value=6)


@st.composite
def amounts(draw, max_value=Decimal("100")):
    """A MonetaryValue between 0 and max_value with four decimal places."""
    value = draw(st.decimals(
        min_value=Decimal("0"),
        max_value=max_value,
        places=4,
        allow_nan=False,
        allow_infinity=False,
    ))
    return MonetaryValue.from_decimal(value)


@st.composite
def transactions(draw):
    """Any validated transaction over a small id space."""
    tx_id = draw(TX_IDS)
    kind = draw(st.sampled_from(["deposit", "withdrawal", "dispute", "resolve", "chargeback"]))
    if kind == "deposit":
        return Transaction(tx_id, Deposit(draw(amounts())))
    if kind == "withdrawal":
        return Transaction(tx_id, Withdrawal(draw(amounts())))
    if kind == "dispute":
        return Transaction(tx_id, Dispute())
    if kind == "resolve":
        return Transaction(tx_id, Resolve())
    return Transaction(tx_id, Chargeback())


def histories(min_size=1, max_size=60):
    """Lists of (client_id, transaction) pairs."""
    return st.lists(st.tuples(CLIENTS, transactions()), min_size=min_size, max_size=max_size)


@st.composite
def raw_records(draw):
    """Unvalidated records over the full id ranges, with negative and missing amounts."""
    amount = draw(st.one_of(
        st.none(),
        st.decimals(
            min_value=Decimal("-1000"),
            max_value=Decimal("1000"),
            places=6,
            allow_nan=False,
            allow_infinity=False,
        ),
    ))
    return TransactionRecord(
        type=draw(st.sampled_from(list(TransactionType))),
        client=draw(st.one_of(CLIENTS, st.integers(min_value=0, max_value=MAX_CLIENT_ID))),
        tx=draw(st.one_of(TX_IDS, st.integers(min_value=0, max_value=MAX_TRANSACTION_ID))),
        amount=amount,
    )

"""
test_generator.py - Unit tests for the random history generator
"""

import pytest
from collections import Counter

from payment_ledger import TransactionType, generate_rows, process_records
from payment_ledger.core import MAX_TRANSACTION_ID, MONETARY_QUANTUM


class TestGenerateRows:

    def test_row_count(self):
        assert len(list(generate_rows(rows=250, clients=7, seed=1))) == 250

    def test_rows_spread_over_clients(self):
        counts = Counter(r.client for r in generate_rows(rows=10, clients=4, seed=1))
        assert counts == {0: 3, 1: 3, 2: 2, 3: 2}

    def test_fewer_rows_than_clients(self):
        clients = {r.client for r in generate_rows(rows=3, clients=100, seed=1)}
        assert clients == {0, 1, 2}

    def test_seed_is_reproducible(self):
        first = list(generate_rows(rows=100, clients=3, seed=42))
        second = list(generate_rows(rows=100, clients=3, seed=42))
        assert first == second

    def test_rows_emitted_client_by_client(self):
        clients = [r.client for r in generate_rows(rows=60, clients=3, seed=5)]
        assert clients == sorted(clients)

    def test_amounts_only_on_deposits_and_withdrawals(self):
        for r in generate_rows(rows=500, clients=5, seed=3):
            if r.type in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL):
                assert r.amount is not None
                assert r.amount == r.amount.quantize(MONETARY_QUANTUM)
                assert 0 <= r.tx <= MAX_TRANSACTION_ID
            else:
                assert r.amount is None

    def test_lifecycle_rows_reference_earlier_rows(self):
        rows = list(generate_rows(rows=2000, clients=4, seed=11))
        seen = {}
        for r in rows:
            client_seen = seen.setdefault(r.client, {kind: {0} for kind in TransactionType})
            if r.type is TransactionType.DISPUTE:
                assert r.tx in client_seen[TransactionType.DEPOSIT]
            elif r.type in (TransactionType.RESOLVE, TransactionType.CHARGEBACK):
                assert r.tx in client_seen[TransactionType.DISPUTE]
            client_seen[r.type].add(r.tx)

    def test_every_kind_generated(self):
        kinds = {r.type for r in generate_rows(rows=500, clients=2, seed=9)}
        assert kinds == set(TransactionType)

    def test_zero_rows(self):
        assert list(generate_rows(rows=0, clients=10)) == []

    @pytest.mark.parametrize("rows, clients", [(-1, 1), (10, 0), (10, 65537)])
    def test_invalid_arguments_rejected_eagerly(self, rows, clients):
        with pytest.raises(ValueError):
            generate_rows(rows=rows, clients=clients)

    def test_processor_survives_generated_history(self):
        summary = process_records(generate_rows(rows=3000, clients=10, seed=2024))
        assert summary.total == 3000
        for account in summary.processor.accounts():
            assert account.available.as_decimal() >= 0
            assert account.held.as_decimal() >= 0

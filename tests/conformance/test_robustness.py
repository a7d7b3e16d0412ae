"""
Robustness Conformance Tests

INVARIANT: No record stream can stop a run.

    ∀ stream S of records:
        process_records(S) returns
        applied + ignored + rejected + invalid = |S|

Malformed rows are dropped by read_records(), invalid records and rejected
transactions are counted by process_records(), and neither raises.
"""

import io

from hypothesis import given, settings
from hypothesis import strategies as st

from payment_ledger import (
    generate_rows, process_records, read_records, write_records, write_snapshots,
)

from tests.strategies import raw_records


class TestRobustnessProperties:
    """Property-based robustness tests."""

    @given(st.lists(raw_records(), max_size=80))
    @settings(max_examples=200)
    def test_arbitrary_records_never_raise(self, records):
        summary = process_records(records)
        assert summary.total == len(records)
        for account in summary.processor.accounts():
            assert account.available.as_decimal() >= 0
            assert account.held.as_decimal() >= 0

    @given(st.lists(raw_records(), max_size=40))
    @settings(max_examples=100)
    def test_records_survive_csv_round_trip(self, records):
        stream = io.StringIO()
        write_records(records, stream)
        stream.seek(0)
        summary = process_records(read_records(stream))
        assert summary.total == len(records)

    @given(st.integers(min_value=0, max_value=500),
           st.integers(min_value=1, max_value=20),
           st.integers(min_value=0, max_value=2**32))
    @settings(max_examples=50, deadline=None)
    def test_generated_histories_never_raise(self, rows, clients, seed):
        summary = process_records(generate_rows(rows=rows, clients=clients, seed=seed))
        assert summary.total == rows

        out = io.StringIO()
        written = write_snapshots((a.snapshot() for a in summary.processor.accounts()), out)
        assert written <= min(rows, clients)

    @given(st.lists(
        st.text(alphabet=st.characters(blacklist_categories=("Cs", "Cc")), max_size=40),
        max_size=10,
    ))
    @settings(max_examples=200)
    def test_garbage_rows_are_skipped(self, lines):
        stream = io.StringIO("type,client,tx,amount\n" + "\n".join(lines) + "\n")
        summary = process_records(read_records(stream))
        assert summary.total <= len(lines)

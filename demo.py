#!/usr/bin/env python3
"""
demo.py - Interactive Tutorial: Learn the Payment Ledger Step by Step

This is a pedagogical demonstration that teaches how client accounts are
derived from a transaction log. Each step builds on the previous one.
Press Enter to advance.

WHAT YOU'LL LEARN:
  1-3:  Foundation  - The empty processor, monetary values, deposits and withdrawals
  4-7:  Disputes    - Holding funds, resolving, charging back, lifecycle errors
  8-9:  Whole Runs  - CSV in and out, a generated history at scale

Run:
    python demo.py           # Interactive mode (press Enter for each step)
    python demo.py --quick   # Run all steps without pausing
"""

from dataclasses import dataclass
from decimal import Decimal
import io
import sys
import time

from payment_ledger import (
    PaymentProcessor, MonetaryValue, Transaction,
    Deposit, Withdrawal, Dispute, Resolve, Chargeback,
    LedgerError, NegativeBalance, TransactionFailed,
    generate_rows, process_records, read_records, write_snapshots,
)


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class DemoConfig:
    """Configuration for the tutorial. Modify these to experiment."""
    client: int = 1
    first_deposit: str = "100.00"
    second_deposit: str = "25.50"
    withdrawal: str = "10.00"

    # Load test parameters (Step 9)
    load_test_rows: int = 100_000
    load_test_clients: int = 1_000
    load_test_seed: int = 7


CONFIG = DemoConfig()

QUICK_MODE = "--quick" in sys.argv


def wait_for_enter():
    """Pause for user input unless in quick mode."""
    if not QUICK_MODE:
        input("\n[Press Enter to continue...]")


def step_header(number: int, title: str, objective: str):
    """Print a step header with learning objective."""
    print(f"\n{'='*70}")
    print(f"STEP {number}: {title}")
    print(f"{'='*70}")
    print(f"\nObjective: {objective}\n")


def section_header(text: str):
    """Print a section header within a step."""
    print(f"\n--- {text} ---\n")


def show_account(processor: PaymentProcessor, client: int):
    account = processor.get_account(client)
    print(f"available={account.available}  held={account.held}  "
          f"total={account.total}  locked={account.locked}")


def money(amount: str) -> MonetaryValue:
    return MonetaryValue.from_decimal(amount)


# ============================================================================
# PHASE 1: FOUNDATION (Steps 1-3)
# ============================================================================

def step_01_empty_processor():
    """Create an empty processor."""
    step_header(1, "The Empty Processor",
        "Understand that accounts only exist once a client sends a transaction.")

    print("""
    The PaymentProcessor is the only thing that changes account balances.
    It keeps one account per client, together with the transactions that
    were applied to it. A client appears the first time it is mentioned.
    """)

    wait_for_enter()

    print(">>> processor = PaymentProcessor()")
    processor = PaymentProcessor()
    print(f"Known clients: {processor.clients()}")
    return processor


def step_02_monetary_values():
    """Monetary values are non-negative with four decimal places."""
    step_header(2, "Monetary Values",
        "Amounts are exact decimals, rounded half-even to 4 places, never negative.")

    for raw in ["1.5", "0.00005", "0.00015", "2.71828"]:
        print(f">>> MonetaryValue.from_decimal({raw!r})  ->  {MonetaryValue.from_decimal(raw)}")

    section_header("Negative amounts are rejected")
    try:
        MonetaryValue.from_decimal("-1")
    except NegativeBalance as exc:
        print(f"NegativeBalance: {exc}")

    section_header("Arithmetic never overdraws")
    try:
        money("1").overdrawing_sub(money("2"))
    except NegativeBalance as exc:
        print(f"1 - 2 -> NegativeBalance: {exc}")

    wait_for_enter()


def step_03_deposits_and_withdrawals(processor: PaymentProcessor):
    """Credit and debit the available funds."""
    step_header(3, "Deposits and Withdrawals",
        "Deposits add to available funds; withdrawals may not overdraw them.")

    client = CONFIG.client
    print(f">>> processor.process({client}, Transaction(1, Deposit({CONFIG.first_deposit})))")
    processor.process(client, Transaction(1, Deposit(money(CONFIG.first_deposit))))
    print(f">>> processor.process({client}, Transaction(2, Deposit({CONFIG.second_deposit})))")
    processor.process(client, Transaction(2, Deposit(money(CONFIG.second_deposit))))
    print(f">>> processor.process({client}, Transaction(3, Withdrawal({CONFIG.withdrawal})))")
    processor.process(client, Transaction(3, Withdrawal(money(CONFIG.withdrawal))))
    show_account(processor, client)

    section_header("A withdrawal larger than the available funds")
    try:
        processor.process(client, Transaction(4, Withdrawal(money("1000000"))))
    except TransactionFailed as exc:
        print(f"TransactionFailed: {exc}")
    show_account(processor, client)
    print(f"History length: {len(processor.account_log(client))} (the failure was not recorded)")

    wait_for_enter()


# ============================================================================
# PHASE 2: DISPUTES (Steps 4-7)
# ============================================================================

def step_04_dispute(processor: PaymentProcessor):
    """A dispute moves the deposit's amount from available to held."""
    step_header(4, "Opening a Dispute",
        "A disputed deposit is frozen: available goes down, held goes up.")

    client = CONFIG.client
    print(f">>> processor.process({client}, Transaction(2, Dispute()))")
    processor.process(client, Transaction(2, Dispute()))
    show_account(processor, client)
    print(f"Dispute status of tx 2: {processor.account_log(client).dispute_status(2).value}")

    wait_for_enter()


def step_05_resolve(processor: PaymentProcessor):
    """A resolve releases the held funds."""
    step_header(5, "Resolving a Dispute",
        "Resolving gives the held funds back; the total never changed.")

    client = CONFIG.client
    print(f">>> processor.process({client}, Transaction(2, Resolve()))")
    processor.process(client, Transaction(2, Resolve()))
    show_account(processor, client)

    wait_for_enter()


def step_06_chargeback(processor: PaymentProcessor):
    """A chargeback reverses the deposit and locks the account."""
    step_header(6, "Charging Back",
        "A chargeback removes the held funds and freezes the account for good.")

    client = CONFIG.client
    processor.process(client, Transaction(1, Dispute()))
    print(">>> (tx 1 disputed)")
    show_account(processor, client)
    print(f">>> processor.process({client}, Transaction(1, Chargeback()))")
    processor.process(client, Transaction(1, Chargeback()))
    show_account(processor, client)

    section_header("A locked account refuses movements")
    try:
        processor.process(client, Transaction(5, Deposit(money("10"))))
    except TransactionFailed as exc:
        print(f"TransactionFailed: {exc}")

    wait_for_enter()


def step_07_lifecycle_errors():
    """Each deposit walks dispute -> resolve | chargeback exactly once."""
    step_header(7, "Lifecycle Errors",
        "Out-of-order lifecycle records are refused without changing anything.")

    processor = PaymentProcessor()
    processor.process(2, Transaction(1, Deposit(money("3"))))

    attempts = [
        ("resolve before any dispute", Transaction(1, Resolve())),
        ("dispute", Transaction(1, Dispute())),
        ("second dispute", Transaction(1, Dispute())),
        ("resolve", Transaction(1, Resolve())),
        ("chargeback after resolve", Transaction(1, Chargeback())),
        ("dispute of an unknown deposit", Transaction(99, Dispute())),
    ]
    for label, transaction in attempts:
        try:
            result = processor.process(2, transaction)
            print(f"{label:32s} -> {result.value}")
        except LedgerError as exc:
            print(f"{label:32s} -> {type(exc).__name__}: {exc}")
    show_account(processor, 2)

    wait_for_enter()


# ============================================================================
# PHASE 3: WHOLE RUNS (Steps 8-9)
# ============================================================================

def step_08_csv_run():
    """Process a CSV log and write the account snapshots."""
    step_header(8, "A Whole CSV Run",
        "Bad rows are logged and skipped; every account is written out at the end.")

    text = (
        "type, client, tx, amount\n"
        "deposit, 1, 1, 1.0\n"
        "deposit, 2, 2, 2.0\n"
        "deposit, 1, 3, 2.0\n"
        "withdrawal, 1, 4, 1.5\n"
        "withdrawal, 2, 5, 3.0\n"
        "deposit, 3, 6, -4.0\n"
        "teleport, 3, 7, 1.0\n"
    )
    print(text)

    summary = process_records(read_records(io.StringIO(text)))
    print(f"applied={summary.applied} ignored={summary.ignored} "
          f"rejected={summary.rejected} invalid={summary.invalid}")

    section_header("Output")
    snapshots = sorted((a.snapshot() for a in summary.processor.accounts()), key=lambda s: s.client)
    write_snapshots(snapshots, sys.stdout)

    wait_for_enter()


def step_09_load_test():
    """Process a generated history and time it."""
    step_header(9, "A Generated History",
        "The random generator produces realistic lifecycle chains at any scale.")

    print(f"Generating {CONFIG.load_test_rows:,} rows over "
          f"{CONFIG.load_test_clients:,} clients (seed {CONFIG.load_test_seed})...")
    rows = generate_rows(
        rows=CONFIG.load_test_rows,
        clients=CONFIG.load_test_clients,
        seed=CONFIG.load_test_seed,
    )

    start = time.perf_counter()
    summary = process_records(rows)
    elapsed = time.perf_counter() - start

    locked = 0
    held = Decimal(0)
    for account in summary.processor.accounts():
        locked += account.locked
        held += account.held.as_decimal()

    print(f"Processed {summary.total:,} records in {elapsed:.2f}s "
          f"({summary.total / max(elapsed, 1e-9):,.0f} records/s)")
    print(f"applied={summary.applied:,} ignored={summary.ignored:,} "
          f"rejected={summary.rejected:,} invalid={summary.invalid:,}")
    print(f"Locked accounts: {locked:,}   Funds still held: {held}")


def main():
    print("""
    ======================================================================
                     PAYMENT LEDGER: INTERACTIVE TUTORIAL
    ======================================================================
    """)

    processor = step_01_empty_processor()
    step_02_monetary_values()
    step_03_deposits_and_withdrawals(processor)
    step_04_dispute(processor)
    step_05_resolve(processor)
    step_06_chargeback(processor)
    step_07_lifecycle_errors()
    step_08_csv_run()
    step_09_load_test()

    print("""
    ======================================================================
                              TUTORIAL COMPLETE
    ======================================================================

    Next steps:
      - Run a file: payment-ledger process transactions.csv > accounts.csv
      - Generate one: payment-ledger generate --rows 1000000 -o transactions.csv
      - Run tests: pytest tests/
    """)


if __name__ == "__main__":
    main()

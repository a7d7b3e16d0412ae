"""
cli.py - Command-line entry point

    payment-ledger process transactions.csv > accounts.csv
    payment-ledger generate --rows 100000 --seed 7 -o transactions.csv

Account snapshots go to stdout and diagnostics go to stderr through logging.
"""

from __future__ import annotations
from typing import List, Optional
import argparse
import logging
import sys

from .core import LedgerError
from .generator import DEFAULT_CLIENTS, DEFAULT_ROWS, generate_rows
from .processor import process_records
from .records import read_records, write_records, write_snapshots

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="payment-ledger",
        description="Derive client account balances from a transaction log.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="report rejected records, run summary and timings on stderr",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    process = commands.add_parser("process", help="process a transaction CSV file")
    process.add_argument("input", help="path to the transactions CSV file")

    generate = commands.add_parser(
        "generate", help="write a random transaction history (correctness not guaranteed)",
    )
    generate.add_argument("-r", "--rows", type=int, default=DEFAULT_ROWS,
                          help=f"number of rows to generate (default: {DEFAULT_ROWS})")
    generate.add_argument("-c", "--clients", type=int, default=DEFAULT_CLIENTS,
                          help=f"number of distinct clients (default: {DEFAULT_CLIENTS})")
    generate.add_argument("-s", "--seed", type=int, default=None,
                          help="seed for a reproducible history")
    generate.add_argument("-o", "--output", default=None,
                          help="output file (default: stdout)")
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def run_process(path: str) -> int:
    try:
        # undecodable bytes become U+FFFD and fail validation row by row
        with open(path, newline="", encoding="utf-8", errors="replace") as stream:
            summary = process_records(read_records(stream))
    except OSError as exc:
        logger.error("unable to read the transactions file: %s", exc)
        return 1
    except LedgerError as exc:
        logger.error("unable to process %s: %s", path, exc)
        return 1

    write_snapshots(
        (account.snapshot() for account in summary.processor.accounts()),
        sys.stdout,
    )
    return 0


def run_generate(rows: int, clients: int, seed: Optional[int], output: Optional[str]) -> int:
    try:
        records = generate_rows(rows=rows, clients=clients, seed=seed)
        if output is None:
            count = write_records(records, sys.stdout)
        else:
            with open(output, "w", newline="") as stream:
                count = write_records(records, stream)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2
    except OSError as exc:
        logger.error("unable to write %s: %s", output, exc)
        return 1
    logger.info("generated %d rows", count)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "process":
        return run_process(args.input)
    return run_generate(args.rows, args.clients, args.seed, args.output)


if __name__ == "__main__":
    sys.exit(main())

"""
conftest.py - Shared pytest fixtures for payment ledger tests

Provides fresh and pre-funded processors and a blank account. Transaction
builders live in tests/builders.py.
"""

import pytest

from payment_ledger import Account, PaymentProcessor

from tests.builders import deposit


@pytest.fixture
def processor():
    """Processor with no accounts."""
    return PaymentProcessor()


@pytest.fixture
def funded_processor():
    """Processor where client 1 deposited 10.0 under tx 1 and 5.0 under tx 2."""
    processor = PaymentProcessor()
    processor.process(1, deposit(1, "10.0"))
    processor.process(1, deposit(2, "5.0"))
    return processor


@pytest.fixture
def account():
    """Unlocked account of client 1 with zero balances."""
    return Account(1)

"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the payment processor.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. test_balance_invariants.py - Non-negative balances, total = available + held, flow accounting
2. test_lifecycle_invariants.py - Dispute lifecycle errors, lock permanence, rejected means unchanged
3. test_robustness.py - Arbitrary and chaotic input never crashes a run

These tests use hypothesis for property-based testing.
"""

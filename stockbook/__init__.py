"""Stockbook: ledger-backed inventory tracking with stock insights."""

__version__ = "1.0.0"

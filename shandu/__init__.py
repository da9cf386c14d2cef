"""Shandu - a personal and small-business ledger with a financial advisor."""

__version__ = "0.1.0"

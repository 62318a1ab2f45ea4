"""IFFL league companion: roster ledger, trade history, interests and trade proposals."""

__version__ = "0.1.0"

"""Supplier order tracker desktop client."""

__version__ = "1.0.0"

# src/mungori/__init__.py
"""Mungori: anonymous company community board, marketplace and inbox."""

__version__ = "0.1.0"

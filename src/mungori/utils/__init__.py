# src/mungori/utils/__init__.py
"""Small pure helpers."""

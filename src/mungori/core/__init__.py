# src/mungori/core/__init__.py
"""Configuration and shared primitives."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]

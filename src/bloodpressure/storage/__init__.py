"""Health store implementations."""

from .local_store import LocalHealthStore

__all__ = ["LocalHealthStore"]

"""External entry points."""

from .shortcuts import AddReadingIntent, IntentOutcome

__all__ = ["AddReadingIntent", "IntentOutcome"]

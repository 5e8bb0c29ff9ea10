"""Services: authorization gate, reading writer and reading reader."""

from .authorization import AuthorizationGate
from .reading_reader import ReadingReader
from .reading_writer import ReadingWriter

__all__ = ["AuthorizationGate", "ReadingReader", "ReadingWriter"]

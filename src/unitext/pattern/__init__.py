"""Pattern package exports."""
from .engine import PatternEngine, Subject, get_engine
from .offsets import OffsetTranslator, bytes_to_chars

__all__ = ["PatternEngine", "Subject", "get_engine", "OffsetTranslator", "bytes_to_chars"]

"""Exceptions raised by the hilbertscope library.

Plain ``OSError`` (disk, permissions) is never wrapped: it reaches the caller
that started the I/O unchanged.
"""
from __future__ import annotations

from pathlib import Path


class HilbertscopeError(Exception):
    """Base class for every error the engine reports on purpose."""


class MissingMetadataError(HilbertscopeError):
    def __init__(self, subject_id: str):
        self.subject_id = subject_id
        super().__init__(f"No metadata for {subject_id!r}; it was never mapped or the metadata was lost.")


class EmptyCorpusError(HilbertscopeError):
    def __init__(self, message: str = "The fingerprint corpus is empty. Run train-all first!"):
        super().__init__(message)


class CorruptStoreError(HilbertscopeError):
    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class InvalidMapError(HilbertscopeError):
    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")

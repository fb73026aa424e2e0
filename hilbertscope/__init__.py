"""Byte-level fingerprinting, Hilbert-curve spatial maps and file type guessing."""

__version__ = "0.1.0"

"""
    Statistical fingerprint of a byte buffer.

    - entropy: Shannon entropy of the byte distribution, in bits (0..8)
      High: compressed / encrypted / packed. Low: padding, text, structured tables.
    - byte_distribution: 256 relative frequencies, index = byte value
    - top_transitions: the 20 most frequent adjacent byte pairs (first-order
      Markov transitions), keyed "b0b1" in hex, valued count / len(buffer)
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

import numpy as np

from .errors import CorruptStoreError

TOP_TRANSITIONS = 20
UNKNOWN_CATEGORY = "unknown"


@dataclass(frozen=True)
class Fingerprint:
    subject_id: str
    category: str
    entropy: float
    byte_distribution: tuple[float, ...]
    top_transitions: Mapping[str, float]

    def __post_init__(self):
        # read-only view so the record cannot be changed through the transition table
        object.__setattr__(self, "top_transitions", MappingProxyType(dict(self.top_transitions)))

    def __hash__(self) -> int:
        return hash((self.subject_id, self.category, self.entropy, self.byte_distribution,
                     frozenset(self.top_transitions.items())))

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_name": self.subject_id,
            "file_type": self.category,
            "entropy": self.entropy,
            "byte_freq": list(self.byte_distribution),
            "markov_top_transitions": dict(self.top_transitions),
        }

    @classmethod
    def from_dict(cls, record: Any) -> "Fingerprint":
        """Rebuild a fingerprint from its persisted JSON form."""
        try:
            byte_freq = [float(p) for p in record["byte_freq"]]
            fp = cls(
                subject_id=str(record["file_name"]),
                category=str(record["file_type"]),
                entropy=float(record["entropy"]),
                byte_distribution=tuple(byte_freq),
                top_transitions={str(k): float(v) for k, v in record["markov_top_transitions"].items()},
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise CorruptStoreError("<record>", f"malformed fingerprint record ({exc!r})") from exc
        if len(fp.byte_distribution) != 256:
            raise CorruptStoreError("<record>", f"byte_freq has {len(fp.byte_distribution)} entries, expected 256")
        return fp


def pair_key(first: int, second: int) -> str:
    return f"{first:02x}{second:02x}"


def extract_fingerprint(data: bytes, category: str, subject_id: str) -> Fingerprint:
    """
    Summarize `data` into a Fingerprint.

    Transitions are ranked by descending count; equal counts are ordered by
    ascending pair value (b0 * 256 + b1) so the table is reproducible.
    An empty buffer gives the zero fingerprint instead of dividing by zero.
    """
    buf = np.frombuffer(data, dtype=np.uint8)
    length = buf.size
    if length == 0:
        return Fingerprint(subject_id, category, 0.0, (0.0,) * 256, {})

    counts = np.bincount(buf, minlength=256)
    dist = counts / length
    p = dist[dist > 0]
    entropy = float((p * np.log2(1.0 / p)).sum())

    transitions: dict[str, float] = {}
    if length > 1:
        pairs = buf[:-1].astype(np.int64) * 256 + buf[1:]
        pair_counts = np.bincount(pairs, minlength=256 * 256)
        seen = np.flatnonzero(pair_counts)  # ascending pair value
        ranked = seen[np.argsort(-pair_counts[seen], kind="stable")][:TOP_TRANSITIONS]
        for pair in ranked:
            transitions[pair_key(int(pair) >> 8, int(pair) & 0xFF)] = int(pair_counts[pair]) / length

    return Fingerprint(
        subject_id=subject_id,
        category=category,
        entropy=entropy,
        byte_distribution=tuple(float(v) for v in dist),
        top_transitions=transitions,
    )

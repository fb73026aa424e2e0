"""Nearest-category guess for an unlabelled fingerprint.

Each corpus sample gets a distance-like score against the probe (lower is a
better match); scores are averaged per category and the best categories win.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass

import numpy as np

from .errors import EmptyCorpusError
from .fingerprint import Fingerprint


@dataclass(frozen=True)
class ScoringWeights:
    entropy: float = 5.0             # per bit of entropy difference
    shared_transition: float = 2.0   # subtracted per top transition both share
    null_byte: float = 10.0          # per unit difference in 0x00 frequency (binary vs text)


DEFAULT_WEIGHTS = ScoringWeights()


def score_sample(sample: Fingerprint, probe: Fingerprint, weights: ScoringWeights = DEFAULT_WEIGHTS) -> float:
    shared = sum(1 for key in probe.top_transitions if key in sample.top_transitions)
    null_diff = abs(sample.byte_distribution[0] - probe.byte_distribution[0])
    return (
        weights.entropy * abs(sample.entropy - probe.entropy)
        - weights.shared_transition * shared
        + weights.null_byte * null_diff
    )


def classify(probe: Fingerprint, corpus: list[Fingerprint], top: int = 3,
             weights: ScoringWeights | None = None) -> list[tuple[str, float]]:
    """
    Rank categories by their mean score against `probe`.
    Returns up to `top` (category, mean_score) pairs, best first; equal means
    are ordered by category name.
    """
    if top < 1:
        raise ValueError(f"top must be at least 1, got {top}")
    if not corpus:
        raise EmptyCorpusError()
    weights = weights or DEFAULT_WEIGHTS

    scores: dict[str, list[float]] = defaultdict(list)
    for sample in corpus:
        scores[sample.category].append(score_sample(sample, probe, weights))

    ranked = sorted(((cat, float(np.mean(vals))) for cat, vals in scores.items()),
                    key=lambda item: (item[1], item[0]))
    return ranked[:top]

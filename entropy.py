"""Expected information of a guess against the remaining candidates."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Mapping, Sequence

import numpy as np

from wordle_env import Pattern, pattern, pattern_code


class PatternCache:
    """Memo of pattern codes keyed by the exact ``(guess, target)`` pair.

    Patterns never change for a given pair, so entries are never
    invalidated; once *max_entries* are stored new pairs are computed
    without being kept.  Purely a speed-up: every caller works without one.
    """

    def __init__(self, max_entries: int = 1_000_000) -> None:
        self.max_entries = max_entries
        self._codes: dict[tuple[str, str], int] = {}
        self.hits = 0
        self.misses = 0

    def code(self, guess: str, target: str) -> int:
        key = (guess, target)
        code = self._codes.get(key)
        if code is None:
            self.misses += 1
            code = pattern_code(pattern(guess, target))
            if len(self._codes) < self.max_entries:
                self._codes[key] = code
        else:
            self.hits += 1
        return code

    def clear(self) -> None:
        self._codes.clear()
        self.hits = self.misses = 0

    def __len__(self) -> int:
        return len(self._codes)


def partition(guess: str, candidates: Iterable[str]) -> dict[Pattern, list[str]]:
    """Group candidates by the pattern *guess* would produce against them."""
    buckets: dict[Pattern, list[str]] = defaultdict(list)
    for c in candidates:
        buckets[pattern(guess, c)].append(c)
    return dict(buckets)


def entropy_bits(masses) -> float:
    """Shannon entropy (bits) of a set of non-negative bucket masses.

    Masses are renormalised and summed in sorted order, so two equal
    partitions score identically whatever order their buckets came in.
    """
    masses = np.asarray(masses, dtype=np.float64)
    masses = np.sort(masses[masses > 0])
    if masses.size <= 1:
        return 0.0
    probs = masses / masses.sum()
    return max(0.0, float(-np.sum(probs * np.log2(probs))))


def expected_information(
    guess: str,
    candidates: Sequence[str],
    weights: Mapping[str, float],
    cache: PatternCache | None = None,
) -> float:
    """Entropy of the partition *guess* induces on *candidates*.

    Each candidate contributes its probability from *weights* to the
    bucket of its pattern.  ``guess`` does not have to be a candidate.
    """
    if len(candidates) <= 1:
        return 0.0
    if cache is None:
        codes = [pattern_code(pattern(guess, c)) for c in candidates]
    else:
        codes = [cache.code(guess, c) for c in candidates]
    # sparse buckets: there are 3**L possible codes
    masses: dict[int, float] = defaultdict(float)
    for code, c in zip(codes, candidates):
        masses[code] += weights[c]
    return entropy_bits(list(masses.values()))


def remaining_uncertainty(candidates: Sequence[str], weights: Mapping[str, float]) -> float:
    """Entropy (bits) of the answer distribution over *candidates*."""
    return entropy_bits([weights[c] for c in candidates])

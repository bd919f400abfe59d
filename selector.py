"""Pick the guess that is expected to reveal the most information.

Ranking: highest expected information first, then the more probable
answer (words that can no longer be the answer weigh 0), then
alphabetical order.
"""

from __future__ import annotations

import os
from concurrent.futures import ProcessPoolExecutor
from typing import Iterable, Mapping, Sequence

from config import SolverConfig
from entropy import PatternCache, expected_information
from errors import InvalidInput


def _rank_key(weights: Mapping[str, float]):
    return lambda item: (-item[1], -weights.get(item[0], 0.0), item[0])


def score_guesses(
    guesses: Iterable[str],
    candidates: Sequence[str],
    weights: Mapping[str, float],
    cache: PatternCache | None = None,
) -> list[tuple[str, float]]:
    """Expected information of every guess, in input order."""
    return [(g, expected_information(g, candidates, weights, cache)) for g in guesses]


def rank_guesses(
    universe: Iterable[str],
    candidates: Sequence[str],
    weights: Mapping[str, float],
    top: int | None = None,
    cache: PatternCache | None = None,
) -> list[tuple[str, float]]:
    """``(word, bits)`` pairs in selection order (best first)."""
    scores = score_guesses(universe, candidates, weights, cache)
    scores.sort(key=_rank_key(weights))
    return scores if top is None else scores[:top]


def best_guess(
    universe: Iterable[str],
    candidates: Sequence[str],
    weights: Mapping[str, float],
    cache: PatternCache | None = None,
) -> str:
    universe = list(universe)
    if not universe:
        raise InvalidInput("guess universe is empty")
    if not candidates:
        raise InvalidInput("no candidates left to score against")
    return rank_guesses(universe, candidates, weights, top=1, cache=cache)[0][0]


# ------------------------------------------------------------------
# Parallel scoring helper (module-level for pickling)
# ------------------------------------------------------------------

def _score_chunk(args):
    """Worker: expected information for a chunk of guesses."""
    chunk, candidates, weight_pairs = args
    weights = dict(weight_pairs)
    return score_guesses(chunk, candidates, weights)


class GuessSelector:
    """Scores a fixed guess universe round after round.

    Small rounds are scored in-process with a shared :class:`PatternCache`;
    large ones are split into chunks scored by a process pool.  The
    opening guess depends only on the dictionary, the candidate set and
    the weighting, so it is memoised under exactly that key.
    """

    def __init__(
        self,
        universe: Sequence[str],
        config: SolverConfig | None = None,
        fingerprint: str = "",
    ) -> None:
        if not universe:
            raise InvalidInput("guess universe is empty")
        self.universe = tuple(universe)
        self.config = config or SolverConfig()
        self.fingerprint = fingerprint
        self.cache = PatternCache()
        self.memo: dict[tuple[str, frozenset, str], str] = {}

    def _parallel(self, candidates: Sequence[str]) -> bool:
        work = len(self.universe) * len(candidates)
        return work >= self.config.parallel_threshold and self._workers() > 1

    def _workers(self) -> int:
        return self.config.max_workers or os.cpu_count() or 1

    def rank(
        self,
        candidates: Sequence[str],
        weights: Mapping[str, float],
        top: int | None = None,
    ) -> list[tuple[str, float]]:
        candidates = tuple(candidates)
        if not candidates:
            raise InvalidInput("no candidates left to score against")
        if not self._parallel(candidates):
            return rank_guesses(self.universe, candidates, weights, top, self.cache)

        max_workers = self._workers()
        pool = list(self.universe)
        chunk_size = max(50, len(pool) // (max_workers * 4))
        chunks = [pool[i:i + chunk_size] for i in range(0, len(pool), chunk_size)]
        wp = [(c, weights[c]) for c in candidates]

        scores: list[tuple[str, float]] = []
        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for part in executor.map(_score_chunk, [(ch, candidates, wp) for ch in chunks]):
                scores.extend(part)
        scores.sort(key=_rank_key(weights))
        return scores if top is None else scores[:top]

    def best_guess(
        self,
        candidates: Sequence[str],
        weights: Mapping[str, float],
        opening: bool = False,
    ) -> str:
        """Best guess for this round; *opening* marks a session's first round."""
        key = None
        if opening and self.config.memoize_opener:
            key = (self.fingerprint, frozenset(candidates), self.config.weighting)
            if key in self.memo:
                return self.memo[key]
        guess = self.rank(candidates, weights, top=1)[0][0]
        if key is not None:
            self.memo[key] = guess
        return guess

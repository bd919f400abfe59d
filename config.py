"""Solver settings."""

from __future__ import annotations

from dataclasses import dataclass

from errors import InvalidInput
from lexicon import MODES


@dataclass(frozen=True)
class SolverConfig:
    """Everything a solver needs besides its word lists.

    Attributes
    ----------
    word_length : int
        Letters per word; every dictionary word must match.
    max_rounds : int
        Guesses allowed before a session ends as exhausted.
    weighting : str
        Frequency model mode: ``"frequency"``, ``"sigmoid"`` or
        ``"uniform"``.
    floor_count : float
        Count given to words with a zero or missing count.
    steepness : float
        Slope of the sigmoid weighting.
    max_workers : int or None
        Processes used for parallel scoring (None = CPU count).
    parallel_threshold : int
        Score in parallel once ``|guess universe| * |candidates|`` reaches
        this many pattern computations.
    memoize_opener : bool
        Reuse the first-round guess across sessions of one solver.
    """

    word_length: int = 5
    max_rounds: int = 6
    weighting: str = "frequency"
    floor_count: float = 0.5
    steepness: float = 1.5
    max_workers: int | None = None
    parallel_threshold: int = 2_000_000
    memoize_opener: bool = True

    def __post_init__(self) -> None:
        if self.word_length < 1:
            raise InvalidInput(f"word_length must be positive, got {self.word_length}")
        if self.max_rounds < 1:
            raise InvalidInput(f"max_rounds must be positive, got {self.max_rounds}")
        if self.weighting not in MODES:
            raise InvalidInput(f"weighting must be one of {MODES}, got {self.weighting!r}")
        if self.floor_count <= 0:
            raise InvalidInput("floor_count must be positive")
        if self.max_workers is not None and self.max_workers < 1:
            raise InvalidInput("max_workers must be positive")
        if self.parallel_threshold < 1:
            raise InvalidInput("parallel_threshold must be positive")

"""Interface between the elimination loop and whatever answers guesses."""

from __future__ import annotations

from abc import ABC, abstractmethod


class FeedbackSource(ABC):
    """Something that can play a guess against the hidden word.

    In production this is the automation driving the live puzzle; in
    tests and benchmarks it is a :class:`wordle_env.WordleEnv`.
    """

    @abstractmethod
    def submit_guess(self, word: str):
        """Play *word* and return its feedback pattern.

        May return the pattern directly or an awaitable resolving to it
        (only :meth:`solver.WordleSolver.solve_async` awaits).  Raise
        :class:`errors.CollaboratorError` when no feedback can be obtained.
        """
        ...


class CallbackFeedback(FeedbackSource):
    """Adapt a plain function ``word -> pattern`` to :class:`FeedbackSource`."""

    def __init__(self, func) -> None:
        self._func = func

    def submit_guess(self, word: str):
        return self._func(word)

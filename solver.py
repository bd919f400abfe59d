"""Elimination loop: guess, read feedback, narrow the candidates, repeat."""

from __future__ import annotations

import asyncio
import hashlib
import inspect
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence

from config import SolverConfig
from entropy import remaining_uncertainty
from errors import CollaboratorError, InvalidInput
from feedback import FeedbackSource
from lexicon import Dictionary, FrequencyModel
from selector import GuessSelector
from wordle_env import (
    Pattern,
    filter_candidates,
    format_pattern,
    is_solved,
    normalize_pattern,
)


class SessionStatus(str, Enum):
    ACTIVE = "active"
    SOLVED = "solved"
    EXHAUSTED = "exhausted"
    ABORTED = "aborted"


@dataclass
class SessionResult:
    """Outcome of one solving session."""

    status: SessionStatus
    history: list[tuple[str, Pattern]] = field(default_factory=list)
    answer: str | None = None
    candidates_left: int = 0
    error: str | None = None

    @property
    def rounds(self) -> int:
        return len(self.history)

    @property
    def solved(self) -> bool:
        return self.status is SessionStatus.SOLVED

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "rounds": self.rounds,
            "answer": self.answer,
            "candidates_left": self.candidates_left,
            "error": self.error,
            "history": [
                {"guess": g, "pattern": [int(m) for m in pat]}
                for g, pat in self.history
            ],
        }


class Session:
    """State of one puzzle being solved.

    The candidate set only ever shrinks, and only through
    :meth:`apply_feedback` for the guess returned by :meth:`next_guess`.
    """

    def __init__(self, solver: WordleSolver) -> None:
        self._solver = solver
        self._candidates: list[str] = list(solver.answers)
        self._history: list[tuple[str, Pattern]] = []
        self._pending: str | None = None
        self._status = SessionStatus.ACTIVE
        self._error: str | None = None

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def candidates(self) -> tuple[str, ...]:
        return tuple(self._candidates)

    @property
    def history(self) -> list[tuple[str, Pattern]]:
        return list(self._history)

    @property
    def rounds(self) -> int:
        return len(self._history)

    @property
    def pending_guess(self) -> str | None:
        return self._pending

    def weights(self) -> dict[str, float]:
        """Answer probabilities over the current candidates."""
        return self._solver.model.distribution(self._candidates)

    def uncertainty(self) -> float:
        """Bits of uncertainty left about the answer."""
        return remaining_uncertainty(self._candidates, self.weights())

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _require_active(self) -> None:
        if self._status is not SessionStatus.ACTIVE:
            raise RuntimeError(f"session is {self._status.value}")

    def next_guess(self) -> str:
        """Choose (once per round) the word to play next."""
        self._require_active()
        if self._pending is None:
            if len(self._candidates) == 1:
                self._pending = self._candidates[0]
            else:
                self._pending = self._solver.selector.best_guess(
                    self._candidates, self.weights(), opening=not self._history,
                )
        return self._pending

    def apply_feedback(self, pat) -> SessionStatus:
        """Record the feedback for the pending guess and narrow the candidates.

        Raises :class:`InvalidInput` for a malformed pattern, leaving the
        session untouched.
        """
        self._require_active()
        if self._pending is None:
            raise RuntimeError("call next_guess() before applying feedback")
        pat = normalize_pattern(pat, self._solver.word_length)

        guess, self._pending = self._pending, None
        self._history.append((guess, pat))
        if is_solved(pat):
            self._candidates = [guess]
            self._status = SessionStatus.SOLVED
            return self._status

        self._candidates = filter_candidates(self._candidates, guess, pat)
        if not self._candidates:
            self._status = SessionStatus.EXHAUSTED
            self._error = "no candidates are consistent with the feedback"
        elif len(self._history) >= self._solver.config.max_rounds:
            self._status = SessionStatus.EXHAUSTED
            self._error = f"not solved within {self._solver.config.max_rounds} rounds"
        return self._status

    def abort(self, reason: str = "cancelled") -> None:
        self._require_active()
        self._pending = None
        self._status = SessionStatus.ABORTED
        self._error = reason

    def result(self) -> SessionResult:
        answer = None
        if self._status is SessionStatus.SOLVED:
            answer = self._history[-1][0]
        return SessionResult(
            status=self._status,
            history=list(self._history),
            answer=answer,
            candidates_left=len(self._candidates),
            error=self._error,
        )


class WordleSolver:
    """Information-maximising solver over a weighted dictionary.

    Parameters
    ----------
    dictionary : Dictionary
        Every known word with its raw corpus count.
    guess_universe : iterable of str or None
        Words that may be played (default: the whole dictionary).
    answers : iterable of str or None
        Words that may be the hidden target (default: the whole
        dictionary).  Must be playable.
    config : SolverConfig or None
    """

    def __init__(
        self,
        dictionary: Dictionary,
        guess_universe: Iterable[str] | None = None,
        answers: Iterable[str] | None = None,
        config: SolverConfig | None = None,
    ) -> None:
        self.config = config or SolverConfig(word_length=dictionary.word_length)
        if len(dictionary) == 0:
            raise InvalidInput("dictionary is empty")
        if dictionary.word_length != self.config.word_length:
            raise InvalidInput(
                f"dictionary has {dictionary.word_length}-letter words, "
                f"config expects {self.config.word_length}"
            )
        self.dictionary = dictionary
        self.universe = self._word_set(guess_universe, "guess universe")
        self.answers = self._word_set(answers, "answer list")
        playable = set(self.universe)
        missing = [w for w in self.answers if w not in playable]
        if missing:
            raise InvalidInput(f"answers that cannot be guessed: {missing[:5]}")

        self.model = FrequencyModel(
            dictionary,
            mode=self.config.weighting,
            floor_count=self.config.floor_count,
            steepness=self.config.steepness,
        )
        h = hashlib.sha1(dictionary.fingerprint.encode("ascii"))
        h.update(" ".join(self.universe).encode("utf-8"))
        self.selector = GuessSelector(self.universe, self.config, fingerprint=h.hexdigest())

    def _word_set(self, words: Iterable[str] | None, what: str) -> tuple[str, ...]:
        if words is None:
            return self.dictionary.words
        words = sorted({w.lower() for w in words})
        if not words:
            raise InvalidInput(f"{what} is empty")
        unknown = [w for w in words if w not in self.dictionary]
        if unknown:
            raise InvalidInput(f"{what} has words missing from the dictionary: {unknown[:5]}")
        return tuple(words)

    @property
    def word_length(self) -> int:
        return self.config.word_length

    def new_session(self) -> Session:
        return Session(self)

    def suggest(self, candidates: Sequence[str], top: int = 5) -> list[tuple[str, float]]:
        """Top guesses with their expected information for *candidates*."""
        return self.selector.rank(candidates, self.model.distribution(candidates), top=top)

    # ------------------------------------------------------------------
    # Loops
    # ------------------------------------------------------------------

    def solve(
        self,
        source: FeedbackSource,
        cancel: threading.Event | None = None,
        verbose: bool = False,
    ) -> SessionResult:
        """Play a whole session against *source*.

        Cancellation is checked before each round; a
        :class:`CollaboratorError` or malformed feedback aborts the session.
        """
        session = self.new_session()
        while session.status is SessionStatus.ACTIVE:
            if cancel is not None and cancel.is_set():
                session.abort("cancelled")
                break
            guess = session.next_guess()
            try:
                pat = source.submit_guess(guess)
            except CollaboratorError as exc:
                session.abort(f"feedback source failed: {exc}")
                break
            self._record(session, pat, verbose)
        return session.result()

    async def solve_async(
        self,
        source: FeedbackSource,
        cancel: asyncio.Event | threading.Event | None = None,
        verbose: bool = False,
    ) -> SessionResult:
        """Like :meth:`solve`, awaiting the source when it returns awaitables.

        Scoring runs in the default executor so the event loop stays free.
        """
        loop = asyncio.get_running_loop()
        session = self.new_session()
        while session.status is SessionStatus.ACTIVE:
            if cancel is not None and cancel.is_set():
                session.abort("cancelled")
                break
            guess = await loop.run_in_executor(None, session.next_guess)
            try:
                pat = source.submit_guess(guess)
                if inspect.isawaitable(pat):
                    pat = await pat
            except CollaboratorError as exc:
                session.abort(f"feedback source failed: {exc}")
                break
            self._record(session, pat, verbose)
        return session.result()

    def _record(self, session: Session, pat, verbose: bool) -> None:
        guess = session.pending_guess
        try:
            session.apply_feedback(pat)
        except InvalidInput as exc:
            session.abort(f"malformed feedback for {guess!r}: {exc}")
            return
        if verbose:
            last = session.history[-1][1]
            print(
                f"  Guess {session.rounds}: {guess}  {format_pattern(last)}  "
                f"remaining={len(session.candidates)}  "
                f"H={session.uncertainty():.2f} bits"
            )

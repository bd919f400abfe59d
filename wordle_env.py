"""Feedback patterns and a simulated puzzle, for any word length."""

from __future__ import annotations

import random
from collections import Counter
from enum import IntEnum
from typing import Iterable

import numpy as np

from errors import CollaboratorError, InvalidInput
from feedback import FeedbackSource


class Mark(IntEnum):
    """Colour of a single tile."""

    ABSENT = 0   # gray: not in the target, or already consumed
    PRESENT = 1  # yellow: in the target, other position
    CORRECT = 2  # green: right letter, right position


ABSENT, PRESENT, CORRECT = Mark.ABSENT, Mark.PRESENT, Mark.CORRECT

Pattern = tuple  # tuple[Mark, ...], one mark per letter

_SYMBOLS = {
    "0": ABSENT, "b": ABSENT, "x": ABSENT, "-": ABSENT, ".": ABSENT,
    "1": PRESENT, "y": PRESENT,
    "2": CORRECT, "g": CORRECT,
    "⬛": ABSENT, "⬜": ABSENT,
    "\U0001f7e8": PRESENT,
    "\U0001f7e9": CORRECT, "✅": CORRECT,
}
_STATES = {"absent": ABSENT, "present": PRESENT, "correct": CORRECT}
_EMOJI = {CORRECT: "\U0001f7e9", PRESENT: "\U0001f7e8", ABSENT: "⬛"}


def pattern(guess: str, target: str) -> Pattern:
    """Return the feedback tiles for *guess* against *target*.

    Greens are marked first and consume their letter; yellows are then
    handed out left to right while unmatched copies of the letter remain,
    so ``pattern("sheep", "super")`` colours only one of the two e's.
    """
    n = len(target)
    if len(guess) != n:
        raise InvalidInput(
            f"guess length ({len(guess)}) != target length ({n})"
        )

    pat = [ABSENT] * n
    remaining = Counter(target)

    # Pass 1 – greens
    for i, (g, t) in enumerate(zip(guess, target)):
        if g == t:
            pat[i] = CORRECT
            remaining[g] -= 1

    # Pass 2 – yellows
    for i, g in enumerate(guess):
        if pat[i] is CORRECT:
            continue
        if remaining[g] > 0:
            pat[i] = PRESENT
            remaining[g] -= 1

    return tuple(pat)


def pattern_code(pat: Iterable[int]) -> int:
    """Encode a pattern as a base-3 integer, first tile most significant."""
    code = 0
    for mark in pat:
        code = code * 3 + int(mark)
    return code


def decode_pattern(code: int, word_length: int) -> Pattern:
    marks = []
    for _ in range(word_length):
        code, digit = divmod(code, 3)
        marks.append(Mark(digit))
    return tuple(reversed(marks))


def is_solved(pat: Iterable[int]) -> bool:
    return all(mark == CORRECT for mark in pat)


def _mark(value) -> Mark:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"tile {value!r} is not an integer")
    return Mark(int(value))


def normalize_pattern(pat, word_length: int) -> Pattern:
    """Coerce *pat* (marks, ints or text) into a validated pattern tuple."""
    if isinstance(pat, str):
        return parse_pattern(pat, word_length)
    try:
        marks = tuple(_mark(m) for m in pat)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"malformed pattern {pat!r}: {exc}") from None
    if len(marks) != word_length:
        raise InvalidInput(
            f"pattern has {len(marks)} tiles, expected {word_length}"
        )
    return marks


def parse_pattern(text: str, word_length: int | None = None) -> Pattern:
    """Parse user or scraper feedback.

    Accepts digit strings (``"20010"``), colour letters (``"gbbyb"``),
    emoji squares, or comma separated tile states
    (``"correct,absent,absent,present,absent"``).
    """
    text = text.strip().lower()
    if "," in text:
        words = [part.strip() for part in text.split(",")]
        unknown = [w for w in words if w not in _STATES]
        if unknown:
            raise InvalidInput(f"unknown tile state(s): {unknown}")
        marks = tuple(_STATES[w] for w in words)
    else:
        symbols = [ch for ch in text if not ch.isspace() and ch != "\ufe0f"]
        unknown = [ch for ch in symbols if ch not in _SYMBOLS]
        if unknown:
            raise InvalidInput(f"unknown pattern symbol(s): {unknown}")
        marks = tuple(_SYMBOLS[ch] for ch in symbols)
    if not marks:
        raise InvalidInput("empty pattern")
    if word_length is not None and len(marks) != word_length:
        raise InvalidInput(
            f"pattern has {len(marks)} tiles, expected {word_length}"
        )
    return marks


def format_pattern(pat: Iterable[int]) -> str:
    return "".join(_EMOJI[Mark(m)] for m in pat)


def filter_candidates(
    candidates: Iterable[str],
    guess: str,
    pat: Pattern,
) -> list[str]:
    """Keep only candidates that would have produced *pat* for *guess*."""
    pat = tuple(pat)
    return [w for w in candidates if pattern(guess, w) == pat]


class WordleEnv(FeedbackSource):
    """A simulated puzzle that always answers truthfully.

    Parameters
    ----------
    vocabulary : list[str]
        Words accepted as guesses (all must have the same length).
    word_length : int
        Expected word length (validated against vocabulary).
    max_guesses : int
        Guesses allowed before the game is lost.
    allow_non_words : bool
        If True, any string of the correct length is accepted as a guess.
    """

    def __init__(
        self,
        vocabulary: Iterable[str],
        word_length: int = 5,
        max_guesses: int = 6,
        allow_non_words: bool = False,
    ) -> None:
        vocabulary = list(vocabulary)
        bad = [w for w in vocabulary if len(w) != word_length]
        if bad:
            raise InvalidInput(
                f"Words with wrong length (expected {word_length}): {bad[:5]}"
            )
        self._vocab = vocabulary
        self._vocab_set = set(vocabulary)
        self._word_length = word_length
        self._max_guesses = max_guesses
        self._allow_non_words = allow_non_words

        # Game state (set by reset)
        self._secret: str | None = None
        self._history: list[tuple[str, Pattern]] = []
        self._solved = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def reset(self, secret: str | None = None, seed: int | None = None) -> None:
        """Start a new game. Random secret if *secret* is None."""
        if secret is not None and len(secret) != self._word_length:
            raise InvalidInput(f"secret {secret!r} has the wrong length")
        if secret is None:
            secret = random.Random(seed).choice(self._vocab)
        self._secret = secret
        self._history = []
        self._solved = False

    def guess(self, word: str) -> Pattern:
        """Submit a guess and receive feedback.

        Raises
        ------
        RuntimeError
            If no game was started or the game is over.
        ValueError
            If *word* has the wrong length or is not in the vocabulary
            (when ``allow_non_words`` is False).
        """
        if self._secret is None:
            raise RuntimeError("Call reset() before guessing")
        if self.game_over():
            raise RuntimeError("Game is already over")
        word = word.lower()
        if len(word) != self._word_length:
            raise ValueError(
                f"Guess length ({len(word)}) != word_length ({self._word_length})"
            )
        if not self._allow_non_words and word not in self._vocab_set:
            raise ValueError(f"{word!r} is not in the vocabulary")

        pat = pattern(word, self._secret)
        self._history.append((word, pat))
        if word == self._secret:
            self._solved = True
        return pat

    def submit_guess(self, word: str) -> Pattern:
        """Feedback-source entry point used by the elimination loop."""
        try:
            return self.guess(word)
        except (RuntimeError, ValueError) as exc:
            raise CollaboratorError(str(exc)) from exc

    def is_solved(self) -> bool:
        return self._solved

    def remaining_guesses(self) -> int:
        return self._max_guesses - len(self._history)

    def game_over(self) -> bool:
        return self._solved or len(self._history) >= self._max_guesses

    @property
    def history(self) -> list[tuple[str, Pattern]]:
        return list(self._history)

    @property
    def secret(self) -> str:
        """Reveal the secret word (only after game over)."""
        if self._secret is None:
            raise RuntimeError("No game in progress")
        if not self.game_over():
            raise RuntimeError("Game is still in progress")
        return self._secret

    @property
    def word_length(self) -> int:
        return self._word_length

    @property
    def max_guesses(self) -> int:
        return self._max_guesses

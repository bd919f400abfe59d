"""Weighted dictionaries and the frequency model.

A dictionary maps each word to its raw corpus count.  The frequency
model turns those counts into probabilities over whichever words are
still possible answers:

  - ``frequency``: proportional to the count (floored, so unseen words
    stay possible)
  - ``sigmoid``:   proportional to a sigmoid of log-count
  - ``uniform``:   every candidate equally likely

Supported file formats:
  - ``word count`` per line (whitespace separated)
  - ``word`` per line (count treated as missing)
  - CSV with header ``word,count``
"""

from __future__ import annotations

import csv
import hashlib
import math
import re
import unicodedata
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Collection, Iterable, Mapping

from errors import InvalidInput

MODES = ("frequency", "sigmoid", "uniform")

_DIR = Path(__file__).resolve().parent
DEFAULT_DICTIONARY = _DIR / "data" / "mini_english_5.txt"


def _strip_accents(text: str) -> str:
    nfkd = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in nfkd if unicodedata.category(ch) != "Mn")


# ------------------------------------------------------------------
# Dictionary
# ------------------------------------------------------------------

@dataclass(frozen=True)
class Dictionary:
    """Read-only word -> raw count mapping for one word length."""

    counts: Mapping[str, int] = field(repr=False)
    word_length: int

    @property
    def words(self) -> tuple[str, ...]:
        return tuple(sorted(self.counts))

    @property
    def fingerprint(self) -> str:
        """Content hash, used to key memoised results across sessions."""
        h = hashlib.sha1()
        for w in sorted(self.counts):
            h.update(f"{w}:{self.counts[w]}\n".encode("utf-8"))
        return h.hexdigest()

    def count(self, word: str) -> int:
        return self.counts.get(word, 0)

    def __contains__(self, word: object) -> bool:
        return word in self.counts

    def __len__(self) -> int:
        return len(self.counts)

    def __reduce__(self):
        return build_dictionary, (dict(self.counts), self.word_length)


def build_dictionary(
    entries: Mapping[str, int] | Iterable[tuple[str, int]],
    word_length: int | None = None,
) -> Dictionary:
    """Validate pre-parsed ``(word, count)`` pairs into a :class:`Dictionary`.

    The first occurrence of a duplicated word wins.  Raises
    :class:`InvalidInput` for empty input, mixed or unexpected lengths,
    non-alphabetic words and negative counts.
    """
    if isinstance(entries, Mapping):
        entries = entries.items()
    counts: dict[str, int] = {}
    for word, count in entries:
        w = str(word).strip().lower()
        if not w.isalpha():
            raise InvalidInput(f"not a word: {word!r}")
        if count is None:
            count = 0
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise InvalidInput(f"count for {w!r} must be a non-negative int, got {count!r}")
        if word_length is None:
            word_length = len(w)
        if len(w) != word_length:
            raise InvalidInput(
                f"{w!r} has {len(w)} letters, expected {word_length}"
            )
        counts.setdefault(w, count)
    if not counts:
        raise InvalidInput("dictionary is empty")
    return Dictionary(counts=MappingProxyType(counts), word_length=word_length)


# ------------------------------------------------------------------
# Frequency model
# ------------------------------------------------------------------

def _sigmoid(x: float) -> float:
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    ex = math.exp(x)
    return ex / (1.0 + ex)


class FrequencyModel:
    """Turns raw counts into answer probabilities.

    Raw weights are computed once per dictionary; :meth:`distribution`
    renormalises them over the current candidates, so probabilities are
    always relative to the words that are still possible.
    """

    def __init__(
        self,
        dictionary: Dictionary,
        mode: str = "frequency",
        floor_count: float = 0.5,
        steepness: float = 1.5,
    ) -> None:
        if mode not in MODES:
            raise InvalidInput(f"mode must be one of {MODES}, got {mode!r}")
        if floor_count <= 0:
            raise InvalidInput("floor_count must be positive")
        self.dictionary = dictionary
        self.mode = mode
        self.floor_count = floor_count
        self.steepness = steepness
        self._mu = 0.0
        self._raw = self._raw_weights()

    def _raw_weights(self) -> dict[str, float]:
        counts = {w: max(float(c), self.floor_count)
                  for w, c in self.dictionary.counts.items()}
        if self.mode == "uniform":
            return {w: 1.0 for w in counts}
        if self.mode == "frequency":
            return counts
        # sigmoid on log-count, centred on the dictionary mean
        log_counts = {w: math.log(c + 1) for w, c in counts.items()}
        self._mu = sum(log_counts.values()) / len(log_counts)
        return {w: _sigmoid(self.steepness * (lc - self._mu))
                for w, lc in log_counts.items()}

    def raw_weight(self, word: str) -> float:
        """Unnormalised weight; words missing from the dictionary get the floor."""
        w = self._raw.get(word)
        if w is not None:
            return w
        if self.mode == "uniform":
            return 1.0
        if self.mode == "frequency":
            return self.floor_count
        return _sigmoid(self.steepness * (math.log(self.floor_count + 1) - self._mu))

    def distribution(self, candidates: Iterable[str]) -> dict[str, float]:
        """Probability of each candidate being the answer (sums to 1)."""
        raw = {w: self.raw_weight(w) for w in candidates}
        if not raw:
            return {}
        total = sum(raw.values())
        return {w: v / total for w, v in raw.items()}

    def total_weight(self, candidates: Iterable[str]) -> float:
        """Normaliser of :meth:`distribution` over *candidates*."""
        return sum(self.raw_weight(w) for w in candidates)

    def weight(
        self,
        word: str,
        candidates: Collection[str],
        total: float | None = None,
    ) -> float:
        """Probability of *word* among *candidates*; 0 if it is not one.

        Pass *total* from :meth:`total_weight` when asking about many words
        of the same candidate set; use :meth:`distribution` for all of them.
        """
        if word not in candidates:
            return 0.0
        if total is None:
            total = self.total_weight(candidates)
        return self.raw_weight(word) / total


# ------------------------------------------------------------------
# Loading
# ------------------------------------------------------------------

def _read_lines(path: Path, word_length: int) -> list[tuple[str, int]]:
    """``word count`` or bare ``word`` per line; bare words count 0."""
    pattern = re.compile(rf"^[a-z]{{{word_length}}}$")
    entries: list[tuple[str, int]] = []
    for raw in path.read_text(encoding="utf-8").splitlines():
        parts = raw.split()
        if not parts or parts[0].startswith("#"):
            continue
        w = _strip_accents(parts[0].lower())
        if not pattern.match(w):
            continue
        try:
            c = int(parts[1]) if len(parts) > 1 else 0
        except ValueError:
            raise InvalidInput(f"{path}: bad count in line {raw!r}") from None
        entries.append((w, c))
    return entries


def _read_csv(path: Path, word_length: int) -> list[tuple[str, int]]:
    """CSV with ``word,count`` header."""
    pattern = re.compile(rf"^[a-z]{{{word_length}}}$")
    entries: list[tuple[str, int]] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None or "word" not in reader.fieldnames:
            raise InvalidInput(f"{path}: CSV needs a 'word' column")
        for row in reader:
            w = _strip_accents(row["word"].strip().lower())
            if not pattern.match(w):
                continue
            c = (row.get("count") or "0").strip()
            try:
                entries.append((w, int(c)))
            except ValueError:
                raise InvalidInput(f"{path}: bad count {c!r} for {w!r}") from None
    return entries


def load_dictionary(
    path: str | Path | None = None,
    word_length: int = 5,
) -> Dictionary:
    """Load a word list with counts.

    Parameters
    ----------
    path : str, Path or None
        ``.csv`` (word,count) or text file.  None loads the bundled
        ``data/mini_english_5.txt``.
    word_length : int
        Only keep words of this exact length.

    Returns
    -------
    Dictionary
    """
    src = Path(path) if path is not None else DEFAULT_DICTIONARY
    if not src.exists():
        raise FileNotFoundError(f"Word list not found: {src}")

    if src.suffix == ".csv":
        entries = _read_csv(src, word_length)
    else:
        entries = _read_lines(src, word_length)

    if not entries:
        raise InvalidInput(f"No {word_length}-letter words found in {src}")
    return build_dictionary(entries, word_length=word_length)


def load_word_list(path: str | Path, word_length: int = 5) -> list[str]:
    """Plain list of words (counts ignored), e.g. a file of answers."""
    return [w for w, _ in _read_lines(Path(path), word_length)]

#!/usr/bin/env python3
"""Interactive helper: the solver picks words, you report the puzzle's colours."""

from __future__ import annotations

import argparse
import sys
from typing import TextIO

from config import SolverConfig
from errors import CollaboratorError, InvalidInput
from feedback import FeedbackSource
from lexicon import MODES, load_dictionary, load_word_list
from solver import SessionStatus, WordleSolver
from wordle_env import Pattern, format_pattern, parse_pattern


class ConsoleFeedback(FeedbackSource):
    """Asks a person to play each guess and type back the tile colours.

    Typos are re-asked (up to *attempts* times); ``q`` or end of input
    gives up, which the solver treats as an aborted session.
    """

    def __init__(
        self,
        word_length: int = 5,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        attempts: int = 3,
    ) -> None:
        self.word_length = word_length
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.attempts = attempts

    def submit_guess(self, word: str) -> Pattern:
        for _ in range(self.attempts):
            self.stdout.write(
                f"Play {word.upper()!r} and enter the colours "
                f"(g=green y=yellow b=gray, q=quit): "
            )
            self.stdout.flush()
            line = self.stdin.readline()
            if not line or line.strip().lower() in ("q", "quit"):
                raise CollaboratorError("no feedback given")
            try:
                return parse_pattern(line, self.word_length)
            except InvalidInput as exc:
                print(f"  {exc}", file=self.stdout)
        raise CollaboratorError(f"no valid feedback after {self.attempts} attempts")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Interactive Wordle assistant")
    parser.add_argument("--words", type=str, default=None,
                        help="Dictionary with counts (.txt 'word count' lines or .csv)")
    parser.add_argument("--answers", type=str, default=None,
                        help="Possible answers, one per line (default: every dictionary word)")
    parser.add_argument("--length", type=int, default=5, help="Word length (default: 5)")
    parser.add_argument("--max-rounds", type=int, default=6,
                        help="Guesses allowed (default: 6)")
    parser.add_argument("--weighting", choices=MODES, default="frequency",
                        help="Frequency model (default: frequency)")
    parser.add_argument("--workers", type=int, default=None,
                        help="Processes for parallel scoring (default: CPU count)")
    args = parser.parse_args(argv)

    dictionary = load_dictionary(args.words, word_length=args.length)
    answers = load_word_list(args.answers, args.length) if args.answers else None
    config = SolverConfig(
        word_length=args.length,
        max_rounds=args.max_rounds,
        weighting=args.weighting,
        max_workers=args.workers,
    )
    solver = WordleSolver(dictionary, answers=answers, config=config)
    print(f"Dictionary: {len(dictionary)} words, {len(solver.answers)} possible answers")

    result = solver.solve(ConsoleFeedback(word_length=args.length), verbose=True)
    for guess, pat in result.history:
        print(f"  {guess}  {format_pattern(pat)}")
    if result.status is SessionStatus.SOLVED:
        print(f"Solved in {result.rounds}: {result.answer}")
        return 0
    print(f"{result.status.value.upper()}: {result.error}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""Solve many hidden words against a simulated puzzle and report the results."""

from __future__ import annotations

import argparse
import json
import random
import sys
import time
from pathlib import Path

from config import SolverConfig
from lexicon import MODES, load_dictionary, load_word_list
from solver import SessionResult, WordleSolver
from wordle_env import WordleEnv

RESULTS_DIR = Path(__file__).resolve().parent / "results"


def run_benchmark(
    solver: WordleSolver,
    secrets: list[str],
    verbose: bool = False,
) -> list[dict]:
    """Play one session per secret and return a log entry for each."""
    env = WordleEnv(
        vocabulary=solver.universe,
        word_length=solver.word_length,
        max_guesses=solver.config.max_rounds,
    )

    logs: list[dict] = []
    for i, secret in enumerate(secrets, 1):
        env.reset(secret=secret)
        if verbose:
            print(f"\n--- Game {i}/{len(secrets)} | Secret: {secret} ---")
        result: SessionResult = solver.solve(env, verbose=verbose)
        if verbose:
            print(f"  -> {result.status.value.upper()} in {result.rounds} guesses")
        entry = {"game": i, "secret": secret}
        entry.update(result.to_dict())
        logs.append(entry)
    return logs


def summarize(logs: list[dict]) -> dict:
    n = len(logs)
    solved = [g for g in logs if g["status"] == "solved"]
    guesses = sorted(g["rounds"] for g in solved)
    by_status: dict[str, int] = {}
    for g in logs:
        by_status[g["status"]] = by_status.get(g["status"], 0) + 1
    dist: dict[str, int] = {}
    for r in guesses:
        dist[str(r)] = dist.get(str(r), 0) + 1
    k = len(guesses)
    median = 0.0
    if k:
        median = guesses[k // 2] if k % 2 == 1 else (guesses[k // 2 - 1] + guesses[k // 2]) / 2
    return {
        "games": n,
        "solved": len(solved),
        "solve_rate": round(len(solved) / n, 4) if n else 0,
        "mean_guesses": round(sum(guesses) / k, 3) if k else 0,
        "median_guesses": median,
        "max_guesses": max(guesses) if guesses else 0,
        "statuses": by_status,
        "guess_distribution": dist,
    }


def print_summary(summary: dict) -> None:
    n = summary["games"]
    print(f"\n=== Entropy solver — {n} games ===")
    print(f"  Solved: {summary['solved']}/{n} ({100 * summary['solve_rate']:.1f}%)")
    print(f"  Guesses — mean: {summary['mean_guesses']:.2f}, "
          f"median: {summary['median_guesses']:.1f}, max: {summary['max_guesses']}")
    failed = {s: c for s, c in summary["statuses"].items() if s != "solved"}
    if failed:
        print(f"  Not solved: {failed}")


def plot_distribution(logs: list[dict], path: Path) -> None:
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError:
        print("matplotlib not installed — skipping plot", file=sys.stderr)
        return

    guesses = [g["rounds"] for g in logs if g["status"] == "solved"]
    if not guesses:
        print("nothing solved — skipping plot", file=sys.stderr)
        return
    bins = list(range(1, max(guesses) + 2))

    fig, ax = plt.subplots(figsize=(6, 4))
    ax.hist(guesses, bins=bins, edgecolor="black", align="left")
    ax.set_title("Entropy solver — guess distribution")
    ax.set_xlabel("Guesses")
    ax.set_ylabel("Count")
    fig.tight_layout()

    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=150)
    plt.close(fig)
    print(f"Plot saved to {path}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Benchmark the entropy solver on a simulated puzzle",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
examples:
  python benchmark.py                               # bundled word list, every word
  python benchmark.py --num-games 50 --verbose      # 50 random secrets, per-round output
  python benchmark.py --words counts.txt --answers answers.txt --max-rounds 32
""",
    )
    parser.add_argument("--words", type=str, default=None,
                        help="Dictionary with counts (.txt 'word count' lines or .csv)")
    parser.add_argument("--answers", type=str, default=None,
                        help="Possible answers, one per line (default: every dictionary word)")
    parser.add_argument("--length", type=int, default=5, help="Word length (default: 5)")
    parser.add_argument("--max-rounds", type=int, default=6,
                        help="Guesses allowed per game (default: 6)")
    parser.add_argument("--num-games", type=int, default=None,
                        help="Limit the number of secrets played")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for sampling secrets")
    parser.add_argument("--weighting", choices=MODES, default="frequency",
                        help="Frequency model (default: frequency)")
    parser.add_argument("--workers", type=int, default=None,
                        help="Processes for parallel scoring (default: CPU count)")
    parser.add_argument("--verbose", action="store_true", help="Print per-round details")
    parser.add_argument("--plot", type=str, default=None, help="Save histogram to this path")
    parser.add_argument("--json", type=str, default=None, help="Save results as JSON")
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
    print(f"Dictionary: {len(dictionary)} words of length {args.length} "
          f"({len(solver.answers)} possible answers, weighting: {args.weighting})")

    secrets = list(solver.answers)
    if args.num_games is not None and args.num_games < len(secrets):
        secrets = random.Random(args.seed).sample(secrets, args.num_games)

    t0 = time.time()
    logs = run_benchmark(solver, secrets, verbose=args.verbose)
    elapsed = time.time() - t0

    summary = summarize(logs)
    print_summary(summary)
    print(f"Elapsed: {elapsed:.1f}s")

    plot_path = Path(args.plot) if args.plot else RESULTS_DIR / "benchmark.png"
    plot_distribution(logs, plot_path)

    json_path = Path(args.json) if args.json else RESULTS_DIR / "benchmark.json"
    json_path.parent.mkdir(parents=True, exist_ok=True)
    output = {
        "config": {
            "word_length": args.length,
            "max_rounds": args.max_rounds,
            "weighting": args.weighting,
            "num_games": len(secrets),
            "seed": args.seed,
        },
        "summary": summary,
        "games": logs,
    }
    json_path.write_text(json.dumps(output, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"JSON saved to {json_path}")


if __name__ == "__main__":
    main()

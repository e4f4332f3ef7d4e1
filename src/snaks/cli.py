"""Command line tools for snaks."""

from __future__ import annotations

import argparse
import logging
import sys

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snaks",
        description="snaks achievements, difficulty and simulation tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- scores ---
    scores_p = sub.add_parser("scores", help="Print the achievements ledger.")
    scores_p.add_argument("--username", type=str, default=None)
    scores_p.add_argument(
        "--grouped", action="store_true",
        help="Group rows by username.",
    )
    scores_p.add_argument(
        "--file", type=str, default=None,
        help="Path to the achievements file (defaults to the config dir).",
    )

    # --- difficulties ---
    sub.add_parser("difficulties", help="List difficulty levels.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play random-policy games headlessly.",
    )
    sim_p.add_argument("--games", type=int, default=100)
    sim_p.add_argument("--width", type=int, default=20)
    sim_p.add_argument("--height", type=int, default=10)
    sim_p.add_argument("--max-steps", type=int, default=1_000)
    sim_p.add_argument("--seed", type=int, default=42)

    return parser


def _run_scores(args: argparse.Namespace) -> int:
    from snaks.achievements import AchievementError, AchievementLedger, group_by_user

    ledger = AchievementLedger(args.file)
    try:
        entries = ledger.read()
    except AchievementError as exc:
        logger.error("%s", exc)
        return 2

    if args.username is not None:
        entries = [a for a in entries if a.username == args.username]
    if not entries:
        print("No achievements yet.")  # noqa: T201
        return 0

    if args.grouped:
        for username, rows in group_by_user(entries).items():
            print(username)  # noqa: T201
            for a in rows:
                print(f"  {a.difficulty.label:<10} {a.score:>6}")  # noqa: T201
    else:
        for a in entries:
            print(f"{a.username:<16} {a.difficulty.label:<10} {a.score:>6}")  # noqa: T201
    return 0


def _run_difficulties(args: argparse.Namespace) -> int:
    from snaks.difficulty import DEFAULT_DIFFICULTY, SELECTABLE

    for kind in SELECTABLE:
        marker = "*" if kind is DEFAULT_DIFFICULTY else " "
        print(f"{marker} {kind.label:<10} {kind.fps:>3} steps/s")  # noqa: T201
    return 0


def _run_simulate(args: argparse.Namespace) -> int:
    from snaks.simulate import simulate_games

    try:
        result = simulate_games(
            num_games=args.games,
            grid_width=args.width,
            grid_height=args.height,
            max_steps=args.max_steps,
            seed=args.seed,
        )
    except ValueError as exc:
        logger.error("%s", exc)
        return 2
    print(result.summary())  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``snaks`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "scores": _run_scores,
        "difficulties": _run_difficulties,
        "simulate": _run_simulate,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())

"""
main.py — Entry Point for Evolutionary Poker
=============================================

Pipeline:
  1. Validate the configuration.
  2. Co-evolve player A and player B populations.
  3. Optionally store the snapshot history and a JSON report.
  4. Render the dashboard for one generation.

Usage:
  python main.py
  python main.py --generations 150 --ante 10 --history run.npz
  python main.py --from-history run.npz --generation 25
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from evolutionary_poker.domain import EvolutionConfig
from evolutionary_poker.evolution import EvolutionEngine
from evolutionary_poker.persistence import load_history, save_history
from evolutionary_poker.visualisation import render_dashboard

logger = logging.getLogger(__name__)


# ── Defaults ──────────────────────────────────────────────────────────

DEFAULTS = dict(
    ranks=10,
    bet_min=0.0,
    bet_max=20.0,
    bet_step=2.0,
    ante=5.0,
    population=50,
    generations=100,
    parents=0.5,
    mutation=0.05,
    seed=42,
    output="evolution_dashboard.png",
    history=None,
    json_report=None,
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="evolutionary-poker",
        description="Co-evolve betting and calling strategies for "
                    "one-card, one-bet poker",
    )
    p.add_argument("--ranks", type=int, default=DEFAULTS["ranks"],
                   help="Number of card ranks (default: %(default)s)")
    p.add_argument("--bet-min", type=float, default=DEFAULTS["bet_min"])
    p.add_argument("--bet-max", type=float, default=DEFAULTS["bet_max"])
    p.add_argument("--bet-step", type=float, default=DEFAULTS["bet_step"])
    p.add_argument("--ante", type=float, default=DEFAULTS["ante"])
    p.add_argument("-N", "--population", type=int,
                   default=DEFAULTS["population"],
                   help="Strategies per player (default: %(default)s)")
    p.add_argument("-G", "--generations", type=int,
                   default=DEFAULTS["generations"],
                   help="Number of generations (default: %(default)s)")
    p.add_argument("--parents", type=float, default=DEFAULTS["parents"],
                   help="Parent proportion in (0, 1] (default: %(default)s)")
    p.add_argument("--mutation", type=float, default=DEFAULTS["mutation"],
                   help="Mutation rate in [0, 1] (default: %(default)s)")
    p.add_argument("--seed", type=int, default=DEFAULTS["seed"])
    p.add_argument("-g", "--generation", type=int, default=None,
                   help="Generation shown on the dashboard (default: last)")
    p.add_argument("-o", "--output", default=DEFAULTS["output"],
                   help="Dashboard output path (default: %(default)s)")
    p.add_argument("--history", default=DEFAULTS["history"],
                   help="Save the snapshot history to this .npz path")
    p.add_argument("--from-history", default=None,
                   help="Render from a saved .npz history instead of running")
    p.add_argument("--json-report", default=DEFAULTS["json_report"],
                   help="Optional JSON report output path")
    return p.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> EvolutionConfig:
    return EvolutionConfig(
        num_ranks=args.ranks,
        bet_min=args.bet_min,
        bet_max=args.bet_max,
        bet_step=args.bet_step,
        ante=args.ante,
        population_size=args.population,
        generations=args.generations,
        parent_proportion=args.parents,
        mutation_rate=args.mutation,
        seed=args.seed,
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    # ── Banner ────────────────────────────────────────────────────
    print()
    print("  ╔══════════════════════════════════════════════════════╗")
    print("  ║       EVOLUTIONARY POKER  v1.0                       ║")
    print("  ║       Co-evolved Betting & Calling Strategies        ║")
    print("  ╚══════════════════════════════════════════════════════╝")
    print()

    if args.from_history:
        # ── Stored run ────────────────────────────────────────────
        config, history = load_history(args.from_history)
        print(f"  Loaded {len(history)} generation(s) from {args.from_history}")
        print()
    else:
        # ── 1. Configuration ──────────────────────────────────────
        try:
            config = config_from_args(args).validate()
        except ValueError as exc:
            logger.error("Invalid configuration: %s", exc)
            print(f"  Invalid configuration: {exc}", file=sys.stderr)
            return 2

        print(f"  Domain: ranks=1..{config.num_ranks}  "
              f"bets={config.bet_min:g}..{config.bet_max:g} "
              f"step {config.bet_step:g}  ante={config.ante:g}")
        print()

        # ── 2. Evolution ──────────────────────────────────────────
        print("  ┌─ Phase 1: Evolution ──────────────────────────────┐")
        engine = EvolutionEngine(config)
        history = engine.run()
        print("  └──────────────────────────────────────────────────────┘")
        engine.print_summary()
        print()

        # ── 3. Persistence ────────────────────────────────────────
        if args.history:
            path = save_history(args.history, history, config)
            print(f"  History → {path}")

        if args.json_report:
            Path(args.json_report).write_text(
                json.dumps(engine.summary(), indent=2, default=str)
            )
            print(f"  JSON report → {args.json_report}")

    # ── 4. Visualisation ─────────────────────────────────────────
    print("  ┌─ Phase 2: Dashboard Rendering ────────────────────┐")
    try:
        path = render_dashboard(
            history, config, generation=args.generation,
            output_path=args.output,
        )
    except ValueError as exc:
        print(f"  {exc}", file=sys.stderr)
        return 2
    print(f"  Saved → {path}")
    print("  └──────────────────────────────────────────────────────┘")
    print()
    print("  Done.\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
visualisation.py — Generation Dashboard
========================================

Renders stored snapshots in a dark "technical blueprint" theme:
bet-per-rank bar charts for player A, call/fold heatmaps for player B,
the run trajectory, and a report panel.
"""

from __future__ import annotations

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
from matplotlib.gridspec import GridSpec
from typing import Optional, Sequence

from matplotlib.patches import FancyBboxPatch

from . import analysis
from .domain import EvolutionConfig
from .evolution import GenerationSnapshot


# ── Theme ─────────────────────────────────────────────────────────────

BG_DARK = "#0a0e14"
BG_PANEL = "#111820"
BORDER = "#1e2a38"
GRID = "#172030"
TEXT_PRIMARY = "#e0e8f0"
TEXT_SECONDARY = "#6b7d94"
ACCENT_BLUE = "#4da6ff"
ACCENT_GREEN = "#3ddc84"
ACCENT_AMBER = "#ffab40"


def apply_theme() -> None:
    """Apply the dark technical theme globally."""
    plt.rcParams.update({
        "figure.facecolor": BG_DARK,
        "axes.facecolor": BG_PANEL,
        "axes.edgecolor": BORDER,
        "axes.labelcolor": TEXT_PRIMARY,
        "axes.grid": True,
        "grid.color": GRID,
        "grid.linestyle": "-",
        "grid.alpha": 0.4,
        "grid.linewidth": 0.5,
        "text.color": TEXT_PRIMARY,
        "xtick.color": TEXT_SECONDARY,
        "ytick.color": TEXT_SECONDARY,
        "legend.facecolor": BG_PANEL,
        "legend.edgecolor": BORDER,
        "font.family": "monospace",
        "font.size": 9,
    })


# ── Panel: Bets per Rank ──────────────────────────────────────────────

def plot_bets(
    bets: np.ndarray,
    config: EvolutionConfig,
    ax: plt.Axes,
    title: str,
    colour: str = ACCENT_GREEN,
) -> None:
    """Bar chart of a bet per rank (single strategy or population mean)."""
    ranks = config.ranks
    ax.bar(ranks, bets, color=colour, alpha=0.85, edgecolor=BG_DARK)
    for level in config.bets:
        ax.axhline(level, color=TEXT_SECONDARY, linewidth=0.4,
                   linestyle="--", alpha=0.5)
    ax.set_ylim(0, config.max_bet if config.max_bet > 0 else 1)
    ax.set_xticks(ranks)
    ax.set_xlabel("Player A's Card")
    ax.set_ylabel("Bet")
    ax.set_title(title, fontweight="bold")


# ── Panel: Call Heatmap ───────────────────────────────────────────────

def plot_calls(
    calls: np.ndarray,
    config: EvolutionConfig,
    ax: plt.Axes,
    title: str,
) -> None:
    """Heatmap of call proportion (1 = always call) per rank × bet."""
    im = ax.imshow(
        np.asarray(calls, dtype=float).T, aspect="auto", cmap="inferno",
        vmin=0, vmax=1, origin="lower", interpolation="nearest",
    )
    ax.set_xticks(range(config.num_ranks))
    ax.set_xticklabels([str(r) for r in config.ranks], fontsize=7)
    ax.set_yticks(range(config.num_bets))
    ax.set_yticklabels([f"{b:g}" for b in config.bets], fontsize=7)
    ax.set_xlabel("Player B's Card")
    ax.set_ylabel("Player A's Bet")
    ax.set_title(title, fontweight="bold")
    ax.grid(False)

    cbar = plt.colorbar(im, ax=ax, fraction=0.046, pad=0.04)
    cbar.set_label("Call", fontsize=8)
    cbar.ax.tick_params(labelsize=7)


# ── Panel: Trajectory ─────────────────────────────────────────────────

def plot_trajectory(
    history: Sequence[GenerationSnapshot],
    generation: int,
    ax: plt.Axes,
) -> None:
    """Mean gain of A (left axis) and call rate of B (right axis)."""
    series = analysis.trajectory(history)
    g = series["generation"]

    ax.plot(g, series["mean_gain"], color=ACCENT_BLUE, linewidth=1.3,
            label="Mean gain (A)")
    ax.axhline(0, color=TEXT_SECONDARY, linewidth=0.6, linestyle=":")
    ax.axvline(generation, color=ACCENT_AMBER, linewidth=0.8,
               linestyle="--", alpha=0.7)
    ax.set_xlabel("Generation")
    ax.set_ylabel("Player A's Average Gain/Loss")
    ax.xaxis.set_major_locator(mticker.MaxNLocator(integer=True))

    ax2 = ax.twinx()
    ax2.plot(g, series["call_rate"], color=ACCENT_GREEN, linewidth=1.0,
             linestyle="--", label="Call rate (B)")
    ax2.set_ylim(0, 1)
    ax2.set_ylabel("Proportion of Calls (B)")
    ax2.grid(False)

    lines = ax.get_lines()[:1] + ax2.get_lines()
    ax.legend(lines, [l.get_label() for l in lines], fontsize=7,
              loc="upper right")
    ax.set_title("Run Trajectory", fontweight="bold")


# ── Panel: Report Box ─────────────────────────────────────────────────

def plot_report_box(
    snapshot: GenerationSnapshot,
    config: EvolutionConfig,
    ax: plt.Axes,
) -> None:
    """Styled text panel with generation metrics."""
    ax.axis("off")

    lines = [
        (f"GENERATION {snapshot.generation}", ACCENT_BLUE, 12),
        ("", None, 6),
        (f"  Player A bets on average   {analysis.mean_bet(snapshot):>8.2f}"
         " per hand", TEXT_PRIMARY, 9),
        (f"  Player A gains on average  {analysis.mean_gain(snapshot):>8.2f}"
         " per hand", TEXT_PRIMARY, 9),
        (f"  Player B calls             {analysis.call_rate(snapshot):>8.1%}"
         " of the time", TEXT_PRIMARY, 9),
        ("", None, 4),
        ("  PARAMETERS", TEXT_SECONDARY, 10),
        (f"  Ante {config.ante:g}   Mutation {config.mutation_rate:g}   "
         f"Parents {config.parent_proportion:g}   "
         f"N {config.population_size}", TEXT_PRIMARY, 9),
    ]

    y = 0.92
    for text, colour, size in lines:
        if colour is None:
            y -= 0.04
            continue
        ax.text(
            0.05, y, text,
            transform=ax.transAxes,
            fontsize=size,
            fontfamily="monospace",
            color=colour,
            verticalalignment="top",
        )
        y -= 0.11

    box = FancyBboxPatch(
        (0.02, 0.02), 0.96, 0.96,
        boxstyle="round,pad=0.02",
        facecolor=BG_DARK,
        edgecolor=ACCENT_BLUE,
        linewidth=1.0,
        transform=ax.transAxes,
        zorder=-1,
    )
    ax.add_patch(box)


# ── Master Dashboard ──────────────────────────────────────────────────

def find_snapshot(
    history: Sequence[GenerationSnapshot],
    generation: Optional[int] = None,
) -> GenerationSnapshot:
    """Snapshot for *generation* (default: the last one)."""
    if not history:
        raise ValueError("Snapshot history is empty.")
    if generation is None:
        return history[-1]
    for snap in history:
        if snap.generation == generation:
            return snap
    raise ValueError(
        f"Generation {generation} not in history "
        f"({history[0].generation}..{history[-1].generation})."
    )


def render_dashboard(
    history: Sequence[GenerationSnapshot],
    config: EvolutionConfig,
    generation: Optional[int] = None,
    output_path: str = "evolution_dashboard.png",
    dpi: int = 150,
) -> str:
    """
    Render the 6-panel dashboard for one generation and save it.

    Layout (3 × 2):
      [Best A bets     ] [Best B calls      ]
      [Average A bets  ] [B call proportion ]
      [Trajectory      ] [Report box        ]
    """
    snap = find_snapshot(history, generation)

    apply_theme()
    fig = plt.figure(figsize=(16, 14))
    fig.suptitle(
        "EVOLUTIONARY POKER  ·  Co-evolved Betting & Calling Strategies",
        fontsize=14, fontweight="bold", color=ACCENT_BLUE, y=0.985,
    )

    gs = GridSpec(3, 2, figure=fig, hspace=0.38, wspace=0.28)

    plot_bets(analysis.best_strategy_a(snap), config,
              fig.add_subplot(gs[0, 0]), "Best Strategy for Player A")
    plot_calls(analysis.best_strategy_b(snap), config,
               fig.add_subplot(gs[0, 1]), "Best Strategy for Player B")

    plot_bets(analysis.average_bet_per_rank(snap), config,
              fig.add_subplot(gs[1, 0]), "Average Strategy for Player A",
              colour=ACCENT_BLUE)
    plot_calls(analysis.call_proportion(snap), config,
               fig.add_subplot(gs[1, 1]), "Average Strategy for Player B")

    plot_trajectory(history, snap.generation, fig.add_subplot(gs[2, 0]))
    plot_report_box(snap, config, fig.add_subplot(gs[2, 1]))

    fig.savefig(output_path, dpi=dpi, bbox_inches="tight",
                facecolor=fig.get_facecolor())
    plt.close(fig)
    return output_path

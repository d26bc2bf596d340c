"""Plot generation for session analysis."""

from __future__ import annotations

from pathlib import Path

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from lapcalc.track.models import TrackModel
from lapcalc.tracking.runner import SessionResult

matplotlib.use("Agg")


def _save_dual_format(fig: Figure, out_base: Path) -> None:
    """Write a figure to PNG and PDF with a shared base path.

    Args:
        fig: Figure object to persist.
        out_base: Output path without suffix.
    """
    out_base.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out_base.with_suffix(".png"), dpi=180, bbox_inches="tight")
    fig.savefig(out_base.with_suffix(".pdf"), bbox_inches="tight")


def plot_track_map(track: TrackModel, result: SessionResult, out_base: Path) -> None:
    """Plot the centerline with on-track samples coloured by lap.

    Args:
        track: Track whose centerline is drawn.
        result: Session result providing sample positions.
        out_base: Output path without suffix.
    """
    fig, ax = plt.subplots(figsize=(7, 7))
    ax.plot(track.points[:, 0], track.points[:, 1], color="0.4", lw=1.5, label="Centerline")

    on_track = [record for record in result.records if record.on_track]
    if on_track:
        scatter = ax.scatter(
            [record.x for record in on_track],
            [record.y for record in on_track],
            c=[record.lap_number for record in on_track],
            s=6,
            cmap="viridis",
        )
        fig.colorbar(scatter, ax=ax, label="Lap")

    off_track = [record for record in result.records if not record.on_track]
    if off_track:
        ax.scatter(
            [record.x for record in off_track],
            [record.y for record in off_track],
            marker="x",
            color="tab:red",
            s=12,
            label="Off track",
        )

    ax.set_xlabel("x [m]")
    ax.set_ylabel("y [m]")
    ax.set_title("Track Map")
    ax.set_aspect("equal", adjustable="datalim")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best")
    _save_dual_format(fig, out_base)
    plt.close(fig)


def plot_cross_track(result: SessionResult, out_base: Path) -> None:
    """Plot lateral offset over distance from the start line.

    Args:
        result: Session result providing distances and cross-track offsets.
        out_base: Output path without suffix.
    """
    on_track = [record for record in result.records if record.on_track]
    distance = np.array([record.distance_from_start for record in on_track], dtype=float)
    offset = np.array([record.cross_track for record in on_track], dtype=float)

    fig, ax = plt.subplots(figsize=(9, 4))
    ax.scatter(distance, offset, s=4, alpha=0.7)
    ax.axhline(0.0, color="0.4", lw=1.0)
    ax.set_xlabel("Distance from start [m]")
    ax.set_ylabel("Cross track [m]")
    ax.set_title("Lateral Offset (positive = left)")
    ax.grid(True, alpha=0.3)
    _save_dual_format(fig, out_base)
    plt.close(fig)


def export_standard_plots(track: TrackModel, result: SessionResult, out_dir: str | Path) -> None:
    """Generate and save the standard session analysis plots.

    Args:
        track: Track the session was processed against.
        result: Session result to plot.
        out_dir: Directory where figures are written.
    """
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    plot_track_map(track, result, out / "track_map")
    plot_cross_track(result, out / "cross_track")

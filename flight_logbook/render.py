from __future__ import annotations
from typing import Sequence
import matplotlib.pyplot as plt
import numpy as np

from .domain import GlobePath


def make_paths_figure(paths: Sequence[GlobePath]):
    """
    Map view (lon/lat) of every reduced path, plus altitude along each path.

    Returns a matplotlib Figure; the caller shows or saves it.
    """
    fig, (ax_map, ax_alt) = plt.subplots(
        nrows=2,
        ncols=1,
        figsize=(12, 9),
        gridspec_kw={"height_ratios": [2.0, 1.0]},
    )

    for path in paths:
        coords = np.asarray(path.coords, dtype=float).reshape(-1, 3)
        lat, lon, alt = coords[:, 0], coords[:, 1], coords[:, 2]

        # --- Map ---
        line, = ax_map.plot(lon, lat, linewidth=1.5, label=path.label)
        ax_map.plot(lon[:1], lat[:1], marker="o", color=line.get_color())

        # --- Altitude ---
        ax_alt.plot(np.arange(len(alt)), alt, linewidth=1.5, color=line.get_color())

    ax_map.set_xlabel("Longitude (deg)")
    ax_map.set_ylabel("Latitude (deg)")
    ax_map.grid(True, alpha=0.2)
    if paths:
        ax_map.legend(loc="upper right")

    ax_alt.set_xlabel("Sample")
    ax_alt.set_ylabel("Altitude (globe units)")
    ax_alt.grid(True, alpha=0.2)

    fig.suptitle(f"Flight Paths ({len(paths)} flights)", y=0.995)
    fig.tight_layout(rect=(0.0, 0.0, 1.0, 0.98))
    return fig

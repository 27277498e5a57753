#!/usr/bin/env python3
from __future__ import annotations

import argparse
from datetime import date, timedelta
from typing import List, Optional, Tuple

from calwrap.core.errors import UnsupportedError
from calwrap.engines.astro.moon import moon_phase_fraction_ymd


def _need_numpy():
    try:
        import numpy as np
        return np
    except ImportError as e:
        raise UnsupportedError('Need numpy. Install: pip install "calwrap[diagnostics]"') from e


def _need_matplotlib():
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise UnsupportedError('Need matplotlib. Install: pip install "calwrap[diagnostics]"') from e


def build_series(np, start_year: int, end_year: int) -> Tuple["np.ndarray", "np.ndarray"]:
    """Day offsets since Jan 1 of start_year and the approximate phase for each day."""
    d0 = date(start_year, 1, 1)
    n = (date(end_year + 1, 1, 1) - d0).days
    x = np.arange(n, dtype=int)
    y = np.empty(n, dtype=float)
    for i in range(n):
        d = d0 + timedelta(days=int(i))
        y[i] = moon_phase_fraction_ymd(d.year, d.month, d.day)
    return x, y


def summarize(np, y) -> List[str]:
    return [
        f"days           : {len(y)}",
        f"min / max      : {y.min():.4f} / {y.max():.4f}",
        f"mean           : {y.mean():.4f}",
        f"near-new (<0.1): {int(np.count_nonzero(y < 0.1))}",
    ]


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Scatter plot of the approximate moon phase fraction over a span of years.")
    p.add_argument("start_year", type=int)
    p.add_argument("--end-year", type=int, default=None)
    p.add_argument("--outbase", default="moon_phase_scatter", help="Output base name (writes .png)")
    p.add_argument("--no-plot", action="store_true", help="Only print summary statistics.")
    args = p.parse_args(argv)

    end_year = args.end_year if args.end_year is not None else args.start_year
    np = _need_numpy()
    x, y = build_series(np, args.start_year, end_year)
    for line in summarize(np, y):
        print(line)
    if args.no_plot:
        return 0

    plt = _need_matplotlib()
    fig, ax = plt.subplots(figsize=(9.2, 3.6), constrained_layout=True)
    ax.set_axisbelow(True)
    ax.grid(True, which="major", color="0.88", linewidth=0.7)
    ax.scatter(x, y, s=6, c="tab:blue", linewidths=0.0, alpha=0.6)
    ax.set_xlabel(f"Days since {args.start_year}-01-01")
    ax.set_ylabel("Phase fraction (0 = cycle midpoint)")
    ax.set_title(f"Approximate moon phase {args.start_year}..{end_year}")

    outbase = args.outbase
    fig.savefig(outbase + ".png", dpi=200)
    print(f"Saved: {outbase}.png")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Candlestick chart with zigzag overlay, pattern markers and session shading using mplfinance."""

from typing import Optional

import matplotlib.pyplot as plt
import mplfinance as mpf
import numpy as np
import pandas as pd

from axis_labels import price_bounds
from config import (
    DEFAULT_VIEWPORT_HEIGHT,
    DEFAULT_VIEWPORT_WIDTH,
    PATTERN_MARKER_OFFSET,
    PATTERN_MARKER_SIZE,
    RENDER_DPI,
    SAVE_DPI,
    SHADE_ALPHA,
    SHADE_COLOR,
    ZIGZAG_COLOR,
    ZIGZAG_LINE_WIDTH,
)
from layout_mapper import LayoutConfig, off_market_shading
from models import PatternType
from pipeline import ChartSnapshot


def _pattern_series(snapshot: ChartSnapshot, kind: PatternType) -> pd.Series:
    """Marker prices aligned to the candle index (NaN where no pattern)."""
    df = snapshot.candles
    _, _, rng = price_bounds(df)
    offset = rng * PATTERN_MARKER_OFFSET

    series = pd.Series(np.nan, index=df.index, dtype=float)
    for result in snapshot.patterns:
        if result.type is not kind:
            continue
        ts = pd.Timestamp(result.time)
        if kind is PatternType.BULLISH_ENGULFING:
            series.loc[ts] = df.loc[ts, "Low"] - offset
        else:
            series.loc[ts] = df.loc[ts, "High"] + offset
    return series


def plot_chart(
    snapshot: ChartSnapshot,
    layout: Optional[LayoutConfig] = None,
    savefig: Optional[str] = None,
    show_patterns: bool = True,
    show_zigzag: bool = True,
) -> None:
    """Plot a snapshot's candles with every overlay the pipeline computed.

    Args:
        snapshot: Result of pipeline.run_pipeline.
        layout: Viewport size; converted to a figure size at RENDER_DPI.
        savefig: If provided, save chart to this file path instead of showing.
        show_patterns: Draw engulfing markers.
        show_zigzag: Draw the zigzag line.
    """
    df = snapshot.candles
    layout = layout or LayoutConfig(DEFAULT_VIEWPORT_WIDTH, DEFAULT_VIEWPORT_HEIGHT)
    n = len(df)
    last_x = max(n - 1, 1)

    addplots = []
    if show_patterns:
        for kind, marker, color in (
            (PatternType.BULLISH_ENGULFING, "^", "green"),
            (PatternType.BEARISH_ENGULFING, "v", "red"),
        ):
            series = _pattern_series(snapshot, kind)
            if series.notna().any():
                addplots.append(mpf.make_addplot(
                    series, type="scatter", marker=marker,
                    markersize=PATTERN_MARKER_SIZE, color=color,
                ))

    kwargs = dict(
        type="candle",
        style="charles",
        title=snapshot.price_display,
        figsize=(layout.width / RENDER_DPI, layout.height / RENDER_DPI),
        returnfig=True,
    )
    if addplots:
        kwargs["addplot"] = addplots

    if show_zigzag and len(snapshot.zigzag) >= 2:
        kwargs["alines"] = dict(
            alines=[[(pd.Timestamp(p.time), p.price) for p in snapshot.zigzag]],
            colors=[ZIGZAG_COLOR],
            linewidths=ZIGZAG_LINE_WIDTH,
        )

    fig, axes = mpf.plot(df, **kwargs)
    ax = axes[0]

    # mplfinance places candles at integer x positions 0..n-1
    for band in off_market_shading(df, snapshot.period, layout.width, layout):
        ax.axvspan(band.start_fraction * last_x, band.end_fraction * last_x,
                   color=SHADE_COLOR, alpha=SHADE_ALPHA, zorder=0)

    if snapshot.x_labels:
        ax.set_xticks([lbl.fraction * last_x for lbl in snapshot.x_labels])
        ax.set_xticklabels([lbl.text for lbl in snapshot.x_labels])

    if snapshot.y_labels:
        _, hi, rng = price_bounds(df)
        ax.set_yticks([hi - lbl.fraction * rng for lbl in snapshot.y_labels])
        ax.set_yticklabels([lbl.text for lbl in snapshot.y_labels])

    if savefig:
        fig.savefig(savefig, dpi=SAVE_DPI, bbox_inches="tight")
        plt.close(fig)
    else:
        plt.show()

#!/usr/bin/env python3
"""Synthetic stock chart with zigzag swings and engulfing patterns.

Usage:
    python main.py --symbol AAPL --period 1D --interval 1m --verbose
    python main.py --symbol TSLA --period 1Y --savefig chart.png
    python main.py --symbol SPY --now 2024-03-15T14:05 --seed 7
"""

import argparse
import logging
from datetime import datetime

from config import (
    DEFAULT_INTERVAL,
    DEFAULT_PERIOD,
    DEFAULT_SYMBOLS,
    DEFAULT_VIEWPORT_HEIGHT,
    DEFAULT_VIEWPORT_WIDTH,
    INTERVALS,
    PERIODS,
)
from layout_mapper import LayoutConfig, off_market_shading, to_pixel_x, to_pixel_y
from pipeline import ChartSession
from visualizer import plot_chart


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Synthetic candlestick chart with zigzag and pattern overlays")
    p.add_argument("--symbol", default=DEFAULT_SYMBOLS[0], help="Ticker symbol (seeds the synthetic data)")
    p.add_argument("--period", default=DEFAULT_PERIOD, help=f"Chart period ({', '.join(PERIODS)})")
    p.add_argument("--interval", default=DEFAULT_INTERVAL, help=f"Candle interval (e.g. {', '.join(INTERVALS)})")
    p.add_argument("--now", type=datetime.fromisoformat, default=None, help="Reference time, ISO format (default: now)")
    p.add_argument("--seed", type=int, default=None, help="Override the symbol-derived random seed")
    p.add_argument("--width", type=int, default=DEFAULT_VIEWPORT_WIDTH, help="Viewport width in pixels")
    p.add_argument("--height", type=int, default=DEFAULT_VIEWPORT_HEIGHT, help="Viewport height in pixels")
    p.add_argument("--verbose", action="store_true", help="Print zigzag points, patterns and label positions")
    p.add_argument("--savefig", default=None, help="Save chart to file instead of displaying")
    p.add_argument("--no-plot", action="store_true", help="Only print the summary")
    return p.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    session = ChartSession(args.symbol, args.period, args.interval)
    snap = session.load(now=args.now, seed=args.seed)
    if snap is None:
        return
    df = snap.candles
    layout = LayoutConfig(args.width, args.height)

    # Step 1: Candles
    print(f"Synthesizing {snap.symbol} ({snap.period.value}, {snap.interval_minutes}m candles)...")
    print(f"  {len(df)} candles from {df.index[0]} to {df.index[-1]}")
    print(f"  {snap.price_display}")

    # Step 2: Zigzag
    print(f"  Zigzag points: {len(snap.zigzag)} (threshold={snap.threshold:.4f})")
    if args.verbose:
        for z in snap.zigzag:
            kind = "H" if z.is_high else "L"
            print(f"    {z.time}  {kind}  price={z.price:.2f}")

    # Step 3: Patterns
    print(f"  Patterns: {len(snap.patterns)}")
    if args.verbose:
        for r in snap.patterns:
            print(f"    {r.time}  {r.type.value}")

    # Step 4: Labels and layout
    if args.verbose:
        print("\n  Price labels:")
        for lbl in snap.y_labels:
            print(f"    {lbl.text:>10}  y={to_pixel_y(lbl.fraction, layout.height, layout):.1f}")
        print("  Time labels:")
        for lbl in snap.x_labels:
            print(f"    {lbl.text:>10}  x={to_pixel_x(lbl.fraction, layout.width, layout):.1f}")
        for band in off_market_shading(df, snap.period, layout.width, layout):
            print(f"  Off-market: x={band.x_start:.1f}..{band.x_end:.1f}")

    # Step 5: Visualize
    if args.no_plot:
        return
    plot_chart(snap, layout, args.savefig)
    if args.savefig:
        print(f"\n  Chart saved to {args.savefig}")


if __name__ == "__main__":
    main()

"""Fraction / value → pixel mapping for the chart plot area.

The plot area is the viewport minus fixed margins (left for price labels,
bottom for time labels).  Degenerate viewports are clamped to a 1-pixel
plot area so the maths never divides by zero or goes negative.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

import pandas as pd

from axis_labels import price_bounds, span_minutes
from config import (
    BOTTOM_MARGIN,
    CANDLE_WIDTH_RATIO,
    LEFT_MARGIN,
    MARKET_CLOSE,
    MARKET_OPEN,
    MIN_CANDLE_WIDTH,
    RIGHT_MARGIN,
    TOP_MARGIN,
)
from models import Period

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutConfig:
    width: float
    height: float
    left_margin: float = LEFT_MARGIN
    right_margin: float = RIGHT_MARGIN
    top_margin: float = TOP_MARGIN
    bottom_margin: float = BOTTOM_MARGIN

    @property
    def inner_width(self) -> float:
        return max(1.0, self.width - self.left_margin - self.right_margin)

    @property
    def inner_height(self) -> float:
        return max(1.0, self.height - self.top_margin - self.bottom_margin)


@dataclass(frozen=True)
class ShadeInterval:
    start_fraction: float
    end_fraction: float
    x_start: float
    x_end: float


def _layout(width: float = 0.0, height: float = 0.0, layout: Optional[LayoutConfig] = None) -> LayoutConfig:
    return layout if layout is not None else LayoutConfig(width, height)


def to_pixel_x(fraction: float, viewport_width: float, layout: Optional[LayoutConfig] = None) -> float:
    """Pixel x of a time-axis fraction; a given ``layout`` supplies both width and margins."""
    lay = _layout(viewport_width, 0.0, layout)
    return lay.left_margin + fraction * lay.inner_width


def to_pixel_y(fraction: float, viewport_height: float, layout: Optional[LayoutConfig] = None) -> float:
    """Pixel y of a price-axis fraction (0 = top of the plot area)."""
    lay = _layout(0.0, viewport_height, layout)
    return lay.top_margin + fraction * lay.inner_height


def price_to_fraction(price: float, lo: float, hi: float) -> float:
    """0 at ``hi`` (top), 1 at ``lo`` (bottom)."""
    rng = hi - lo
    if rng <= 0:
        rng = 1.0
    return (hi - price) / rng


def time_to_fraction(time: datetime, start: datetime, end: datetime) -> float:
    """Position of ``time`` between ``start`` and ``end`` (span floored to 1 minute)."""
    return (time - start).total_seconds() / 60.0 / span_minutes(start, end)


def candle_slots(n: int, viewport_width: float, layout: Optional[LayoutConfig] = None) -> List[Tuple[float, float]]:
    """(x centre, body width) for each of ``n`` equally spaced candles."""
    if n <= 0:
        return []
    lay = _layout(viewport_width, 0.0, layout)
    step = lay.inner_width / n
    body = max(MIN_CANDLE_WIDTH, step * CANDLE_WIDTH_RATIO)
    return [(lay.left_margin + step * i + step / 2, body) for i in range(n)]


def _shade(start_frac: float, end_frac: float, lay: LayoutConfig) -> ShadeInterval:
    return ShadeInterval(
        start_fraction=start_frac,
        end_fraction=end_frac,
        x_start=lay.left_margin + start_frac * lay.inner_width,
        x_end=lay.left_margin + end_frac * lay.inner_width,
    )


def off_market_shading(
    candles: pd.DataFrame,
    period: Period,
    viewport_width: float,
    layout: Optional[LayoutConfig] = None,
) -> List[ShadeInterval]:
    """Bands covering the parts of a 1D chart outside regular market hours.

    Market hours are MARKET_OPEN–MARKET_CLOSE local time on the first
    candle's date.  Returns nothing for other periods and for series that
    span no time.
    """
    if Period.parse(period) is not Period.DAY or len(candles) < 2:
        return []

    lay = _layout(viewport_width, 0.0, layout)
    start = candles.index[0].to_pydatetime()
    end = candles.index[-1].to_pydatetime()
    total = (end - start).total_seconds() / 60.0
    if total <= 0:
        return []

    day = start.replace(hour=0, minute=0, second=0, microsecond=0)
    market_open = day + timedelta(hours=MARKET_OPEN[0], minutes=MARKET_OPEN[1])
    market_close = day + timedelta(hours=MARKET_CLOSE[0], minutes=MARKET_CLOSE[1])

    bands = []
    if end <= market_open or start >= market_close:
        bands.append(_shade(0.0, 1.0, lay))
    else:
        if market_open > start:
            bands.append(_shade(0.0, time_to_fraction(market_open, start, end), lay))
        if market_close < end:
            bands.append(_shade(time_to_fraction(market_close, start, end), 1.0, lay))

    logger.debug("Off-market shading: %d band(s) for %s .. %s", len(bands), start, end)
    return bands


def pixel_to_value(
    x: float,
    y: float,
    layout: LayoutConfig,
    candles: pd.DataFrame,
) -> Optional[Tuple[datetime, float]]:
    """Time and price under a pixel (crosshair readout), clamped to the plot area."""
    if candles.empty:
        return None

    fx = min(1.0, max(0.0, (x - layout.left_margin) / layout.inner_width))
    fy = min(1.0, max(0.0, (y - layout.top_margin) / layout.inner_height))

    start = candles.index[0].to_pydatetime()
    end = candles.index[-1].to_pydatetime()
    span = max(timedelta(0), end - start)
    _, hi, rng = price_bounds(candles)

    return start + span * fx, hi - fy * rng

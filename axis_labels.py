"""Axis label planning in normalized fraction space.

Labels are positioned by a fraction of the plot area (0 = top / earliest,
1 = bottom / latest) so they can be placed by any renderer once it knows
its size; see layout_mapper for the fraction → pixel step.

Time-axis granularity depends on the period:
  - 1D: every 5 minutes for spans up to 2 hours, every 30 minutes otherwise
  - 1W: each calendar day, weekday name
  - 1M: each calendar day, MM/DD
  - 1Y: each Monday, month name only when the month changes
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

import pandas as pd

from config import (
    INTRADAY_LABEL_FORMAT,
    MONTH_DAY_LABEL_FORMAT,
    MONTH_LABEL_FORMAT,
    PRICE_LABEL_FORMAT,
    WEEKDAY_LABEL_FORMAT,
    X_TICK_COARSE_MINUTES,
    X_TICK_FINE_MINUTES,
    X_TICK_FINE_SPAN_LIMIT,
    Y_TICKS,
)
from models import LabelItem, Period

logger = logging.getLogger(__name__)


def price_bounds(candles: pd.DataFrame):
    """(min low, max high, range) with a zero range widened to 1."""
    lo = float(candles["Low"].min())
    hi = float(candles["High"].max())
    rng = hi - lo
    if rng <= 0:
        rng = 1.0
    return lo, hi, rng


def span_minutes(start: datetime, end: datetime) -> float:
    """Minutes between two times, floored to 1 so it can be divided by."""
    total = (end - start).total_seconds() / 60.0
    return total if total > 0 else 1.0


def plan_y_labels(candles: pd.DataFrame) -> List[LabelItem]:
    """Price labels at Y_TICKS + 1 equally spaced fractions, top to bottom."""
    if candles.empty:
        return []
    _, hi, rng = price_bounds(candles)

    labels = []
    for t in range(Y_TICKS + 1):
        frac = t / Y_TICKS
        price = hi - frac * rng
        labels.append(LabelItem(PRICE_LABEL_FORMAT.format(price), frac))
    return labels


def _format_tick(tick: datetime, fmt: str) -> Optional[str]:
    try:
        return tick.strftime(fmt)
    except (ValueError, UnicodeError, OverflowError) as exc:
        logger.debug("Could not format tick %s with %r: %s", tick, fmt, exc)
        return None


def _first_tick(start: datetime, step: timedelta, aligned: datetime) -> datetime:
    return aligned + step if aligned < start else aligned


def plan_x_labels(candles: pd.DataFrame, period: Period) -> List[LabelItem]:
    """Time labels for the candle series' span, granularity chosen by period."""
    if candles.empty:
        return []

    period = Period.parse(period)
    start = candles.index[0].to_pydatetime()
    end = candles.index[-1].to_pydatetime()
    total = span_minutes(start, end)
    midnight = start.replace(hour=0, minute=0, second=0, microsecond=0)

    month_change_only = False
    if period is Period.WEEK:
        step, fmt = timedelta(days=1), WEEKDAY_LABEL_FORMAT
        tick = _first_tick(start, step, midnight)
    elif period is Period.MONTH:
        step, fmt = timedelta(days=1), MONTH_DAY_LABEL_FORMAT
        tick = _first_tick(start, step, midnight)
    elif period is Period.YEAR:
        step, fmt = timedelta(days=7), MONTH_LABEL_FORMAT
        month_change_only = True
        # Monday on or after the start date
        monday = midnight + timedelta(days=(7 - midnight.weekday()) % 7)
        tick = _first_tick(start, step, monday)
    else:
        minutes = X_TICK_COARSE_MINUTES
        if end - start <= timedelta(minutes=X_TICK_FINE_SPAN_LIMIT):
            minutes = X_TICK_FINE_MINUTES
        step, fmt = timedelta(minutes=minutes), INTRADAY_LABEL_FORMAT
        aligned = start.replace(minute=(start.minute // minutes) * minutes, second=0, microsecond=0)
        tick = _first_tick(start, step, aligned)

    labels = []
    last_month = None
    while tick <= end:
        if not month_change_only or tick.month != last_month:
            text = _format_tick(tick, fmt)
            if text is not None:
                frac = (tick - start).total_seconds() / 60.0 / total
                labels.append(LabelItem(text, frac))
                last_month = tick.month
        tick += step

    return labels

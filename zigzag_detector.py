"""Zigzag swing detection on OHLC candles.

Walks the candles once with a three-state machine (undefined, seeking a
high, seeking a low).  The running pivot is extended while price keeps
moving in the current direction and is emitted as a swing point once price
reverses by at least ``threshold`` × pivot price.  The threshold is relative,
so the same setting filters swings consistently across price levels.

Two fix-ups make the result always drawable:
  - No reversal at all (flat or tiny moves): a two-point line from the first
    close to the last close.
  - The last swing point is followed by a tail point at the final close so
    the line reaches the right edge of the chart.  The tail's ``is_high`` is
    copied from the previous point and carries no meaning.
"""

import logging
from enum import Enum
from typing import List

import pandas as pd

from config import (
    ZIGZAG_FINE_INTERVALS,
    ZIGZAG_MEDIUM_INTERVALS,
    ZIGZAG_THRESHOLD_1D_FINE,
    ZIGZAG_THRESHOLD_1D_MEDIUM,
    ZIGZAG_THRESHOLD_1D_OTHER,
    ZIGZAG_THRESHOLD_1M,
    ZIGZAG_THRESHOLD_1W,
    ZIGZAG_THRESHOLD_1Y,
    ZIGZAG_THRESHOLD_DEFAULT,
)
from models import Period, ZigzagPoint

logger = logging.getLogger(__name__)


class _State(Enum):
    UNDEFINED = 0
    SEEKING_HIGH = 1
    SEEKING_LOW = 2


def zigzag_threshold(period: Period, interval_minutes: int) -> float:
    """Relative swing threshold for a period / candle interval combination."""
    period = Period.parse(period)
    if period is Period.DAY:
        if interval_minutes in ZIGZAG_FINE_INTERVALS:
            return ZIGZAG_THRESHOLD_1D_FINE
        if interval_minutes in ZIGZAG_MEDIUM_INTERVALS:
            return ZIGZAG_THRESHOLD_1D_MEDIUM
        return ZIGZAG_THRESHOLD_1D_OTHER
    if period is Period.WEEK:
        return ZIGZAG_THRESHOLD_1W
    if period is Period.MONTH:
        return ZIGZAG_THRESHOLD_1M
    if period is Period.YEAR:
        return ZIGZAG_THRESHOLD_1Y
    return ZIGZAG_THRESHOLD_DEFAULT


def detect_zigzag(candles: pd.DataFrame, threshold: float) -> List[ZigzagPoint]:
    """Reduce a candle series to alternating swing highs and lows.

    Args:
        candles: DataFrame with DatetimeIndex and [High, Low, Close] columns.
        threshold: Minimum reversal as a fraction of the pivot price.

    Returns:
        ZigzagPoints in strictly increasing time order.  Empty when the
        series has fewer than two candles.
    """
    n = len(candles)
    if n == 0:
        return []

    times = [ts.to_pydatetime() for ts in candles.index]
    highs = candles["High"].values
    lows = candles["Low"].values
    closes = candles["Close"].values

    points: List[ZigzagPoint] = []
    state = _State.UNDEFINED
    pivot = float(closes[0])
    pivot_time = times[0]

    for i in range(1, n):
        high = float(highs[i])
        low = float(lows[i])

        if state is _State.UNDEFINED:
            if high - pivot >= pivot * threshold:
                points.append(ZigzagPoint(pivot_time, pivot, is_high=False))
                pivot, pivot_time = high, times[i]
                state = _State.SEEKING_HIGH
            elif pivot - low >= pivot * threshold:
                points.append(ZigzagPoint(pivot_time, pivot, is_high=True))
                pivot, pivot_time = low, times[i]
                state = _State.SEEKING_LOW

        elif state is _State.SEEKING_HIGH:
            if high > pivot:
                pivot, pivot_time = high, times[i]
            elif pivot - low >= pivot * threshold:
                points.append(ZigzagPoint(pivot_time, pivot, is_high=True))
                pivot, pivot_time = low, times[i]
                state = _State.SEEKING_LOW

        else:  # SEEKING_LOW
            if low < pivot:
                pivot, pivot_time = low, times[i]
            elif high - pivot >= pivot * threshold:
                points.append(ZigzagPoint(pivot_time, pivot, is_high=False))
                pivot, pivot_time = high, times[i]
                state = _State.SEEKING_HIGH

    if not points and n >= 2:
        points.append(ZigzagPoint(times[0], float(closes[0]), is_high=True))
        points.append(ZigzagPoint(times[-1], float(closes[-1]), is_high=False))

    if points and points[-1].time != times[-1]:
        points.append(ZigzagPoint(times[-1], float(closes[-1]), is_high=points[-1].is_high))

    logger.debug("Zigzag: %d points from %d candles (threshold=%.4f)", len(points), n, threshold)
    return points

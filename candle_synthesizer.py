"""Generate deterministic synthetic OHLC candles for a symbol.

The series is a seeded random walk: each candle opens at the previous close,
spreads high/low around the open by an interval-scaled volatility, and
closes somewhere between low and high.  The seed is derived from the symbol,
so the same (symbol, period, interval, now) always yields the same candles.
"""

import hashlib
import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from config import (
    BASE_PRICE_MIN,
    BASE_PRICE_SPAN,
    FALLBACK_INTERVAL_MINUTES,
    INTRADAY_FULL_WINDOW_MINUTES,
    INTRADAY_MEDIUM_INTERVAL_LIMIT,
    INTRADAY_MEDIUM_WINDOW_MINUTES,
    INTRADAY_SHORT_INTERVAL_LIMIT,
    INTRADAY_SHORT_WINDOW_MINUTES,
    MIN_VOLATILITY,
    MONTH_INTERVAL_MINUTES,
    MONTH_WINDOW_MINUTES,
    SEED_MASK,
    VOLATILITY_DIVISOR,
    WEEK_INTERVAL_MINUTES,
    WEEK_WINDOW_MINUTES,
    YEAR_INTERVAL_MINUTES,
    YEAR_WINDOW_MINUTES,
)
from models import OHLC_COLUMNS, Period

logger = logging.getLogger(__name__)


def parse_interval_minutes(text: Optional[str]) -> int:
    """Parse an interval string such as "5m", "1h" or "15" into minutes.

    Returns FALLBACK_INTERVAL_MINUTES for anything unparseable or <= 0.
    """
    if text is None:
        return FALLBACK_INTERVAL_MINUTES
    s = str(text).strip().lower()
    if not s:
        return FALLBACK_INTERVAL_MINUTES

    multiplier = 1
    if s.endswith("m"):
        s = s[:-1]
    elif s.endswith("h"):
        s = s[:-1]
        multiplier = 60

    try:
        minutes = int(s) * multiplier
    except ValueError:
        logger.debug("Unparseable interval %r, using %d minutes", text, FALLBACK_INTERVAL_MINUTES)
        return FALLBACK_INTERVAL_MINUTES

    if minutes <= 0:
        return FALLBACK_INTERVAL_MINUTES
    return minutes


def resolve_window(period: Period, interval_minutes: int) -> Tuple[int, int, bool]:
    """Pick the visible window and effective candle interval for a period.

    Returns:
        (window_minutes, interval_minutes, anchor_midnight) where
        anchor_midnight is True when the window starts at local midnight of
        ``now`` rather than at ``now - window``.
    """
    period = Period.parse(period)

    if period is Period.WEEK:
        return WEEK_WINDOW_MINUTES, WEEK_INTERVAL_MINUTES, False
    if period is Period.MONTH:
        return MONTH_WINDOW_MINUTES, MONTH_INTERVAL_MINUTES, False
    if period is Period.YEAR:
        return YEAR_WINDOW_MINUTES, YEAR_INTERVAL_MINUTES, False

    # 1D keeps the user-selected interval
    if interval_minutes < INTRADAY_SHORT_INTERVAL_LIMIT:
        window, anchor = INTRADAY_SHORT_WINDOW_MINUTES, False
    elif interval_minutes <= INTRADAY_MEDIUM_INTERVAL_LIMIT:
        window, anchor = INTRADAY_MEDIUM_WINDOW_MINUTES, False
    else:
        window, anchor = INTRADAY_FULL_WINDOW_MINUTES, True

    return window, min(interval_minutes, window), anchor


def symbol_seed(symbol: str) -> int:
    """Stable non-negative seed for a symbol (independent of PYTHONHASHSEED)."""
    digest = hashlib.sha256(symbol.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big") & SEED_MASK


def generate_candles(
    symbol: str,
    period: Period,
    interval: Optional[str],
    now: datetime,
    seed: Optional[int] = None,
) -> pd.DataFrame:
    """Synthesize a candle series.

    Args:
        symbol: Ticker symbol; only used to derive the default seed.
        period: One of 1D/1W/1M/1Y (strings are accepted).
        interval: Free-form interval string, e.g. "3m" or "1h".
            Ignored for 1W/1M/1Y, which force their own interval.
        now: Reference wall-clock time (naive local time).
        seed: Overrides the symbol-derived seed.

    Returns:
        DataFrame with DatetimeIndex and columns [Open, High, Low, Close].
    """
    period = Period.parse(period)
    requested = parse_interval_minutes(interval)
    window, step, anchor_midnight = resolve_window(period, requested)

    count = max(1, window // step)
    if anchor_midnight:
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    else:
        start = now - timedelta(minutes=window)

    if seed is None:
        seed = symbol_seed(symbol)
    rng = np.random.default_rng(seed)

    base_price = BASE_PRICE_MIN + rng.random() * BASE_PRICE_SPAN
    volatility = max(MIN_VOLATILITY, step / VOLATILITY_DIVISOR)

    times = []
    rows = []
    prev_close = base_price
    for i in range(count):
        open_ = prev_close
        high = open_ + rng.random() * volatility
        low = open_ - rng.random() * volatility
        close = low + rng.random() * (high - low)

        times.append(start + timedelta(minutes=i * step))
        rows.append((open_, high, low, close))
        prev_close = close

    logger.debug(
        "Generated %d candles for %s (%s, %dm, window=%dm, seed=%d)",
        count, symbol, period.value, step, window, seed,
    )

    df = pd.DataFrame(rows, columns=OHLC_COLUMNS, index=pd.DatetimeIndex(times, name="Date"))
    return df

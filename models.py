"""Value types shared by the pipeline stages.

Candle series themselves are pandas DataFrames (DatetimeIndex + Open/High/
Low/Close columns); the dataclasses here describe single rows and the
derived sequences computed from a series.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

import pandas as pd

from config import DEFAULT_PERIOD

logger = logging.getLogger(__name__)

OHLC_COLUMNS = ["Open", "High", "Low", "Close"]


class Period(str, Enum):
    DAY = "1D"
    WEEK = "1W"
    MONTH = "1M"
    YEAR = "1Y"

    @classmethod
    def parse(cls, value) -> "Period":
        """Coerce a period string (case-insensitive) to a Period.

        Unknown or empty values fall back to the default period instead of
        raising, matching the rest of the pipeline's input handling.
        """
        if isinstance(value, cls):
            return value
        text = (value or "").strip().upper()
        try:
            return cls(text)
        except ValueError:
            logger.warning("Unknown period %r, using %s", value, DEFAULT_PERIOD)
            return cls(DEFAULT_PERIOD)


class PatternType(Enum):
    NONE = "none"
    BULLISH_ENGULFING = "bullish_engulfing"
    BEARISH_ENGULFING = "bearish_engulfing"


@dataclass(frozen=True)
class OhlcPoint:
    time: datetime
    open: float
    high: float
    low: float
    close: float

    @property
    def is_bullish(self) -> bool:
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        return self.close < self.open


@dataclass(frozen=True)
class ZigzagPoint:
    time: datetime
    price: float
    is_high: bool  # True for a swing high, False for a swing low


@dataclass(frozen=True)
class PatternResult:
    time: datetime  # time of the last candle in the pattern
    type: PatternType


@dataclass(frozen=True)
class LabelItem:
    text: str
    # Position along the axis in [0, 1]: X runs left→right, Y top→bottom.
    fraction: float


def candle_at(df: pd.DataFrame, index: int) -> OhlcPoint:
    """Return row ``index`` of a candle DataFrame as an OhlcPoint."""
    row = df.iloc[index]
    return OhlcPoint(
        time=df.index[index].to_pydatetime(),
        open=float(row["Open"]),
        high=float(row["High"]),
        low=float(row["Low"]),
        close=float(row["Close"]),
    )


def candles_to_frame(points) -> pd.DataFrame:
    """Build a candle DataFrame from an iterable of OhlcPoint."""
    points = list(points)
    index = pd.DatetimeIndex([p.time for p in points], name="Date")
    return pd.DataFrame(
        {
            "Open": [p.open for p in points],
            "High": [p.high for p in points],
            "Low": [p.low for p in points],
            "Close": [p.close for p in points],
        },
        index=index,
        columns=OHLC_COLUMNS,
        dtype=float,
    )

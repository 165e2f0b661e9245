"""One full chart computation and the session that publishes it.

``run_pipeline`` turns (symbol, period, interval, now) into an immutable
ChartSnapshot: candles, zigzag, patterns and both label sets are always
computed together from the same candle series.

``ChartSession`` holds the snapshot a renderer should show.  Every load
takes a generation number; a finished run is only published if no newer
load started in the meantime, so a slow run can never overwrite the result
of a later request.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

import pandas as pd

from axis_labels import plan_x_labels, plan_y_labels
from candle_synthesizer import generate_candles, parse_interval_minutes, resolve_window
from config import DEFAULT_INTERVAL, DEFAULT_PERIOD, DEFAULT_SYMBOLS
from models import LabelItem, PatternResult, Period, ZigzagPoint
from pattern_detector import scan_patterns
from zigzag_detector import detect_zigzag, zigzag_threshold

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ChartSnapshot:
    symbol: str
    period: Period
    interval: str
    interval_minutes: int
    threshold: float
    now: datetime
    candles: pd.DataFrame
    zigzag: Tuple[ZigzagPoint, ...]
    patterns: Tuple[PatternResult, ...]
    x_labels: Tuple[LabelItem, ...]
    y_labels: Tuple[LabelItem, ...]

    @property
    def current_price(self) -> float:
        return float(self.candles["Close"].iloc[-1])

    @property
    def price_display(self) -> str:
        return f"{self.symbol}: {self.current_price:.2f}"


def normalize_symbol(text: Optional[str]) -> Optional[str]:
    """Trim and upper-case a typed symbol; blank input gives None."""
    if text is None or not text.strip():
        return None
    return text.strip().upper()


def floor_to_minute(now: datetime) -> datetime:
    """Drop seconds so reruns within the same minute see the same ``now``."""
    return now.replace(second=0, microsecond=0)


def run_pipeline(
    symbol: str,
    period=DEFAULT_PERIOD,
    interval: Optional[str] = DEFAULT_INTERVAL,
    now: Optional[datetime] = None,
    seed: Optional[int] = None,
) -> ChartSnapshot:
    """Synthesize candles and derive every overlay from them."""
    period = Period.parse(period)
    now = floor_to_minute(now if now is not None else datetime.now())

    candles = generate_candles(symbol, period, interval, now, seed=seed)

    _, interval_minutes, _ = resolve_window(period, parse_interval_minutes(interval))
    threshold = zigzag_threshold(period, interval_minutes)

    snapshot = ChartSnapshot(
        symbol=symbol,
        period=period,
        interval=interval or DEFAULT_INTERVAL,
        interval_minutes=interval_minutes,
        threshold=threshold,
        now=now,
        candles=candles,
        zigzag=tuple(detect_zigzag(candles, threshold)),
        patterns=tuple(scan_patterns(candles)),
        x_labels=tuple(plan_x_labels(candles, period)),
        y_labels=tuple(plan_y_labels(candles)),
    )
    logger.info(
        "%s %s/%s: %d candles, %d zigzag points, %d patterns",
        symbol, period.value, snapshot.interval, len(candles),
        len(snapshot.zigzag), len(snapshot.patterns),
    )
    return snapshot


class ChartSession:
    """Current chart state; loads are serialized and stale runs dropped."""

    def __init__(self, symbol: Optional[str] = None, period=DEFAULT_PERIOD, interval: str = DEFAULT_INTERVAL):
        self._lock = threading.Lock()
        self._generation = 0
        self._snapshot: Optional[ChartSnapshot] = None
        self.symbol = normalize_symbol(symbol) or DEFAULT_SYMBOLS[0]
        self.period = Period.parse(period)
        self.interval = interval

    @property
    def snapshot(self) -> Optional[ChartSnapshot]:
        with self._lock:
            return self._snapshot

    def _begin(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def _publish(self, token: int, snapshot: ChartSnapshot) -> bool:
        with self._lock:
            if token != self._generation:
                logger.debug("Dropping stale run %d (latest is %d)", token, self._generation)
                return False
            self._snapshot = snapshot
            return True

    def load(self, now: Optional[datetime] = None, seed: Optional[int] = None) -> Optional[ChartSnapshot]:
        """Recompute the chart for the current selection.

        Returns the published snapshot, or None if a newer load superseded
        this one before it finished.
        """
        token = self._begin()
        snapshot = run_pipeline(self.symbol, self.period, self.interval, now=now, seed=seed)
        return snapshot if self._publish(token, snapshot) else None

    def set_symbol(self, text: Optional[str], now: Optional[datetime] = None) -> Optional[ChartSnapshot]:
        symbol = normalize_symbol(text)
        if symbol is None:
            return None
        self.symbol = symbol
        return self.load(now=now)

    def set_period(self, period, now: Optional[datetime] = None) -> Optional[ChartSnapshot]:
        self.period = Period.parse(period)
        return self.load(now=now)

    def set_interval(self, interval: str, now: Optional[datetime] = None) -> Optional[ChartSnapshot]:
        self.interval = interval
        return self.load(now=now)

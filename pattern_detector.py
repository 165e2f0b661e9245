"""Candlestick pattern detection.

Each pattern is a small object exposing ``lookback_period`` (how many
candles it inspects, ending at the candle being tested) and
``detect(candles, index)``.  ``scan_patterns`` runs every registered
pattern over every candle, so adding a pattern means adding a class and
registering it; the scan loop never changes.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Iterator, List, Optional

import pandas as pd

from models import PatternResult, PatternType, candle_at

logger = logging.getLogger(__name__)


class CandlestickPattern(ABC):
    @property
    @abstractmethod
    def lookback_period(self) -> int:
        """Number of candles required, including the candle at ``index``."""

    @abstractmethod
    def detect(self, candles: pd.DataFrame, index: int) -> PatternType:
        """Return the pattern ending at ``index``, or PatternType.NONE."""


class EngulfingPattern(CandlestickPattern):
    """Two-candle reversal where the second body covers the first body.

    Bullish: red candle followed by a green candle that opens at or below
    the first body's bottom and closes at or above its top.
    Bearish: the mirror image.
    """

    @property
    def lookback_period(self) -> int:
        return 2

    def detect(self, candles: pd.DataFrame, index: int) -> PatternType:
        if index < self.lookback_period - 1 or index >= len(candles):
            return PatternType.NONE

        c1 = candle_at(candles, index - 1)  # engulfed
        c2 = candle_at(candles, index)      # engulfing

        body1_bottom = min(c1.open, c1.close)
        body1_top = max(c1.open, c1.close)

        if c1.is_bearish and c2.is_bullish:
            if c2.open <= body1_bottom and c2.close >= body1_top:
                return PatternType.BULLISH_ENGULFING

        if c1.is_bullish and c2.is_bearish:
            if c2.open >= body1_top and c2.close <= body1_bottom:
                return PatternType.BEARISH_ENGULFING

        return PatternType.NONE


PATTERN_REGISTRY: List[CandlestickPattern] = [EngulfingPattern()]


def register_pattern(pattern: CandlestickPattern) -> None:
    """Add a detector to the default set used by scan_patterns."""
    if not isinstance(pattern, CandlestickPattern):
        raise TypeError(f"Expected a CandlestickPattern, got {type(pattern).__name__}")
    PATTERN_REGISTRY.append(pattern)


def scan_patterns(
    candles: pd.DataFrame,
    patterns: Optional[Iterable[CandlestickPattern]] = None,
) -> Iterator[PatternResult]:
    """Yield a PatternResult for every pattern occurrence in the series.

    Args:
        candles: DataFrame with DatetimeIndex and [Open, High, Low, Close].
        patterns: Detectors to run; defaults to PATTERN_REGISTRY.
    """
    detectors = list(PATTERN_REGISTRY if patterns is None else patterns)
    found = 0
    for index in range(1, len(candles)):
        for detector in detectors:
            if index < detector.lookback_period - 1:
                continue
            kind = detector.detect(candles, index)
            if kind is PatternType.NONE:
                continue
            found += 1
            yield PatternResult(time=candles.index[index].to_pydatetime(), type=kind)
    logger.debug("Pattern scan: %d match(es) over %d candles", found, len(candles))

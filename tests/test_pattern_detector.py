import logging

import pytest

from models import PatternType
from pattern_detector import (
    PATTERN_REGISTRY,
    CandlestickPattern,
    EngulfingPattern,
    register_pattern,
    scan_patterns,
)


def _ohlc(open_, close):
    return (open_, max(open_, close) + 0.5, min(open_, close) - 0.5, close)


def test_bullish_engulfing(make_candles):
    df = make_candles([_ohlc(10, 9), _ohlc(8, 11)])
    assert EngulfingPattern().detect(df, 1) is PatternType.BULLISH_ENGULFING

    results = list(scan_patterns(df))
    assert len(results) == 1
    assert results[0].type is PatternType.BULLISH_ENGULFING
    assert results[0].time == df.index[1].to_pydatetime()


def test_bearish_engulfing(make_candles):
    df = make_candles([_ohlc(9, 10), _ohlc(11, 8)])
    assert EngulfingPattern().detect(df, 1) is PatternType.BEARISH_ENGULFING


def test_two_green_candles_is_none(make_candles):
    df = make_candles([_ohlc(9, 10), _ohlc(8, 11)])
    assert EngulfingPattern().detect(df, 1) is PatternType.NONE
    assert list(scan_patterns(df)) == []


def test_partial_body_cover_is_none(make_candles):
    # green body opens inside the red body
    df = make_candles([_ohlc(10, 9), _ohlc(9.5, 11)])
    assert EngulfingPattern().detect(df, 1) is PatternType.NONE


def test_equal_bodies_count_as_engulfing(make_candles):
    df = make_candles([_ohlc(10, 9), _ohlc(9, 10)])
    assert EngulfingPattern().detect(df, 1) is PatternType.BULLISH_ENGULFING


def test_index_below_lookback_is_none(make_candles):
    df = make_candles([_ohlc(10, 9), _ohlc(8, 11)])
    assert EngulfingPattern().detect(df, 0) is PatternType.NONE


def test_scan_finds_every_occurrence(make_candles):
    df = make_candles([
        _ohlc(10, 9), _ohlc(8, 11),     # bullish at 1
        _ohlc(11, 12), _ohlc(13, 10),   # bearish at 3
        _ohlc(10, 10.5),
    ])
    results = list(scan_patterns(df))
    assert [r.type for r in results] == [PatternType.BULLISH_ENGULFING, PatternType.BEARISH_ENGULFING]
    assert [r.time for r in results] == [df.index[1].to_pydatetime(), df.index[3].to_pydatetime()]


class _InsideBar(CandlestickPattern):
    """Test-only pattern: current range inside the previous range."""

    @property
    def lookback_period(self):
        return 2

    def detect(self, candles, index):
        prev, cur = candles.iloc[index - 1], candles.iloc[index]
        if cur["High"] < prev["High"] and cur["Low"] > prev["Low"]:
            return PatternType.BULLISH_ENGULFING
        return PatternType.NONE


def test_custom_pattern_plugs_into_scan(make_candles):
    df = make_candles([(10, 12, 8, 11), (11, 11.5, 10.5, 11)])
    results = list(scan_patterns(df, patterns=[_InsideBar()]))
    assert len(results) == 1


def test_register_pattern(monkeypatch):
    monkeypatch.setattr("pattern_detector.PATTERN_REGISTRY", list(PATTERN_REGISTRY))
    import pattern_detector

    register_pattern(_InsideBar())
    assert len(pattern_detector.PATTERN_REGISTRY) == len(PATTERN_REGISTRY) + 1
    with pytest.raises(TypeError):
        register_pattern(object())


def test_scan_on_empty_series(make_candles):
    assert list(scan_patterns(make_candles([]))) == []


def test_scan_logs_match_count(make_candles, caplog):
    caplog.set_level(logging.DEBUG, logger="pattern_detector")
    list(scan_patterns(make_candles([_ohlc(10, 9), _ohlc(8, 11)])))
    assert any("1 match(es) over 2 candles" in r.getMessage() for r in caplog.records)

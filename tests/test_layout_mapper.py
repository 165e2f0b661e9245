import logging
from datetime import datetime

import pytest

from layout_mapper import (
    LayoutConfig,
    candle_slots,
    off_market_shading,
    pixel_to_value,
    price_to_fraction,
    time_to_fraction,
    to_pixel_x,
    to_pixel_y,
)
from models import Period


def test_pixel_mapping_uses_fixed_margins():
    assert to_pixel_x(0.0, 868) == 60.0
    assert to_pixel_x(1.0, 868) == 860.0
    assert to_pixel_x(0.5, 868) == 460.0
    assert to_pixel_y(0.0, 536) == 8.0
    assert to_pixel_y(1.0, 536) == 508.0


def test_degenerate_viewport_is_clamped():
    assert to_pixel_x(1.0, 0) == 61.0
    assert to_pixel_y(1.0, 10) == 9.0
    lay = LayoutConfig(0, 0)
    assert lay.inner_width == 1.0 and lay.inner_height == 1.0


def test_custom_layout_margins():
    lay = LayoutConfig(200, 100, left_margin=0, right_margin=0, top_margin=0, bottom_margin=0)
    assert to_pixel_x(0.25, 200, lay) == 50.0
    assert to_pixel_y(0.5, 100, lay) == 50.0


def test_price_and_time_fractions():
    assert price_to_fraction(110, 90, 110) == 0.0
    assert price_to_fraction(90, 90, 110) == 1.0
    assert price_to_fraction(5, 5, 5) == 0.0
    start, end = datetime(2024, 1, 1, 10, 0), datetime(2024, 1, 1, 12, 0)
    assert time_to_fraction(datetime(2024, 1, 1, 11, 0), start, end) == 0.5
    assert time_to_fraction(start, start, start) == 0.0


def test_candle_slots():
    slots = candle_slots(4, 868)
    assert [x for x, _ in slots] == [160.0, 360.0, 560.0, 760.0]
    assert slots[0][1] == pytest.approx(120.0)
    assert candle_slots(1000, 100)[0][1] == 2.0
    assert candle_slots(0, 868) == []


def _day(make_candles, start, n, step):
    return make_candles([(100, 101, 99, 100)] * n, start=start, step_minutes=step)


def test_shading_full_day_has_pre_and_post_market(make_candles):
    df = _day(make_candles, datetime(2024, 3, 15, 0, 0), 25, 60)  # 00:00 .. next day 00:00
    bands = off_market_shading(df, Period.DAY, 868)
    assert len(bands) == 2
    pre, post = bands
    assert pre.start_fraction == 0.0
    assert pre.end_fraction == pytest.approx(9.5 / 24)
    assert post.start_fraction == pytest.approx(16 / 24)
    assert post.end_fraction == 1.0
    assert pre.x_start == 60.0
    assert post.x_end == 860.0


def test_shading_inside_market_hours_is_empty(make_candles):
    df = _day(make_candles, datetime(2024, 3, 15, 10, 0), 120, 1)
    assert off_market_shading(df, Period.DAY, 868) == []


def test_shading_only_post_market(make_candles):
    df = _day(make_candles, datetime(2024, 3, 15, 14, 0), 5, 60)  # 14:00 .. 18:00
    bands = off_market_shading(df, Period.DAY, 868)
    assert len(bands) == 1
    assert bands[0].start_fraction == pytest.approx(0.5)
    assert bands[0].x_start == pytest.approx(460.0)


def test_shading_whole_chart_outside_market(make_candles):
    df = _day(make_candles, datetime(2024, 3, 15, 18, 0), 120, 1)
    bands = off_market_shading(df, Period.DAY, 868)
    assert len(bands) == 1
    assert (bands[0].start_fraction, bands[0].end_fraction) == (0.0, 1.0)
    assert (bands[0].x_start, bands[0].x_end) == (60.0, 860.0)


def test_shading_only_for_one_day_period(make_candles):
    df = _day(make_candles, datetime(2024, 3, 15, 0, 0), 25, 60)
    assert off_market_shading(df, Period.WEEK, 868) == []
    assert off_market_shading(df.iloc[:1], Period.DAY, 868) == []


def test_pixel_to_value_round_trips_plot_corners(make_candles):
    df = make_candles([(100, 110, 95, 105), (105, 108, 90, 92)], start=datetime(2024, 3, 15, 10, 0))
    lay = LayoutConfig(868, 536)

    t, price = pixel_to_value(60, 8, lay, df)
    assert t == datetime(2024, 3, 15, 10, 0)
    assert price == 110.0

    t, price = pixel_to_value(10_000, 10_000, lay, df)
    assert t == datetime(2024, 3, 15, 10, 1)
    assert price == 90.0

    assert pixel_to_value(0, 0, lay, df.iloc[:0]) is None


def test_layout_width_and_height_win_over_viewport_argument():
    lay = LayoutConfig(200, 100, left_margin=0, right_margin=0, top_margin=0, bottom_margin=0)
    assert to_pixel_x(1.0, 999, lay) == 200.0
    assert to_pixel_y(1.0, 999, lay) == 100.0
    assert to_pixel_x(0.5, 999, lay) == candle_slots(1, 999, lay)[0][0]


def test_shading_logs_band_count(make_candles, caplog):
    caplog.set_level(logging.DEBUG, logger="layout_mapper")
    off_market_shading(_day(make_candles, datetime(2024, 3, 15, 0, 0), 25, 60), Period.DAY, 868)
    assert any("2 band(s)" in r.getMessage() for r in caplog.records)

from datetime import datetime

import matplotlib

matplotlib.use("Agg")

from layout_mapper import LayoutConfig  # noqa: E402
from models import PatternType  # noqa: E402
from pipeline import run_pipeline  # noqa: E402
from visualizer import _pattern_series, plot_chart  # noqa: E402

NOW = datetime(2024, 3, 15, 14, 7)


def test_plot_chart_saves_png(tmp_path):
    snap = run_pipeline("AAPL", "1D", "2h", now=NOW)
    out = tmp_path / "chart.png"
    plot_chart(snap, LayoutConfig(800, 500), savefig=str(out))
    assert out.exists() and out.stat().st_size > 0


def test_pattern_series_marks_only_pattern_candles():
    snap = run_pipeline("MSFT", "1W", "1h", now=NOW)
    bullish = _pattern_series(snap, PatternType.BULLISH_ENGULFING)
    expected = sum(1 for p in snap.patterns if p.type is PatternType.BULLISH_ENGULFING)
    assert int(bullish.notna().sum()) == expected
    assert len(bullish) == len(snap.candles)

from datetime import datetime, timedelta

import pytest

from models import OhlcPoint, candles_to_frame


@pytest.fixture
def make_candles():
    """Build a candle DataFrame from (open, high, low, close) tuples, one minute apart."""

    def _make(rows, start=datetime(2024, 3, 15, 10, 0), step_minutes=1):
        return candles_to_frame(
            OhlcPoint(start + timedelta(minutes=i * step_minutes), *row)
            for i, row in enumerate(rows)
        )

    return _make

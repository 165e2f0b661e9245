"""Constants for the synthetic chart: windows, swing thresholds, margins, formats.

Grouped by the module that reads them.  The margin block is read by both
the label planner and the pixel mapper, so labels and gridlines line up.
"""

# ──────────────────────────────────────────────────────────────────────
# CLI / main.py defaults
# ──────────────────────────────────────────────────────────────────────

# Symbols offered by default; the first one is loaded on start-up.
DEFAULT_SYMBOLS = (
    "SPY", "QQQ", "AMZN", "AAPL", "NVDA", "GOOGL",
    "HOOD", "MSFT", "META", "NFLX", "TSLA",
)

# Selectable interval and period strings.
INTERVALS = ("1m", "2m", "3m", "5m", "15m", "30m", "1h")
PERIODS = ("1D", "1W", "1M", "1Y")

DEFAULT_INTERVAL = "3m"
DEFAULT_PERIOD = "1D"

# Default viewport (pixels) used when no renderer size is known.
DEFAULT_VIEWPORT_WIDTH = 1200
DEFAULT_VIEWPORT_HEIGHT = 700

# ──────────────────────────────────────────────────────────────────────
# Candle synthesizer  (candle_synthesizer.py)
# ──────────────────────────────────────────────────────────────────────

# Unparseable or non-positive interval strings fall back to this.
FALLBACK_INTERVAL_MINUTES = 3

# 1D window selection: intervals below SHORT_LIMIT get a 2-hour window,
# intervals up to MEDIUM_LIMIT (inclusive) an 8-hour window, anything
# larger a full day anchored to local midnight.
INTRADAY_SHORT_INTERVAL_LIMIT = 15
INTRADAY_MEDIUM_INTERVAL_LIMIT = 60
INTRADAY_SHORT_WINDOW_MINUTES = 2 * 60
INTRADAY_MEDIUM_WINDOW_MINUTES = 8 * 60
INTRADAY_FULL_WINDOW_MINUTES = 24 * 60

# Fixed windows and forced candle intervals for the longer periods.
WEEK_WINDOW_MINUTES = 7 * 24 * 60
WEEK_INTERVAL_MINUTES = 60
MONTH_WINDOW_MINUTES = 30 * 24 * 60
MONTH_INTERVAL_MINUTES = 24 * 60
YEAR_WINDOW_MINUTES = 365 * 24 * 60
YEAR_INTERVAL_MINUTES = 7 * 24 * 60

# Starting price is drawn uniformly from [BASE_PRICE_MIN, BASE_PRICE_MIN + SPAN).
BASE_PRICE_MIN = 100.0
BASE_PRICE_SPAN = 400.0

# Per-candle volatility = max(MIN_VOLATILITY, interval_minutes / DIVISOR).
MIN_VOLATILITY = 0.1
VOLATILITY_DIVISOR = 3.0

# Seeds are masked to 31 bits so they stay non-negative everywhere.
SEED_MASK = 0x7FFFFFFF

# ──────────────────────────────────────────────────────────────────────
# Zigzag  (zigzag_detector.py)
# ──────────────────────────────────────────────────────────────────────

# Relative swing filter: a reversal must move at least
# threshold × pivot_price away from the current pivot.
ZIGZAG_THRESHOLD_1D_FINE = 0.0023      # 1m, 2m
ZIGZAG_THRESHOLD_1D_MEDIUM = 0.0020    # 3m, 5m, 15m
ZIGZAG_THRESHOLD_1D_OTHER = 0.010
ZIGZAG_THRESHOLD_1W = 0.10
ZIGZAG_THRESHOLD_1M = 0.060
ZIGZAG_THRESHOLD_1Y = 0.100
ZIGZAG_THRESHOLD_DEFAULT = 0.010

ZIGZAG_FINE_INTERVALS = (1, 2)
ZIGZAG_MEDIUM_INTERVALS = (3, 5, 15)

# ──────────────────────────────────────────────────────────────────────
# Axis labels  (axis_labels.py)
# ──────────────────────────────────────────────────────────────────────

# Price axis: Y_TICKS equal steps → Y_TICKS + 1 labels.
Y_TICKS = 5
PRICE_LABEL_FORMAT = "{:.2f}"

# 1D time axis: 5-minute ticks when the visible span is at most
# FINE_SPAN_LIMIT minutes, 30-minute ticks otherwise.
X_TICK_FINE_SPAN_LIMIT = 120
X_TICK_FINE_MINUTES = 5
X_TICK_COARSE_MINUTES = 30

INTRADAY_LABEL_FORMAT = "%H:%M"
WEEKDAY_LABEL_FORMAT = "%a"
MONTH_DAY_LABEL_FORMAT = "%m/%d"
MONTH_LABEL_FORMAT = "%b"

# ──────────────────────────────────────────────────────────────────────
# Layout  (layout_mapper.py) — shared with axis_labels fraction space
# ──────────────────────────────────────────────────────────────────────

# Fixed plot margins (pixels).  The label planner works in fractions of
# the area inside these margins, so both sides must use the same values.
LEFT_MARGIN = 60.0
RIGHT_MARGIN = 8.0
TOP_MARGIN = 8.0
BOTTOM_MARGIN = 28.0

# Candle body = max(MIN_CANDLE_WIDTH, CANDLE_WIDTH_RATIO × slot width).
CANDLE_WIDTH_RATIO = 0.6
MIN_CANDLE_WIDTH = 2.0

# Regular session (local time) used for 1D off-market shading.
MARKET_OPEN = (9, 30)
MARKET_CLOSE = (16, 0)

# ──────────────────────────────────────────────────────────────────────
# Visualiser  (visualizer.py)
# ──────────────────────────────────────────────────────────────────────

# Pixels per inch used to turn a viewport size into a figure size.
RENDER_DPI = 100
SAVE_DPI = 150
ZIGZAG_LINE_WIDTH = 1.2
ZIGZAG_COLOR = "royalblue"
PATTERN_MARKER_SIZE = 80
# Pattern markers sit this fraction of the price range beyond the wick.
PATTERN_MARKER_OFFSET = 0.02
SHADE_COLOR = "lightgray"
SHADE_ALPHA = 0.35

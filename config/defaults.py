"""Default configuration constants for the Phone Inventory Assignment engine."""

# Factor ratios (relative shares; rescaled to sum 100 before weighting)
DEFAULT_RATIOS = {
    "turnover_rate": 30,
    "store_count": 25,
    "remaining_inventory": 25,
    "sales_volume": 20,
}

FACTOR_KEYS = ["turnover_rate", "store_count", "remaining_inventory", "sales_volume"]

FACTOR_LABELS = {
    "turnover_rate": "Turnover Rate",
    "store_count": "Store Count",
    "remaining_inventory": "Inventory Score",
    "sales_volume": "Sales Volume",
}

# Fallback policies
NEUTRAL_SCORE = 50.0            # Raw score for agents with no data for a model/color
ZERO_DENOMINATOR_RESULT = 0.0   # Turnover rate when sales + inventory == 0
EQUAL_SPREAD_SCORE = 50.0       # Relative inventory score when the population is flat

# Source data markers (matched case-insensitively)
INACTIVE_STORE_STATUSES = ("미사용", "inactive", "unused")
NORMAL_INVENTORY_STATUSES = ("정상", "normal")
PREPAID_MARKERS = ("선불", "prepaid")

# Activity periods
CURRENT_PERIOD = "current"
PREVIOUS_PERIOD = "previous"

# Score cache
SCORE_CACHE_TTL_SECONDS = 300   # 5 minutes
SCORE_CACHE_MAX_SIZE = 100

# Snapshot fetch fan-out
FETCH_MAX_WORKERS = 4

# Assignment history
MAX_HISTORY_COUNT = 50
TREND_WINDOW = 5
TREND_UP_FACTOR = 1.1
TREND_DOWN_FACTOR = 0.9

# Comparison views
COMPARISON_TYPES = ["overall", "agent", "office", "department", "model"]

# Logging
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_LEVEL = "INFO"

# Placeholder for agents without an office/department
UNASSIGNED_GROUP = "Unassigned"

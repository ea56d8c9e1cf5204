import logging
import os

# ===== Dataset =====
DATA_PATH = os.environ.get("SALES_DATA_PATH", "SalesDatasets/weekly_sales.csv")
REQUIRED_COLUMNS = ("Store", "Week", "Weekly_Sales")

# ===== Calendar approximation =====
WEEKS_PER_YEAR = 52
WEEKS_PER_MONTH = 4
MONTHS_PER_YEAR = 12

# ===== Forecast defaults =====
MIN_HISTORY = 2
# Differencing is capped so short histories keep enough points to fit
MAX_DIFFERENCING = 2
MIN_DIFFERENCED_POINTS = 3
DEFAULT_HORIZON = 20
MIN_HORIZON, MAX_HORIZON = 2, 52
DEFAULT_CONFIDENCE = 0.80
MAX_CONFIDENCE = 0.95
CONFIDENCE_STEP = 0.05
MONTHLY_HORIZON = 12

# ===== Logging =====
LOG_LEVEL = os.environ.get("SALES_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level=None):
    level_name = (level or LOG_LEVEL).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
    # pmdarima/statsmodels are chatty at INFO while searching orders
    logging.getLogger("pmdarima").setLevel(logging.WARNING)

import logging

import pandas as pd

from config import REQUIRED_COLUMNS

logger = logging.getLogger(__name__)


class DatasetError(ValueError):
    """Raised when the sales dataset does not have the expected shape."""


# ===== Load dataset =====
def load_sales(source):
    """Read the weekly sales CSV (local path or URL) into a DataFrame ordered by store and week."""
    df = pd.read_csv(source)

    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        raise DatasetError(f"Sales dataset {source} is missing column(s): {', '.join(missing)}")

    df = df[list(REQUIRED_COLUMNS)].astype({"Store": int, "Week": int, "Weekly_Sales": float})
    df = df.sort_values(["Store", "Week"]).reset_index(drop=True)
    logger.info("Loaded %d sales rows for %d stores from %s", len(df), df["Store"].nunique(), source)
    return df


def store_ids(sales):
    return sorted(int(store) for store in sales["Store"].unique())


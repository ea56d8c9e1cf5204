"""Filter, fit, forecast and reshape weekly store sales for charting.

Every report panel follows the same path: take one store's weekly sales,
fit an automatically selected (seasonal) ARIMA model and reshape the
forecast into frames that plot directly next to the actual series.
"""
import logging
from collections import namedtuple

import numpy as np
import pandas as pd
from pmdarima import auto_arima

from config import (
    MAX_CONFIDENCE,
    MAX_DIFFERENCING,
    MIN_DIFFERENCED_POINTS,
    MIN_HISTORY,
    MONTHS_PER_YEAR,
    WEEKS_PER_MONTH,
    WEEKS_PER_YEAR,
)

logger = logging.getLogger(__name__)

ACTUAL = "Actual"
PREDICTED = "Predicted"

TargetWeekForecast = namedtuple("TargetWeekForecast", ["week", "predicted", "lower", "upper", "actual"])


class InsufficientDataError(ValueError):
    """Raised when a series is too short to fit a model on."""

    def __init__(self, length, minimum=MIN_HISTORY):
        self.length = length
        self.minimum = minimum
        super().__init__(f"Insufficient data: {length} observation(s), at least {minimum} needed")


# ===== Series preparation =====
def to_time_series(values) -> pd.Series:
    """Wrap an ordered sequence of sales as a series indexed by period 1..n.

    Source labels (e.g. week numbers) are dropped: gaps in the source shift
    later values down rather than leaving holes.
    """
    data = np.asarray(values, dtype=float).ravel()
    return pd.Series(data, index=pd.RangeIndex(1, len(data) + 1, name="period"), name="sales")


def store_series(sales: pd.DataFrame, store: int) -> pd.Series:
    rows = sales[sales["Store"] == store].sort_values("Week")
    return to_time_series(rows["Weekly_Sales"].to_numpy())


def has_enough_history(series) -> bool:
    return len(series) >= MIN_HISTORY


def ensure_history(series):
    if not has_enough_history(series):
        raise InsufficientDataError(len(series))


def max_differencing(length: int) -> int:
    """Highest non-seasonal differencing order that leaves ``MIN_DIFFERENCED_POINTS`` to fit on."""
    return max(0, min(MAX_DIFFERENCING, length - MIN_DIFFERENCED_POINTS))


# ===== ForecastSeriesBuilder =====
def build_forecast(series, horizon: int, confidence: float = 0.0, seasonal_period: int = WEEKS_PER_YEAR) -> pd.DataFrame:
    """Fit an auto-selected ARIMA model and forecast ``horizon`` periods ahead.

    Args:
        series: ordered sales history, at least two observations.
        horizon: number of future periods, >= 1.
        confidence: prediction interval level in [0, 0.95]; 0 skips the bounds.
        seasonal_period: periods per seasonal cycle (52 weekly, 12 monthly).

    Returns:
        DataFrame with ``period`` and ``forecast`` columns, plus ``lower`` and
        ``upper`` when ``confidence`` > 0. Periods continue right after the
        last period of ``series``.

    Raises:
        InsufficientDataError: history shorter than two observations. Checked
            before any fitting happens.
        ValueError: invalid horizon or confidence.
    """
    if int(horizon) != horizon or horizon < 1:
        raise ValueError(f"horizon must be a positive integer, got {horizon!r}")
    if not 0 <= confidence <= MAX_CONFIDENCE:
        raise ValueError(f"confidence must be within [0, {MAX_CONFIDENCE}], got {confidence!r}")

    history = to_time_series(series)
    ensure_history(history)
    horizon = int(horizon)

    # Seasonal terms need at least two full cycles to estimate
    seasonal = seasonal_period > 1 and len(history) >= 2 * seasonal_period
    max_d = max_differencing(len(history))
    # A zero cap is passed as a fixed d so no differencing test runs
    differencing = {"max_d": max_d} if max_d > 0 else {"d": 0}
    logger.debug("Fitting auto_arima on %d periods (seasonal=%s, m=%d, max_d=%d)", len(history), seasonal, seasonal_period, max_d)
    try:
        model = auto_arima(
            history.to_numpy(),
            seasonal=seasonal,
            m=seasonal_period if seasonal else 1,
            **differencing,
            stepwise=True,
            error_action="ignore",
            suppress_warnings=True,
            trace=False,
        )
    except Exception:
        logger.exception("auto_arima failed on %d periods", len(history))
        raise
    logger.info("Selected ARIMA%s%s", model.order, model.seasonal_order if seasonal else "")

    periods = np.arange(len(history) + 1, len(history) + horizon + 1)
    if confidence > 0:
        point, bounds = model.predict(n_periods=horizon, return_conf_int=True, alpha=1 - confidence)
        bounds = np.asarray(bounds, dtype=float)
        return pd.DataFrame({
            "period": periods,
            "forecast": np.asarray(point, dtype=float),
            "lower": bounds[:, 0],
            "upper": bounds[:, 1],
        })

    point = model.predict(n_periods=horizon)
    return pd.DataFrame({"period": periods, "forecast": np.asarray(point, dtype=float)})


# ===== ActualVsForecastCombiner =====
def trailing_window(series: pd.Series, end_period: int, length: int = WEEKS_PER_YEAR) -> pd.Series:
    start = max(1, end_period - length + 1)
    return series.loc[start:end_period]


def combine_actual_and_forecast(actual: pd.Series, forecast: pd.DataFrame) -> pd.DataFrame:
    """Stack actual values and a forecast continuation into one tagged frame.

    The frame has ``period``, ``value`` and ``series`` (Actual/Predicted)
    columns, ordered by period.
    """
    last_actual = int(actual.index[-1])
    first_predicted = int(forecast["period"].iloc[0])
    if first_predicted != last_actual + 1:
        raise ValueError(
            f"Forecast must start right after the actual series: expected period {last_actual + 1}, got {first_predicted}"
        )

    actual_part = pd.DataFrame({"period": actual.index.to_numpy(), "value": actual.to_numpy(), "series": ACTUAL})
    predicted_part = pd.DataFrame({"period": forecast["period"].to_numpy(), "value": forecast["forecast"].to_numpy(), "series": PREDICTED})
    return pd.concat([actual_part, predicted_part], ignore_index=True)


def actual_vs_forecast(series, reference_period: int, horizon: int, window: int = WEEKS_PER_YEAR, confidence: float = 0.0) -> pd.DataFrame:
    full = to_time_series(series)
    history = full.loc[:reference_period]
    ensure_history(history)
    if reference_period > len(full):
        raise ValueError(f"reference period {reference_period} is past the last observed period {len(full)}")

    forecast = build_forecast(history, horizon, confidence)
    return combine_actual_and_forecast(trailing_window(history, reference_period, window), forecast)


# ===== Single target week =====
def forecast_target_week(series, target_week: int, confidence: float = 0.0) -> TargetWeekForecast:
    """Forecast one week from the weeks before it.

    The actual value is attached when the target week has been observed.
    """
    full = to_time_series(series)
    history = full.loc[:target_week - 1]
    ensure_history(history)

    forecast = build_forecast(history, 1, confidence)
    row = forecast.iloc[0]
    actual = float(full.loc[target_week]) if target_week in full.index else None
    return TargetWeekForecast(
        week=int(row["period"]),
        predicted=float(row["forecast"]),
        lower=float(row["lower"]) if "lower" in forecast else None,
        upper=float(row["upper"]) if "upper" in forecast else None,
        actual=actual,
    )


# ===== Monthly aggregation =====
def aggregate_monthly(series, weeks_per_month: int = WEEKS_PER_MONTH) -> pd.Series:
    """Sum consecutive blocks of weeks into months; a partial last block is dropped."""
    weekly = to_time_series(series).to_numpy()
    months = len(weekly) // weeks_per_month
    totals = weekly[:months * weeks_per_month].reshape(months, weeks_per_month).sum(axis=1)
    return to_time_series(totals)


def forecast_monthly(series, horizon: int = MONTHS_PER_YEAR, confidence: float = 0.0) -> pd.DataFrame:
    return build_forecast(aggregate_monthly(series), horizon, confidence, seasonal_period=MONTHS_PER_YEAR)

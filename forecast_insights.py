import numpy as np

# ===== Dynamic Analysis =====
# Plain-language reading of a forecast for non-technical users:
#   is the store heading up or down, how bumpy is the path,
#   and how far is it from the same weeks last year.

VOLATILITY_LEVELS = ((30, "highly volatile"), (10, "moderately volatile"))
DIVERGENCE_LEVELS = ((20, "significantly different"), (10, "slightly different"))


def percent_of(change, base):
    """``change`` as a percentage of ``base``; a zero base reads as no change."""
    return abs(change) / abs(base) * 100 if base != 0 else 0.0


def grade(pct, levels, default):
    return next((label for threshold, label in levels if pct > threshold), default)


# Trend detection
def detect_trend(forecast):
    values = np.asarray(forecast, dtype=float)
    step = np.sign(values[-1] - values[0])
    return {1: "increasing", -1: "decreasing"}.get(step, "stable")


# Volatility detection: peak-to-trough spread relative to the lowest week
def detect_volatility(forecast):
    values = np.asarray(forecast, dtype=float)
    return grade(percent_of(np.ptp(values), values.min()), VOLATILITY_LEVELS, "stable")


# Year-over-year comparison (divergence detection)
def compare_to_last_year(forecast, last_year):
    forecast_mean = np.asarray(forecast, dtype=float).mean()
    last_year_mean = np.asarray(last_year, dtype=float).mean()
    avg = (forecast_mean + last_year_mean) / 2
    return grade(percent_of(forecast_mean - last_year_mean, avg), DIVERGENCE_LEVELS, "similar")

# ===== Import =====
import logging

import matplotlib.pyplot as plt  # For forecast ribbons and bar charts
import streamlit as st  # For the interactive report

from config import (
    CONFIDENCE_STEP,
    DATA_PATH,
    DEFAULT_CONFIDENCE,
    DEFAULT_HORIZON,
    MAX_CONFIDENCE,
    MAX_HORIZON,
    MIN_HORIZON,
    MONTHLY_HORIZON,
    MONTHS_PER_YEAR,
    WEEKS_PER_YEAR,
    configure_logging,
)
from forecast_insights import compare_to_last_year, detect_trend, detect_volatility
from forecast_series import (
    ACTUAL,
    PREDICTED,
    InsufficientDataError,
    actual_vs_forecast,
    aggregate_monthly,
    build_forecast,
    combine_actual_and_forecast,
    forecast_monthly,
    forecast_target_week,
    has_enough_history,
    store_series,
    trailing_window,
)
from formatting import format_sales, sales_axis_formatter
from sales_data import load_sales, store_ids

configure_logging()
logger = logging.getLogger("sales_trends")

INSUFFICIENT_DATA_MESSAGE = "Insufficient data to forecast: at least 2 weeks of history are needed."
SERIES_COLORS = {ACTUAL: "tab:blue", PREDICTED: "tab:orange"}


# ===== Load dataset =====
# Loaded once per process and shared read-only across reruns; forecasts are never cached.
@st.cache_resource
def get_sales(path):
    return load_sales(path)


sales = get_sales(DATA_PATH)

# ===== Streamlit App ======
st.title("📈 Store Weekly Sales Forecasting")

# ----- Controls -----
store = st.sidebar.selectbox("Select Store", store_ids(sales))
series = store_series(sales, store)
# Controls count weeks the way the forecasts do: observed weeks 1..n
weeks_observed = len(series)

horizon = st.sidebar.slider("Forecast horizon (weeks)", MIN_HORIZON, MAX_HORIZON, DEFAULT_HORIZON)
confidence = st.sidebar.slider("Confidence level", 0.0, MAX_CONFIDENCE, DEFAULT_CONFIDENCE, CONFIDENCE_STEP)
target_week = st.sidebar.number_input(
    "Target week",
    min_value=2,
    max_value=max(2, weeks_observed + 1),
    value=max(2, weeks_observed + 1),
    step=1,
)
upcoming = st.sidebar.selectbox(
    "Upcoming week",
    list(range(1, horizon + 1)),
    format_func=lambda ahead: f"Week {weeks_observed + ahead} ({ahead} ahead)",
)

logger.debug("Store %s: %d weeks, horizon=%d, confidence=%.2f", store, len(series), horizon, confidence)


def new_axes():
    fig, ax = plt.subplots(figsize=(10, 4))
    ax.yaxis.set_major_formatter(sales_axis_formatter())
    ax.grid(True, alpha=0.3)
    return fig, ax


def show(fig):
    st.pyplot(fig)
    plt.close(fig)


# Plot historical sales
st.subheader(f"Historical Weekly Sales: Store {store}")
st.line_chart(series.rename("Weekly Sales"))

# ===== Forecast with confidence ribbon =====
st.subheader(f"{horizon}-Week Forecast")
forecast_df = None
if not has_enough_history(series):
    st.info(INSUFFICIENT_DATA_MESSAGE)
else:
    forecast_df = build_forecast(series, horizon, confidence)

    fig, ax = new_axes()
    ax.plot(series.index, series, label="Historical Sales", color=SERIES_COLORS[ACTUAL])
    ax.plot(forecast_df["period"], forecast_df["forecast"], label="ARIMA Forecast", color=SERIES_COLORS[PREDICTED])
    if "lower" in forecast_df:
        ax.fill_between(
            forecast_df["period"], forecast_df["lower"], forecast_df["upper"],
            color=SERIES_COLORS[PREDICTED], alpha=0.25, label=f"{confidence:.0%} interval",
        )
    ax.set_xlabel("Week")
    ax.set_ylabel("Weekly Sales")
    ax.legend()
    show(fig)

    with st.expander("Forecast table"):
        st.dataframe(forecast_df.set_index("period"))

    # Headline figure for the selected upcoming week
    row = forecast_df.iloc[upcoming - 1]
    st.metric(f"Forecast for week {int(row['period'])}", format_sales(row["forecast"]))
    if "lower" in forecast_df:
        st.caption(f"{confidence:.0%} interval: {format_sales(row['lower'])} to {format_sales(row['upper'])}")

# ===== Target week =====
st.subheader(f"Target Week {target_week}")
try:
    target = forecast_target_week(series, int(target_week), confidence)
except InsufficientDataError:
    st.info(INSUFFICIENT_DATA_MESSAGE)
else:
    col1, col2 = st.columns(2)
    col1.metric("Predicted", format_sales(target.predicted))
    if target.actual is None:
        col2.metric("Actual", "not observed yet")
    else:
        col2.metric("Actual", format_sales(target.actual), delta=format_sales(target.actual - target.predicted))

# ===== Actual vs Predicted =====
# Past year of actual weeks leading up to the target week, then the forecast from there on
st.subheader("Actual vs Predicted")
reference = min(int(target_week) - 1, len(series))
try:
    combined = actual_vs_forecast(series, reference, horizon, window=WEEKS_PER_YEAR)
except InsufficientDataError:
    st.info(INSUFFICIENT_DATA_MESSAGE)
else:
    fig, ax = new_axes()
    for label, part in combined.groupby("series"):
        ax.plot(part["period"], part["value"], label=label, color=SERIES_COLORS[label], marker="o", markersize=3)
    ax.set_xlabel("Week")
    ax.set_ylabel("Weekly Sales")
    ax.legend()
    show(fig)

# ===== Monthly forecast =====
st.subheader(f"Monthly Sales: next {MONTHLY_HORIZON} months")
monthly = aggregate_monthly(series)
if not has_enough_history(monthly):
    st.info("Insufficient data to forecast: at least 2 full months (8 weeks) of history are needed.")
else:
    monthly_forecast = forecast_monthly(series, MONTHLY_HORIZON, confidence)
    monthly_combined = combine_actual_and_forecast(
        trailing_window(monthly, len(monthly), MONTHS_PER_YEAR), monthly_forecast
    )

    fig, ax = new_axes()
    ax.bar(
        monthly_combined["period"], monthly_combined["value"],
        color=monthly_combined["series"].map(SERIES_COLORS).tolist(),
    )
    if "lower" in monthly_forecast:
        errors = [
            monthly_forecast["forecast"] - monthly_forecast["lower"],
            monthly_forecast["upper"] - monthly_forecast["forecast"],
        ]
        ax.errorbar(monthly_forecast["period"], monthly_forecast["forecast"], yerr=errors, fmt="none", ecolor="black", capsize=3)
    ax.set_xlabel("Month (4-week blocks)")
    ax.set_ylabel("Monthly Sales")
    show(fig)
    st.metric(f"Total forecast, next {MONTHLY_HORIZON} months", format_sales(monthly_forecast["forecast"].sum()))

# ==== Dynamic Analysis ====
st.subheader("🔍 Dynamic Forecast Analysis")
if forecast_df is None:
    st.info(INSUFFICIENT_DATA_MESSAGE)
else:
    trend = detect_trend(forecast_df["forecast"])
    volatility = detect_volatility(forecast_df["forecast"])
    insights = [
        f"- **Forecast Trend**: Sales are **{trend}** over the next {horizon} weeks.",
        f"- **Forecast Volatility**: The forecast shows **{volatility}** sales fluctuations.",
    ]

    # Same weeks one year earlier, when the history reaches back that far
    last_year = series.reindex(forecast_df["period"] - WEEKS_PER_YEAR).dropna()
    if len(last_year) == len(forecast_df):
        comparison = compare_to_last_year(forecast_df["forecast"], last_year)
        insights.append(f"- **Year over Year**: The forecast is **{comparison}** from the same weeks last year.")

    st.markdown("\n".join(insights))

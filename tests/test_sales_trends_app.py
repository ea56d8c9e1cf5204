"""
Smoke tests for the Streamlit sales report.
"""
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import numpy as np
import pandas as pd
from streamlit.testing.v1 import AppTest

import config
from test_forecast_series import fake_model

APP_PATH = str(Path(__file__).resolve().parent.parent / "sales_trends.py")


class TestSalesTrendsApp(unittest.TestCase):
    """Runs the report script against a small dataset with the model search stubbed out."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        path = os.path.join(self.tmp.name, "weekly_sales.csv")
        weeks = np.arange(1, 61)
        pd.DataFrame({
            "Store": np.concatenate([np.ones(60, dtype=int), [2]]),
            "Week": np.concatenate([weeks, [1]]),
            "Weekly_Sales": np.concatenate([20_000 + 500 * np.sin(weeks / 4), [18_000.0]]),
        }).to_csv(path, index=False)

        self.patches = [
            patch.object(config, "DATA_PATH", path),
            patch("forecast_series.auto_arima", return_value=fake_model(level=21_000.0, spread=1_500.0)),
        ]
        for p in self.patches:
            p.start()

    def tearDown(self):
        for p in self.patches:
            p.stop()
        self.tmp.cleanup()

    def run_app(self):
        at = AppTest.from_file(APP_PATH, default_timeout=60)
        at.run()
        self.assertFalse(at.exception)
        return at

    def test_renders_every_panel(self):
        at = self.run_app()

        subheaders = [header.value for header in at.subheader]
        self.assertIn("Historical Weekly Sales: Store 1", subheaders)
        self.assertIn("20-Week Forecast", subheaders)
        self.assertIn("Actual vs Predicted", subheaders)
        self.assertEqual(len(at.info), 0)
        self.assertIn("Forecast for week 61", [metric.label for metric in at.metric])
        self.assertIn("Sales are **stable**", at.markdown[-1].value)

    def test_target_week_two_shows_insufficient_data(self):
        at = self.run_app()

        at.sidebar.number_input[0].set_value(2).run()

        self.assertFalse(at.exception)
        messages = [info.value for info in at.info]
        self.assertEqual(len(messages), 2)
        self.assertTrue(all(message.startswith("Insufficient data") for message in messages))

    def test_store_with_single_week(self):
        at = self.run_app()

        at.sidebar.selectbox[0].select(2).run()

        self.assertFalse(at.exception)
        self.assertEqual(len(at.info), 5)


class TestShortStoreReport(unittest.TestCase):
    """Runs the report with the real model search on a store with only a few weeks."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        path = os.path.join(self.tmp.name, "weekly_sales.csv")
        # Nine weeks labelled from week 5 with one missing week
        pd.DataFrame({
            "Store": [1] * 9,
            "Week": [5, 6, 7, 8, 9, 10, 11, 13, 14],
            "Weekly_Sales": [100.0, 110.0, 104.0, 118.0, 112.0, 121.0, 117.0, 126.0, 123.0],
        }).to_csv(path, index=False)
        self.patch = patch.object(config, "DATA_PATH", path)
        self.patch.start()

    def tearDown(self):
        self.patch.stop()
        self.tmp.cleanup()

    def test_every_panel_renders(self):
        """Nine weeks give two months, which the monthly panel still forecasts."""
        at = AppTest.from_file(APP_PATH, default_timeout=120)
        at.run()

        self.assertFalse(at.exception)
        self.assertEqual(len(at.info), 0)
        subheaders = [header.value for header in at.subheader]
        self.assertIn("Monthly Sales: next 12 months", subheaders)
        self.assertEqual(subheaders[-1], "🔍 Dynamic Forecast Analysis")

    def test_week_controls_follow_forecast_periods(self):
        """Selectors and headline figures count observed weeks, not source labels."""
        at = AppTest.from_file(APP_PATH, default_timeout=120)
        at.run()

        self.assertEqual(at.sidebar.number_input[0].value, 10)
        self.assertEqual(at.sidebar.selectbox[1].options[0], "Week 10 (1 ahead)")
        self.assertIn("Forecast for week 10", [metric.label for metric in at.metric])

        at.sidebar.number_input[0].set_value(3).run()

        self.assertFalse(at.exception)
        self.assertIn("Target Week 3", [header.value for header in at.subheader])


if __name__ == "__main__":
    unittest.main()

"""
Unit tests for loading the weekly sales dataset.
"""
import os
import tempfile
import unittest

import pandas as pd

from sales_data import DatasetError, load_sales, store_ids


class TestLoadSales(unittest.TestCase):
    """Test cases for dataset loading and control ranges."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "weekly_sales.csv")

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, frame):
        frame.to_csv(self.path, index=False)

    def test_load_orders_by_store_and_week(self):
        self.write(pd.DataFrame({
            "Store": [2, 1, 1, 2],
            "Week": [1, 2, 1, 2],
            "Weekly_Sales": [5, 20.5, 10, 6],
            "Holiday_Flag": [0, 0, 1, 0],
        }))

        sales = load_sales(self.path)

        self.assertEqual(list(sales.columns), ["Store", "Week", "Weekly_Sales"])
        self.assertEqual(list(zip(sales["Store"], sales["Week"])), [(1, 1), (1, 2), (2, 1), (2, 2)])
        self.assertEqual(sales["Weekly_Sales"].dtype, float)

    def test_missing_columns(self):
        self.write(pd.DataFrame({"Store": [1], "Sales": [10.0]}))

        with self.assertRaises(DatasetError) as ctx:
            load_sales(self.path)
        self.assertIn("Week", str(ctx.exception))
        self.assertIn("Weekly_Sales", str(ctx.exception))

    def test_store_ids(self):
        sales = pd.DataFrame({"Store": [3, 1, 1], "Week": [7, 1, 4], "Weekly_Sales": [1.0, 2.0, 3.0]})

        self.assertEqual(store_ids(sales), [1, 3])


if __name__ == "__main__":
    unittest.main()

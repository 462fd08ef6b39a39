"""
Pytest configuration and shared fixtures.
"""

import pytest
import pandas as pd
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from sales_explorer.models.record import SalesRecord


def make_record(**fields):
    """SalesRecord from CSV-style keys; underscores stand for spaces (Customer_Name -> Customer Name)."""
    return SalesRecord.from_row({key.replace("_", " "): value for key, value in fields.items()})


SAMPLE_ROWS = [
    {"Date": "2023-03-15", "Customer Name": "Neha Sharma", "Gender": "Female", "Phone Number": "9876543210",
     "Product Name": "Silk Saree", "Product Category": "Clothing", "Quantity": "2", "Price per Unit": "1500",
     "Discount Percentage": "10", "Final Amount": "2700", "Payment Method": "UPI", "Order Status": "Completed",
     "Customer Region": "North", "Store Location": "Delhi", "Tags": "festive", "Age": "28"},
    {"Date": "2021-07-01", "Customer Name": "Arjun Mehta", "Gender": "Male", "Phone Number": "9123456780",
     "Product Name": "Headphones", "Product Category": "Electronics", "Quantity": "1", "Price per Unit": "2000",
     "Discount Percentage": "0", "Final Amount": "2000", "Payment Method": "Credit Card", "Order Status": "Returned",
     "Customer Region": " south ", "Store Location": "Chennai", "Tags": "gadgets", "Age": "41"},
    {"Date": "2022-11-20", "Customer Name": "priya nair", "Gender": "female", "Phone Number": "9988776655",
     "Product Name": "Lipstick", "Product Category": "Beauty", "Quantity": "5", "Price per Unit": "300",
     "Discount Percentage": "20", "Final Amount": "1200", "Payment Method": "Cash", "Order Status": "Completed",
     "Customer Region": "South", "Store Location": "Mumbai", "Tags": "makeup", "Age": "17"},
    {"Date": "not a date", "Customer Name": "Rohit Verma", "Gender": "Male", "Phone Number": "9000011111",
     "Product Name": "Jeans", "Product Category": "clothing", "Quantity": "abc", "Price per Unit": "800",
     "Discount Percentage": "5", "Final Amount": "760", "Payment Method": "UPI", "Order Status": "Pending",
     "Customer Region": "West", "Store Location": " mumbai ", "Tags": "casual", "Age": "unknown"},
    {"Date": "2023-01-05", "Customer Name": "Anita Rao", "Gender": "Female", "Phone Number": "9876500000",
     "Product Name": "Smartwatch", "Product Category": "Electronics", "Quantity": "3", "Price per Unit": "5000",
     "Discount Percentage": "15", "Final Amount": "12750", "Payment Method": "Debit Card", "Order Status": "Completed",
     "Customer Region": "East", "Store Location": "Kolkata", "Tags": "gadgets", "Age": "63"},
]


@pytest.fixture
def sample_rows():
    return [dict(row) for row in SAMPLE_ROWS]


@pytest.fixture
def sample_records(sample_rows):
    """Five records covering mixed casing, whitespace and unparseable values."""
    return [SalesRecord.from_row(row) for row in sample_rows]


@pytest.fixture
def sales_csv_dir(tmp_path, sample_rows):
    """data dir with the sample rows split over sales_data_part1/2/10.csv (part10 sorts last)."""
    frame = pd.DataFrame(sample_rows)
    frame.iloc[0:2].to_csv(tmp_path / "sales_data_part1.csv", index=False)
    frame.iloc[2:4].to_csv(tmp_path / "sales_data_part2.csv", index=False)
    frame.iloc[4:5].to_csv(tmp_path / "sales_data_part10.csv", index=False)
    return tmp_path


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )

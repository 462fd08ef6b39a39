"""
Typed sales record. Raw CSV text is kept for the API response; typed values
(timestamp, year, quantity, age, amounts) are derived once when the CSV is read.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import pandas as pd

from sales_explorer.utils.helpers import (
    dates_to_epoch_ms,
    dates_to_years,
    parse_sales_dates,
    to_float_list,
    to_int_list,
)


# CSV header -> record attribute
COLUMN_FIELDS = {
    "Date": "date",
    "Customer Name": "customer_name",
    "Gender": "gender",
    "Phone Number": "phone_number",
    "Product Name": "product_name",
    "Product Category": "product_category",
    "Quantity": "quantity",
    "Price per Unit": "price_per_unit",
    "Discount Percentage": "discount_percentage",
    "Final Amount": "final_amount",
    "Payment Method": "payment_method",
    "Order Status": "order_status",
    "Customer Region": "customer_region",
    "Store Location": "store_location",
    "Tags": "tags",
    "Age": "age",
}


@dataclass(frozen=True, slots=True)
class SalesRecord:
    """
    One sales row. Text attributes hold the CSV value verbatim ("" when the column is absent).
    Typed attributes:
        timestamp: epoch ms of Date, None if unparseable.
        year: calendar year of Date as string, None if unparseable.
        units: Quantity as int, 0 if unparseable.
        age_years: Age as int, None if unparseable.
        unit_price / discount_pct / amount: floats, 0.0 if unparseable.
    """

    date: str = ""
    customer_name: str = ""
    gender: str = ""
    phone_number: str = ""
    product_name: str = ""
    product_category: str = ""
    quantity: str = ""
    price_per_unit: str = ""
    discount_percentage: str = ""
    final_amount: str = ""
    payment_method: str = ""
    order_status: str = ""
    customer_region: str = ""
    store_location: str = ""
    tags: str = ""
    age: str = ""

    timestamp: Optional[int] = None
    year: Optional[str] = None
    units: int = 0
    age_years: Optional[int] = None
    unit_price: float = 0.0
    discount_pct: float = 0.0
    amount: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """JSON shape served by the API: CSV header names to raw values."""
        return {column: getattr(self, attr) for column, attr in COLUMN_FIELDS.items()}

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "SalesRecord":
        """Build one record from a CSV-style row (header -> value)."""
        return records_from_frame(pd.DataFrame([row]))[0]


def records_from_frame(df: pd.DataFrame) -> List[SalesRecord]:
    """Convert a DataFrame with CSV header columns into typed records (vectorized parsing)."""
    if df.empty:
        return []
    df = df.copy()
    for column in COLUMN_FIELDS:
        if column not in df.columns:
            df[column] = ""
    df = df[list(COLUMN_FIELDS)].astype(object).where(df[list(COLUMN_FIELDS)].notna(), "")
    dates = parse_sales_dates(df["Date"])
    typed = {
        "timestamp": dates_to_epoch_ms(dates),
        "year": dates_to_years(dates),
        "units": to_int_list(df["Quantity"], default=0),
        "age_years": to_int_list(df["Age"]),
        "unit_price": to_float_list(df["Price per Unit"]),
        "discount_pct": to_float_list(df["Discount Percentage"]),
        "amount": to_float_list(df["Final Amount"]),
    }
    text_columns = [df[column].astype(str).tolist() for column in COLUMN_FIELDS]
    attrs = list(COLUMN_FIELDS.values()) + list(typed)
    columns = text_columns + list(typed.values())
    return [SalesRecord(**dict(zip(attrs, values))) for values in zip(*columns)]

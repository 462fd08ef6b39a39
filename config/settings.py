"""
Configuration for Retail Sales Explorer.
Data files live in the data/ folder under project root; every value can be overridden by env var.
"""
import os

# Project root (directory containing sales_explorer/, config/, data/, etc.)
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Data folder: place sales_data.csv or sales_data_part<N>.csv here
DATA_DIR = os.environ.get("DATA_DIR", os.path.join(PROJECT_ROOT, "data"))

# Data file names (inside data/). Part files win over the single file when both exist.
SALES_FILE = "sales_data.csv"
PART_FILE_PATTERN = r"^sales_data_part(\d+)\.csv$"

# "memory" loads every record at startup; "streaming" reads part files per request
DATA_MODE = os.environ.get("DATA_MODE", "memory").lower()

# Rows per pandas chunk when streaming CSV files
STREAM_CHUNK_ROWS = int(os.environ.get("STREAM_CHUNK_ROWS", 5_000))

# Streaming mode keeps at most pageSize * RESULT_BUDGET_FACTOR matches per request
RESULT_BUDGET_FACTOR = int(os.environ.get("RESULT_BUDGET_FACTOR", 10))

# Query result cache (entries, oldest evicted first)
QUERY_CACHE_SIZE = int(os.environ.get("QUERY_CACHE_SIZE", 50))

# Pagination
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
DEFAULT_SORT_BY = "date"
DEFAULT_SORT_ORDER = "desc"

# Top-k selection thresholds
FULL_SORT_BELOW = 1_000          # filtered sets smaller than this are fully sorted
EARLY_PAGE_LIMIT = 100           # windows starting at or after this offset are fully sorted
SAMPLING_ABOVE = 100_000         # sets larger than this use sample-based pivot estimation
MAX_SAMPLE_SIZE = 10_000
SAMPLE_FRACTION = 0.01

# scripts/split_sales_csv.py: rows per part file
SPLIT_CHUNK_ROWS = int(os.environ.get("SPLIT_CHUNK_ROWS", 50_000))

# CORS: exact origins (comma-separated env override) plus regex patterns for preview deployments
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:3001,http://localhost:5173,"
        "http://localhost:5174,http://localhost:4173",
    ).split(",")
    if origin.strip()
]
CORS_ORIGIN_PATTERNS = [r"^https://.*\.vercel\.app$"]

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_JSON = os.environ.get("LOG_JSON", "false").lower() == "true"

# Columns the API serves (CSV header names)
SALES_COLUMNS = [
    "Date", "Customer Name", "Gender", "Phone Number", "Product Name",
    "Product Category", "Quantity", "Price per Unit", "Discount Percentage",
    "Final Amount", "Payment Method", "Order Status", "Customer Region",
    "Store Location", "Tags", "Age",
]

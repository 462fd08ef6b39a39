"""
Loads sales records for Retail Sales Explorer.
Reads data/sales_data_part<N>.csv (ordered by N) if present, else data/sales_data.csv.
Records can be loaded all at once (in-memory mode) or streamed chunk by chunk.
"""

import os
import re
import pandas as pd
from typing import Iterator, List, Optional

from sales_explorer.models.record import COLUMN_FIELDS, SalesRecord, records_from_frame
from sales_explorer.utils.logging import get_logger

log = get_logger(__name__)


def _read_options() -> dict:
    # Everything as text; "" stays "" instead of becoming NaN
    return {
        "dtype": str,
        "keep_default_na": False,
        "usecols": lambda column: column in COLUMN_FIELDS,
    }


class SalesDataLoader:
    """
    Finds the CSV files once, then serves records either fully loaded (cached) or as chunks.
    """

    def __init__(self, data_path: Optional[str] = None, chunk_rows: Optional[int] = None):
        if data_path is None:
            from config.settings import DATA_DIR
            data_path = DATA_DIR
        if chunk_rows is None:
            from config.settings import STREAM_CHUNK_ROWS
            chunk_rows = STREAM_CHUNK_ROWS
        self.data_path = data_path
        self.chunk_rows = chunk_rows
        self._files: Optional[List[str]] = None
        self._records: Optional[List[SalesRecord]] = None

    def discover_files(self) -> List[str]:
        """Part files sorted by their number; the single file as fallback. Raises if neither exists."""
        if self._files is not None:
            return self._files
        from config.settings import PART_FILE_PATTERN, SALES_FILE
        if not os.path.isdir(self.data_path):
            raise FileNotFoundError(f"Data directory not found: {self.data_path}")
        pattern = re.compile(PART_FILE_PATTERN)
        parts = []
        for name in os.listdir(self.data_path):
            match = pattern.match(name)
            if match:
                parts.append((int(match.group(1)), os.path.join(self.data_path, name)))
        files = [path for _, path in sorted(parts)]
        if not files:
            single = os.path.join(self.data_path, SALES_FILE)
            if os.path.isfile(single):
                files = [single]
        if not files:
            raise FileNotFoundError(
                f"No {SALES_FILE} or sales_data_part<N>.csv in {self.data_path}. "
                "Add data/ or run scripts/split_sales_csv.py."
            )
        log.info("Found %d CSV file(s) in %s", len(files), self.data_path)
        self._files = files
        return files

    def load_records(self) -> List[SalesRecord]:
        """Every record from every file, in file order. Cached after the first call."""
        if self._records is not None:
            return self._records
        records: List[SalesRecord] = []
        for path in self.discover_files():
            try:
                df = pd.read_csv(path, **_read_options())
            except pd.errors.EmptyDataError:
                log.warning("CSV file is empty: %s", path)
                continue
            records.extend(records_from_frame(df))
        if not records:
            log.warning("No sales records loaded from %s", self.data_path)
        else:
            log.info("Loaded %d sales records", len(records))
        self._records = records
        return records

    def iter_chunks(self, files: Optional[List[str]] = None) -> Iterator[List[SalesRecord]]:
        """
        Yield records chunk by chunk (chunk_rows rows at a time). Closing the generator
        closes the underlying file, so callers can stop reading early.
        """
        for path in files if files is not None else self.discover_files():
            try:
                reader = pd.read_csv(path, chunksize=self.chunk_rows, **_read_options())
            except pd.errors.EmptyDataError:
                log.warning("CSV file is empty: %s", path)
                continue
            with reader:
                for chunk in reader:
                    yield records_from_frame(chunk)

    def iter_records(self, files: Optional[List[str]] = None) -> Iterator[SalesRecord]:
        for chunk in self.iter_chunks(files):
            yield from chunk

    def first_file(self) -> str:
        return self.discover_files()[0]

"""
Distinct values per categorical column, for the filter menus.
"""

import threading
from typing import Callable, Dict, Iterable, List, Optional

from sales_explorer.models.query import FILTER_OPTION_KEYS
from sales_explorer.models.record import SalesRecord
from sales_explorer.utils.logging import get_logger

log = get_logger(__name__)


def build_filter_options(records: Iterable[SalesRecord]) -> Dict[str, List[str]]:
    """
    For each option key: trimmed non-empty values, deduplicated case-insensitively
    (the first casing seen wins), sorted.
    """
    seen: Dict[str, Dict[str, str]] = {key: {} for key in FILTER_OPTION_KEYS}
    for record in records:
        for key, attr in FILTER_OPTION_KEYS.items():
            value = getattr(record, attr).strip()
            if value:
                seen[key].setdefault(value.lower(), value)
    return {key: sorted(values.values()) for key, values in seen.items()}


class FilterOptionsIndex:
    """Builds options from `source` on first use and keeps them until `invalidate()`."""

    def __init__(self, source: Callable[[], Iterable[SalesRecord]]):
        self._source = source
        self._options: Optional[Dict[str, List[str]]] = None
        self._lock = threading.Lock()

    def get(self) -> Dict[str, List[str]]:
        with self._lock:
            if self._options is None:
                log.info("Building filter options cache")
                self._options = build_filter_options(self._source())
            return {key: list(values) for key, values in self._options.items()}

    def invalidate(self) -> None:
        with self._lock:
            self._options = None

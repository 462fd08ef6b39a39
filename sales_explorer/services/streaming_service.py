"""
Query engine that streams CSV part files per request instead of holding the dataset in memory.

Matching records are collected until a result budget (page_size * RESULT_BUDGET_FACTOR) is
reached, then reading stops. totalItems, totalPages and hasNext are computed from that capped
count, so they describe the records found so far, not the whole dataset. Filter options are
built from the first data file only.
"""

import time
from typing import Any, Dict, List, Optional

from sales_explorer.engine.cache import QueryCache
from sales_explorer.engine.pagination import paginate
from sales_explorer.engine.predicates import build_query_predicate, match_all
from sales_explorer.engine.ranking import get_comparator, sort_records
from sales_explorer.models.data_loader import SalesDataLoader
from sales_explorer.models.query import ResultPage, SalesQuery
from sales_explorer.models.record import SalesRecord
from sales_explorer.services.filter_options import FilterOptionsIndex
from sales_explorer.services.sales_service import summarize_records
from sales_explorer.utils.logging import get_logger

log = get_logger(__name__)


class StreamingSalesService:
    def __init__(
        self,
        loader: SalesDataLoader,
        result_budget_factor: Optional[int] = None,
        cache_size: Optional[int] = None,
    ):
        from config import settings
        self.loader = loader
        self.result_budget_factor = (
            settings.RESULT_BUDGET_FACTOR if result_budget_factor is None else result_budget_factor
        )
        self.cache: QueryCache[ResultPage] = QueryCache(
            settings.QUERY_CACHE_SIZE if cache_size is None else cache_size
        )
        self.filter_options = FilterOptionsIndex(
            lambda: self.loader.iter_records([self.loader.first_file()])
        )
        # Fail fast when no data files exist
        self.loader.discover_files()

    def collect(self, query: SalesQuery) -> List[SalesRecord]:
        """Matching records in file order, stopping once the result budget is reached."""
        budget = query.page_size * self.result_budget_factor
        predicate = build_query_predicate(query.search, query.filters) or match_all
        matches: List[SalesRecord] = []
        chunks = self.loader.iter_chunks()
        try:
            for chunk in chunks:
                for record in chunk:
                    if predicate(record):
                        matches.append(record)
                        if len(matches) >= budget:
                            return matches
        finally:
            chunks.close()
        return matches

    def query(self, query: SalesQuery) -> ResultPage:
        started = time.perf_counter()
        key = query.cache_key()
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        matches = sort_records(self.collect(query), get_comparator(query.sort_by, query.sort_order))
        result = paginate(matches, query.page, query.page_size)
        self.cache.put(key, result)
        log.debug(
            "Streaming query completed in %.1fms - %d matches collected",
            (time.perf_counter() - started) * 1000, len(matches),
        )
        return result

    def get_filter_options(self) -> Dict[str, List[str]]:
        return self.filter_options.get()

    def summarize(self, query: SalesQuery) -> Dict[str, Any]:
        """Totals over the capped set of matches (same records the paged query sees)."""
        return summarize_records(self.collect(query))

    def invalidate(self) -> None:
        self.cache.clear()
        self.filter_options.invalidate()

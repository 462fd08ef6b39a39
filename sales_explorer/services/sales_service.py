"""
Query engine over an in-memory list of sales records: search, filter, sort, paginate.
Results are cached per query; filter options are built once.
"""

import time
from typing import Any, Dict, List, Optional, Sequence

from sales_explorer.engine.cache import QueryCache
from sales_explorer.engine.pagination import build_page, paginate
from sales_explorer.engine.predicates import apply_predicate, build_query_predicate
from sales_explorer.engine.ranking import get_comparator, is_sortable, sort_records
from sales_explorer.engine.selection import TopKSelector
from sales_explorer.models.query import ResultPage, SalesQuery
from sales_explorer.models.record import SalesRecord
from sales_explorer.services.filter_options import FilterOptionsIndex
from sales_explorer.utils.logging import get_logger

log = get_logger(__name__)


def summarize_records(records: Sequence[SalesRecord]) -> Dict[str, Any]:
    """Totals shown on the dashboard cards."""
    total_units = sum(r.units for r in records)
    total_sales = sum(r.amount for r in records)
    total_discount = sum(r.unit_price * r.units * r.discount_pct / 100 for r in records)
    return {
        "recordCount": len(records),
        "totalUnits": int(total_units),
        "totalSales": round(float(total_sales), 2),
        "totalDiscount": round(float(total_discount), 2),
    }


class SalesService:
    """
    Holds the (read-only) record list plus its caches.

    Args:
        records: the dataset; never modified.
        cache_size: max cached query results (oldest evicted first).
        selector: top-k selector used for sorted queries over large filtered sets.
        partial_sort_above: filtered sets larger than this go through the selector.
    """

    def __init__(
        self,
        records: Sequence[SalesRecord],
        cache_size: Optional[int] = None,
        selector: Optional[TopKSelector] = None,
        partial_sort_above: Optional[int] = None,
    ):
        from config import settings
        self.records = records
        self.cache: QueryCache[ResultPage] = QueryCache(
            settings.QUERY_CACHE_SIZE if cache_size is None else cache_size
        )
        self.selector = selector or TopKSelector()
        self.partial_sort_above = (
            settings.FULL_SORT_BELOW if partial_sort_above is None else partial_sort_above
        )
        self.filter_options = FilterOptionsIndex(lambda: self.records)

    @classmethod
    def from_loader(cls, loader, **kwargs) -> "SalesService":
        return cls(loader.load_records(), **kwargs)

    def filtered(self, query: SalesQuery) -> List[SalesRecord]:
        predicate = build_query_predicate(query.search, query.filters)
        return apply_predicate(self.records, predicate)

    def query(self, query: SalesQuery) -> ResultPage:
        started = time.perf_counter()
        key = query.cache_key()
        cached = self.cache.get(key)
        if cached is not None:
            log.debug("Query served from cache in %.1fms", (time.perf_counter() - started) * 1000)
            return cached

        data = self.filtered(query)
        if is_sortable(query.sort_by) and len(data) > self.partial_sort_above:
            compare = get_comparator(query.sort_by, query.sort_order)
            window = self.selector.select(data, compare, query.start, query.end)
            result = build_page(window, query.page, query.page_size, len(data))
            mode = "partial sort"
        else:
            if is_sortable(query.sort_by):
                data = sort_records(data, get_comparator(query.sort_by, query.sort_order))
            result = paginate(data, query.page, query.page_size)
            mode = "full sort"

        self.cache.put(key, result)
        log.debug(
            "Query completed in %.1fms - filtered %d of %d records (%s)",
            (time.perf_counter() - started) * 1000, len(data), len(self.records), mode,
        )
        return result

    def get_filter_options(self) -> Dict[str, List[str]]:
        return self.filter_options.get()

    def summarize(self, query: SalesQuery) -> Dict[str, Any]:
        """Totals over every record matching the query's search and filters (paging ignored)."""
        return summarize_records(self.filtered(query))

    def invalidate(self) -> None:
        """Drop cached results and filter options."""
        self.cache.clear()
        self.filter_options.invalidate()

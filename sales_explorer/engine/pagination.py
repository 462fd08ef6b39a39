"""Page slicing and pagination metadata."""

from typing import Sequence

from sales_explorer.models.query import Pagination, ResultPage
from sales_explorer.models.record import SalesRecord


def build_page(window: Sequence[SalesRecord], page: int, page_size: int, total_items: int) -> ResultPage:
    """Wrap an already-selected window; metadata comes from the filtered total, not the dataset size."""
    return ResultPage(data=tuple(window), pagination=Pagination.build(page, page_size, total_items))


def paginate(records: Sequence[SalesRecord], page: int, page_size: int) -> ResultPage:
    start = (page - 1) * page_size
    return build_page(records[start:start + page_size], page, page_size, len(records))

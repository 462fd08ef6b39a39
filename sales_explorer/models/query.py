"""
Query and result types for the sales table.

`SalesQuery.from_params` never raises: unknown sort keys/orders fall back to the defaults,
non-numeric paging falls back to page 1 / the default page size, and sizes are clamped.
"""

import json
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from sales_explorer.models.record import SalesRecord

# Filter name (query parameter) -> record attribute compared case-insensitively
CATEGORICAL_FILTERS = {
    "customerRegion": "customer_region",
    "gender": "gender",
    "productCategory": "product_category",
    "tags": "tags",
    "paymentMethod": "payment_method",
    "orderStatus": "order_status",
    "storeLocation": "store_location",
}

FILTER_NAMES = list(CATEGORICAL_FILTERS) + ["ageRange", "dateRange"]

SORT_ORDERS = ("asc", "desc")

FilterValue = Union[str, Iterable[str], None]


def split_values(value: FilterValue) -> Tuple[str, ...]:
    """
    "a, b" -> ("a", "b"); ["a", " b "] -> ("a", "b"). Blank entries are dropped, so
    None, "" and [] all mean "no constraint".
    """
    if value is None:
        return ()
    items = value.split(",") if isinstance(value, str) else list(value)
    return tuple(str(v).strip() for v in items if v is not None and str(v).strip())


@dataclass(frozen=True)
class FilterSpec:
    """Normalized filters: every field is a tuple of accepted values, () meaning unconstrained."""

    customerRegion: Tuple[str, ...] = ()
    gender: Tuple[str, ...] = ()
    productCategory: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    paymentMethod: Tuple[str, ...] = ()
    orderStatus: Tuple[str, ...] = ()
    storeLocation: Tuple[str, ...] = ()
    ageRange: Tuple[str, ...] = ()
    dateRange: Tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, filters: Optional[Mapping[str, FilterValue]]) -> "FilterSpec":
        filters = filters or {}
        return cls(**{name: split_values(filters.get(name)) for name in FILTER_NAMES})

    def active(self) -> Dict[str, Tuple[str, ...]]:
        """Only the constrained filters."""
        return {name: getattr(self, name) for name in FILTER_NAMES if getattr(self, name)}

    def is_empty(self) -> bool:
        return not self.active()


@dataclass(frozen=True)
class SalesQuery:
    search: str = ""
    filters: FilterSpec = field(default_factory=FilterSpec)
    sort_by: str = "date"
    sort_order: str = "desc"
    page: int = 1
    page_size: int = 10

    @property
    def start(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def end(self) -> int:
        return self.start + self.page_size

    def cache_key(self) -> str:
        """Canonical JSON of every field that affects the result."""
        return json.dumps(asdict(self), sort_keys=True, separators=(",", ":"))

    @classmethod
    def from_params(
        cls,
        search: Optional[str] = None,
        filters: Optional[Mapping[str, FilterValue]] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        page: Any = None,
        page_size: Any = None,
    ) -> "SalesQuery":
        from config.settings import (
            DEFAULT_PAGE_SIZE, DEFAULT_SORT_BY, DEFAULT_SORT_ORDER, MAX_PAGE_SIZE,
        )
        from sales_explorer.engine.ranking import is_sortable
        sort_by = sort_by if sort_by == "none" or is_sortable(sort_by) else DEFAULT_SORT_BY
        sort_order = (sort_order or "").lower()
        sort_order = sort_order if sort_order in SORT_ORDERS else DEFAULT_SORT_ORDER
        page = max(1, _to_int(page, 1))
        page_size = min(MAX_PAGE_SIZE, max(1, _to_int(page_size, DEFAULT_PAGE_SIZE)))
        return cls(
            search=(search or "").strip(),
            filters=FilterSpec.from_mapping(filters),
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            page_size=page_size,
        )

    @classmethod
    def from_args(cls, args: Mapping[str, str]) -> "SalesQuery":
        """Build from HTTP query-string arguments (comma-separated multi-values)."""
        return cls.from_params(
            search=args.get("search"),
            filters={name: args.get(name) for name in FILTER_NAMES},
            sort_by=args.get("sortBy"),
            sort_order=args.get("sortOrder"),
            page=args.get("page"),
            page_size=args.get("pageSize"),
        )


def _to_int(value: Any, default: int) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Pagination:
    currentPage: int
    pageSize: int
    totalItems: int
    totalPages: int
    hasNext: bool
    hasPrev: bool

    @classmethod
    def build(cls, page: int, page_size: int, total_items: int) -> "Pagination":
        return cls(
            currentPage=page,
            pageSize=page_size,
            totalItems=total_items,
            totalPages=math.ceil(total_items / page_size),
            hasNext=page * page_size < total_items,
            hasPrev=page > 1,
        )


@dataclass(frozen=True)
class ResultPage:
    data: Tuple[SalesRecord, ...]
    pagination: Pagination

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data": [record.to_dict() for record in self.data],
            "pagination": asdict(self.pagination),
        }

    @classmethod
    def empty(cls, page: int = 1, page_size: int = 10) -> "ResultPage":
        return cls(data=(), pagination=Pagination.build(page, page_size, 0))


FILTER_OPTION_KEYS = {
    "customerRegions": "customer_region",
    "genders": "gender",
    "productCategories": "product_category",
    "tags": "tags",
    "paymentMethods": "payment_method",
    "storeLocations": "store_location",
}


def empty_filter_options() -> Dict[str, List[str]]:
    return {key: [] for key in FILTER_OPTION_KEYS}

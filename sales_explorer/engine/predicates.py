"""
Record predicates: free-text search and filter matching.

A predicate is a plain `Callable[[SalesRecord], bool]`. Categorical filters compare trimmed,
lower-cased values (OR within a field, AND across fields). Records with a missing or
unparseable value for a constrained field never match.
"""

import math
from typing import Callable, Dict, List, Optional, Tuple

from sales_explorer.models.query import CATEGORICAL_FILTERS, FilterSpec
from sales_explorer.models.record import SalesRecord
from sales_explorer.utils.helpers import normalize_text

Predicate = Callable[[SalesRecord], bool]

# Bucket token -> inclusive (low, high) age bounds; below18 is [0, 18)
AGE_BUCKETS: Dict[str, Tuple[float, float]] = {
    "below18": (0, 17),
    "18-25": (18, 25),
    "26-35": (26, 35),
    "36-45": (36, 45),
    "46-60": (46, 60),
    "60+": (60, math.inf),
}


def match_all(record: SalesRecord) -> bool:
    return True


def build_search_matcher(search: str) -> Optional[Predicate]:
    """
    None for an empty search. Otherwise: case-insensitive substring of Customer Name,
    or literal substring of Phone Number.
    """
    if not search:
        return None
    term = search.lower()

    def matches(record: SalesRecord) -> bool:
        return term in record.customer_name.lower() or search in record.phone_number

    return matches


def _categorical_check(attr: str, accepted: Tuple[str, ...]) -> Predicate:
    wanted = frozenset(normalize_text(v) for v in accepted)

    def check(record: SalesRecord) -> bool:
        return normalize_text(getattr(record, attr)) in wanted

    return check


def age_bounds(tokens: Tuple[str, ...]) -> List[Tuple[float, float]]:
    """Bounds for the known bucket tokens; unknown tokens are ignored."""
    return [AGE_BUCKETS[t] for t in tokens if t in AGE_BUCKETS]


def _age_check(bounds: List[Tuple[float, float]]) -> Predicate:
    def check(record: SalesRecord) -> bool:
        age = record.age_years
        if age is None:
            return False
        return any(low <= age <= high for low, high in bounds)

    return check


def _year_check(years: Tuple[str, ...]) -> Predicate:
    wanted = frozenset(years)

    def check(record: SalesRecord) -> bool:
        return record.year is not None and record.year in wanted

    return check


def build_filter_predicate(filters: FilterSpec) -> Optional[Predicate]:
    """
    Compile filters into one predicate, or None when nothing is constrained (callers then
    skip the per-record pass entirely).
    """
    if filters.is_empty():
        return None
    checks: List[Predicate] = []
    for name, attr in CATEGORICAL_FILTERS.items():
        accepted = getattr(filters, name)
        if accepted:
            checks.append(_categorical_check(attr, accepted))
    bounds = age_bounds(filters.ageRange)
    if bounds:
        checks.append(_age_check(bounds))
    if filters.dateRange:
        checks.append(_year_check(filters.dateRange))

    if not checks:
        return None
    if len(checks) == 1:
        return checks[0]

    def predicate(record: SalesRecord) -> bool:
        for check in checks:
            if not check(record):
                return False
        return True

    return predicate


def build_query_predicate(search: str, filters: FilterSpec) -> Optional[Predicate]:
    """Search AND filters as a single predicate; None when the query matches everything."""
    search_match = build_search_matcher(search)
    filter_match = build_filter_predicate(filters)
    if search_match is None:
        return filter_match
    if filter_match is None:
        return search_match
    return lambda record: search_match(record) and filter_match(record)


def apply_predicate(records, predicate: Optional[Predicate]) -> List[SalesRecord]:
    """Single pass; returns a new list (the source sequence is never modified)."""
    if predicate is None:
        return list(records)
    return [record for record in records if predicate(record)]

"""
Sort keys and comparators.

Each sort key maps to an ascending key function over SalesRecord. `get_comparator` turns
it into cmp(a, b) -> -1/0/1, negated for "desc". Register new keys with `register_sort_key`.
"""

import math
from functools import cmp_to_key
from typing import Any, Callable, Dict, List, Optional, Sequence

from sales_explorer.models.record import SalesRecord

Comparator = Callable[[SalesRecord, SalesRecord], int]
KeyFunc = Callable[[SalesRecord], Any]


def _date_key(record: SalesRecord) -> float:
    # Unparseable dates rank first in ascending order
    return record.timestamp if record.timestamp is not None else -math.inf


def _quantity_key(record: SalesRecord) -> int:
    return record.units


def _customer_name_key(record: SalesRecord) -> str:
    return record.customer_name.casefold()


SORT_KEY_FUNCS: Dict[str, KeyFunc] = {
    "date": _date_key,
    "quantity": _quantity_key,
    "customerName": _customer_name_key,
}


def register_sort_key(name: str, key: KeyFunc) -> None:
    SORT_KEY_FUNCS[name] = key


def is_sortable(sort_by: Optional[str]) -> bool:
    return sort_by in SORT_KEY_FUNCS


def _compare_equal(a: SalesRecord, b: SalesRecord) -> int:
    return 0


def get_comparator(sort_by: Optional[str], sort_order: str = "asc") -> Comparator:
    """Comparator for a sort key; unknown keys (including "none") compare everything equal."""
    key = SORT_KEY_FUNCS.get(sort_by)
    if key is None:
        return _compare_equal
    sign = -1 if sort_order == "desc" else 1

    def compare(a: SalesRecord, b: SalesRecord) -> int:
        ka, kb = key(a), key(b)
        return sign * ((ka > kb) - (ka < kb))

    return compare


def sort_records(records: Sequence[SalesRecord], compare: Comparator) -> List[SalesRecord]:
    """Stable sort into a new list; equal records keep their original order."""
    if compare is _compare_equal:
        return list(records)
    return sorted(records, key=cmp_to_key(compare))

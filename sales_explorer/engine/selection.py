"""
Top-k window selection.

`TopKSelector.select(records, compare, start, end)` returns exactly the records that a stable
full sort would place in [start, end), without sorting the whole set when the window is near
the top of a large result:

- small sets (< full_sort_below) or deep windows (start >= early_page_limit): full sort + slice.
- otherwise: randomized quickselect (Lomuto partition) for the first `end` records, then sort
  only that prefix.
- very large sets (> sampling_above): an evenly strided sample estimates a pivot whose rank is
  at least `end`; one pass keeps the records <= pivot and quickselect runs on those only. If
  the estimate was too tight the selector falls back to quickselect over the full set.

Ties are broken by original position, so the result always equals the stable full sort.
"""

import math
from functools import cmp_to_key
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from sales_explorer.engine.ranking import Comparator, sort_records
from sales_explorer.models.record import SalesRecord
from sales_explorer.utils.logging import get_logger

log = get_logger(__name__)

Ranked = Tuple[int, SalesRecord]

# Pivot rank in the sample is pushed this far past the proportional rank of `end`
SAMPLE_HEADROOM = 1.5


def _total_order(compare: Comparator) -> Callable[[Ranked, Ranked], int]:
    def total(a: Ranked, b: Ranked) -> int:
        result = compare(a[1], b[1])
        if result:
            return result
        return (a[0] > b[0]) - (a[0] < b[0])

    return total


class TopKSelector:
    def __init__(
        self,
        full_sort_below: Optional[int] = None,
        early_page_limit: Optional[int] = None,
        sampling_above: Optional[int] = None,
        max_sample_size: Optional[int] = None,
        sample_fraction: Optional[float] = None,
        seed: Optional[int] = None,
    ):
        from config import settings
        self.full_sort_below = settings.FULL_SORT_BELOW if full_sort_below is None else full_sort_below
        self.early_page_limit = settings.EARLY_PAGE_LIMIT if early_page_limit is None else early_page_limit
        self.sampling_above = settings.SAMPLING_ABOVE if sampling_above is None else sampling_above
        self.max_sample_size = settings.MAX_SAMPLE_SIZE if max_sample_size is None else max_sample_size
        self.sample_fraction = settings.SAMPLE_FRACTION if sample_fraction is None else sample_fraction
        self._rng = np.random.default_rng(seed)

    def select(
        self, records: Sequence[SalesRecord], compare: Comparator, start: int, end: int
    ) -> List[SalesRecord]:
        n = len(records)
        end = min(end, n)
        if start >= end:
            return []
        if n < self.full_sort_below or start >= self.early_page_limit:
            return sort_records(records, compare)[start:end]
        return self.top_k(records, compare, end)[start:end]

    def top_k(self, records: Sequence[SalesRecord], compare: Comparator, k: int) -> List[SalesRecord]:
        """The k smallest records under `compare`, sorted."""
        total = _total_order(compare)
        items: List[Ranked] = list(enumerate(records))
        k = min(k, len(items))
        if k <= 0:
            return []
        if len(items) > self.sampling_above:
            candidates = self._sample_candidates(items, total, k)
            if candidates is not None:
                items = candidates
        if len(items) > k:
            self._quickselect(items, k, total)
            items = items[:k]
        items.sort(key=cmp_to_key(total))
        return [record for _, record in items]

    def _sample_candidates(
        self, items: List[Ranked], total: Callable[[Ranked, Ranked], int], k: int
    ) -> Optional[List[Ranked]]:
        n = len(items)
        sample_size = max(1, min(self.max_sample_size, int(n * self.sample_fraction)))
        positions = np.linspace(0, n - 1, num=sample_size, dtype=np.int64)
        sample = sorted((items[int(i)] for i in positions), key=cmp_to_key(total))
        rank = min(sample_size - 1, math.ceil(k * sample_size / n * SAMPLE_HEADROOM) + 1)
        pivot = sample[rank]
        candidates = [item for item in items if total(item, pivot) <= 0]
        if len(candidates) < k:
            log.debug("Sample pivot kept %d < %d records; selecting over full set", len(candidates), k)
            return None
        return candidates

    def _quickselect(self, items: List[Ranked], k: int, total: Callable[[Ranked, Ranked], int]) -> None:
        """Reorder in place so items[:k] are the k smallest (unordered)."""
        target = k - 1
        left, right = 0, len(items) - 1
        while left < right:
            pivot_index = self._partition(items, left, right, total)
            if pivot_index == target:
                return
            if pivot_index < target:
                left = pivot_index + 1
            else:
                right = pivot_index - 1

    def _partition(self, items: List[Ranked], left: int, right: int, total) -> int:
        chosen = int(self._rng.integers(left, right + 1))
        items[chosen], items[right] = items[right], items[chosen]
        pivot = items[right]
        i = left - 1
        for j in range(left, right):
            if total(items[j], pivot) <= 0:
                i += 1
                items[i], items[j] = items[j], items[i]
        items[i + 1], items[right] = items[right], items[i + 1]
        return i + 1

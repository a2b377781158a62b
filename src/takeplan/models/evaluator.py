
from __future__ import annotations
import heapq
import math
from typing import List, Tuple

from ..core.datatypes import Take, harvest_capacity
from ..core.state import StateSnapshot
from .types import Candidate


def density(value: int, activation_cost: int) -> float:
    if activation_cost == 0:
        return math.inf if value > 0 else 0.0
    return value / activation_cost


def top_k_items(items, scores, available, k: int) -> List[int]:
    """The `k` best available items, best first.

    Bounded min-heap of size k keyed on (score, -id): O(n log k) instead of a
    full sort. Among equal scores the lower id wins, so output is stable.
    """
    if k <= 0:
        return []
    heap: List[Tuple[int, int]] = []
    for i in items:
        if i not in available:
            continue
        entry = (scores[i], -i)
        if len(heap) < k:
            heapq.heappush(heap, entry)
        elif entry > heap[0]:
            heapq.heapreplace(heap, entry)
    heap.sort(reverse=True)
    return [-neg for _, neg in heap]


def evaluate(snapshot: StateSnapshot, source_id: int) -> Candidate:
    """Best take for `source_id` in isolation against `snapshot`. Pure."""
    vm = snapshot.value_model
    src = vm.sources[source_id]
    empty = Candidate(
        take=Take(source=source_id, items=[]),
        activation_cost=src.activation_cost,
        throughput=src.throughput,
    )

    remaining = snapshot.remaining
    if remaining < src.activation_cost:
        return empty
    capacity = harvest_capacity(remaining - src.activation_cost, src.throughput)
    if capacity == 0:
        return empty

    chosen = top_k_items(src.items, vm.item_scores, snapshot.available_items, capacity)
    value = sum(vm.item_scores[i] for i in chosen)
    return Candidate(
        take=Take(source=source_id, items=chosen),
        rank_value=density(value, src.activation_cost),
        value=value,
        activation_cost=src.activation_cost,
        throughput=src.throughput,
    )

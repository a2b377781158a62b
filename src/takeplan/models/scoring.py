
from __future__ import annotations
from typing import Sequence

from ..core.datatypes import Take, ValueModel, harvest_capacity
from .types import ScoreBreakdown


def score_breakdown(committed: Sequence[Take], vm: ValueModel) -> ScoreBreakdown:
    """Replay `committed` in order from clock 0.

    Each take is credited only with the prefix of its items that fits in the
    time left after its activation; capacity is recomputed here rather than
    trusted from evaluation time.
    """
    out = ScoreBreakdown()
    clock = 0
    for t in committed:
        src = vm.sources[t.source]
        bound = harvest_capacity(vm.budget - clock - src.activation_cost, src.throughput)
        counted = t.items[:bound]
        value = sum(vm.item_scores[i] for i in counted)
        out.per_take.append(value)
        out.total += value
        out.items_harvested += len(counted)
        clock += src.activation_cost
    out.clock = clock
    return out


def score(committed: Sequence[Take], vm: ValueModel) -> int:
    return score_breakdown(committed, vm).total

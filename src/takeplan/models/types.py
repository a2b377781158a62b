# src/takeplan/models/types.py
from dataclasses import dataclass, field
from typing import List

from ..core.datatypes import Take


@dataclass(frozen=True)
class Candidate:
    take: Take
    rank_value: float = 0.0  # value density; ranking only, never stored on the Take
    value: int = 0
    activation_cost: int = 0
    throughput: int = 0

    @property
    def source(self) -> int:
        return self.take.source

    def is_empty(self) -> bool:
        return self.take.is_empty()


@dataclass
class ScoreBreakdown:
    total: int = 0
    per_take: List[int] = field(default_factory=list)
    items_harvested: int = 0
    clock: int = 0  # time consumed by activations

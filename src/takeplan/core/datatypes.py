
from __future__ import annotations
import math
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import List


class Source(BaseModel):
    """An activatable source: one-time activation cost, then `throughput` items per time unit."""
    model_config = ConfigDict(frozen=True)

    activation_cost: int = Field(ge=0)
    throughput: int = Field(ge=0)
    items: List[int] = Field(default_factory=list)  # eligible item ids, ascending

    @field_validator("items")
    @classmethod
    def _sorted_unique(cls, v: List[int]) -> List[int]:
        return sorted(set(v))


def harvest_capacity(free_time: float, throughput: int) -> int:
    """Items a source can process in `free_time` after activation (never negative)."""
    if free_time <= 0 or throughput <= 0:
        return 0
    return int(math.floor(free_time * throughput))


class ValueModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    sources: List[Source] = Field(default_factory=list)
    item_scores: List[int] = Field(default_factory=list)  # dense, indexed by item id
    budget: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_refs(self) -> "ValueModel":
        n = len(self.item_scores)
        if any(s < 0 for s in self.item_scores):
            raise ValueError("item scores must be non-negative")
        for sid, src in enumerate(self.sources):
            if src.items and (src.items[0] < 0 or src.items[-1] >= n):
                raise ValueError(f"source {sid} references an item outside [0, {n})")
        return self

    @property
    def item_count(self) -> int:
        return len(self.item_scores)

    @property
    def source_count(self) -> int:
        return len(self.sources)


class Take(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: int
    items: List[int] = Field(default_factory=list)  # selection order

    def is_empty(self) -> bool:
        return not self.items

# takeplan/core/state.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Union

from .datatypes import Take, ValueModel, harvest_capacity
from .errors import EngineInvariantError


class IdSet:
    """Dense membership set over ids ``0..universe-1``, one byte per id.

    Iteration is always in ascending id order. ``freeze()`` returns a
    read-only copy backed by ``bytes``; ``discard`` on a frozen set raises.
    """

    __slots__ = ("_flags", "_count")

    def __init__(self, flags: Union[bytearray, bytes], count: int | None = None) -> None:
        self._flags = flags
        self._count = sum(flags) if count is None else count

    @classmethod
    def full(cls, universe: int) -> "IdSet":
        return cls(bytearray(b"\x01" * universe), universe)

    @classmethod
    def from_ids(cls, universe: int, ids: Iterable[int]) -> "IdSet":
        flags = bytearray(universe)
        for i in ids:
            if not 0 <= i < universe:
                raise ValueError(f"id {i} outside [0, {universe})")
            flags[i] = 1
        return cls(flags)

    @property
    def universe(self) -> int:
        return len(self._flags)

    @property
    def frozen(self) -> bool:
        return isinstance(self._flags, bytes)

    def __contains__(self, i: object) -> bool:
        return isinstance(i, int) and 0 <= i < len(self._flags) and self._flags[i] == 1

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[int]:
        flags = self._flags
        return (i for i in range(len(flags)) if flags[i])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IdSet):
            return NotImplemented
        return bytes(self._flags) == bytes(other._flags)

    def __repr__(self) -> str:
        return f"IdSet(universe={self.universe}, size={self._count}, frozen={self.frozen})"

    def discard(self, i: int) -> None:
        if self.frozen:
            raise TypeError("cannot modify a frozen IdSet")
        if self._flags[i]:
            self._flags[i] = 0
            self._count -= 1

    def freeze(self) -> "IdSet":
        return IdSet(bytes(self._flags), self._count)

    def copy(self) -> "IdSet":
        return IdSet(bytearray(self._flags), self._count)


@dataclass(frozen=True)
class StateSnapshot:
    """What every evaluator in one step gets to read. Never mutated."""
    value_model: ValueModel
    elapsed: int
    available_sources: IdSet
    available_items: IdSet

    @property
    def remaining(self) -> int:
        return self.value_model.budget - self.elapsed


@dataclass
class ScheduleState:
    value_model: ValueModel
    elapsed: int
    available_sources: IdSet
    available_items: IdSet
    committed: List[Take] = field(default_factory=list)

    @classmethod
    def initial(cls, vm: ValueModel) -> "ScheduleState":
        return cls(
            value_model=vm,
            elapsed=0,
            available_sources=IdSet.full(vm.source_count),
            available_items=IdSet.full(vm.item_count),
        )

    @property
    def budget(self) -> int:
        return self.value_model.budget

    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(
            value_model=self.value_model,
            elapsed=self.elapsed,
            available_sources=self.available_sources.freeze(),
            available_items=self.available_items.freeze(),
        )

    def consume_source(self, source_id: int) -> None:
        if source_id not in self.available_sources:
            raise EngineInvariantError(f"source {source_id} is not available")
        self.available_sources.discard(source_id)

    def commit(self, take: Take) -> None:
        """Apply a non-empty take: source and items become used, clock advances."""
        missing = [i for i in take.items if i not in self.available_items]
        if missing:
            raise EngineInvariantError(f"take for source {take.source} reuses items {missing[:5]}")
        if len(set(take.items)) != len(take.items):
            raise EngineInvariantError(f"take for source {take.source} repeats an item")
        self.consume_source(take.source)
        for i in take.items:
            self.available_items.discard(i)
        self.committed.append(take)
        self.elapsed += self.value_model.sources[take.source].activation_cost

    def check_invariants(self) -> None:
        """Raise ValueError if this state could not have come from stepping.

        Used when restoring checkpoints.
        """
        vm = self.value_model
        if self.available_sources.universe != vm.source_count:
            raise ValueError("available_sources does not match the source catalog")
        if self.available_items.universe != vm.item_count:
            raise ValueError("available_items does not match the item table")
        seen_sources: set[int] = set()
        seen_items: set[int] = set()
        clock = 0
        for t in self.committed:
            if not 0 <= t.source < vm.source_count:
                raise ValueError(f"take references unknown source {t.source}")
            if t.source in seen_sources or t.source in self.available_sources:
                raise ValueError(f"source {t.source} used twice")
            seen_sources.add(t.source)
            src = vm.sources[t.source]
            eligible = set(src.items)
            for i in t.items:
                if i in seen_items or i in self.available_items:
                    raise ValueError(f"item {i} used twice")
                if i not in eligible:
                    raise ValueError(f"item {i} not eligible for source {t.source}")
                seen_items.add(i)
            free_time = vm.budget - clock - src.activation_cost
            if free_time < 0:
                raise ValueError(f"source {t.source} activates past the budget at t={clock}")
            if len(t.items) > harvest_capacity(free_time, src.throughput):
                raise ValueError(f"take for source {t.source} exceeds its capacity at t={clock}")
            clock += src.activation_cost
        if clock != self.elapsed:
            raise ValueError(f"elapsed={self.elapsed} but committed activation costs sum to {clock}")
        if self.elapsed > vm.budget:
            raise ValueError(f"elapsed={self.elapsed} exceeds budget {vm.budget}")
        if len(self.available_items) + len(seen_items) != vm.item_count:
            raise ValueError("harvested items are missing from available_items bookkeeping")
